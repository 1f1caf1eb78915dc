"""
A small reader and writer for the iCalendar (RFC 5545) text format.

Only the structure is understood: ``BEGIN:X`` ... ``END:X`` blocks become
:class:`Node` objects holding :class:`Property` lines and child nodes.
Values and parameters are kept as text, exactly as found on the wire
(quotes included), so that data can be written back unchanged.  There
is no validation of property cardinality, value types or recurrence
rules.

Example::

    cal = Node.parse(text)
    event = cal.get("VEVENT")
    event.set_value("SUMMARY", "Lunch")
    text = cal.to_ical()
"""
import logging
from dataclasses import dataclass
from dataclasses import field
from typing import Dict
from typing import List
from typing import Optional

from minicaldav.lib.error import EmptyOrInvalidInput
from minicaldav.lib.error import PropertyParseError
from minicaldav.lib.error import UnterminatedContainer

log = logging.getLogger(__name__)

## RFC 5545, section 3.1: lines SHOULD NOT be longer than 75 octets
MAX_LINE_OCTETS = 75


def _find_unquoted(text: str, char: str) -> Optional[int]:
    """Index of the first ``char`` not inside double quotes, or None"""
    quoted = False
    for i, c in enumerate(text):
        if c == '"':
            quoted = not quoted
        elif c == char and not quoted:
            return i
    return None


def _split_unquoted(text: str, char: str) -> List[str]:
    parts = []
    quoted = False
    start = 0
    for i, c in enumerate(text):
        if c == '"':
            quoted = not quoted
        elif c == char and not quoted:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return parts


@dataclass
class Property:
    """
    One content line, i.e. ``DTSTART;TZID=Europe/Berlin:20220101T100000``
    is ``Property("DTSTART", "20220101T100000", {"TZID": "Europe/Berlin"})``.
    """

    name: str
    value: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, line: str) -> "Property":
        """
        The name segment ends at the first colon outside double quotes,
        as parameter values (time zone names and the like) may contain
        colons themselves.
        """
        idx = _find_unquoted(line, ":")
        if idx is None:
            raise PropertyParseError(line)
        parts = _split_unquoted(line[:idx], ";")
        name = parts[0].strip()
        if not name:
            raise PropertyParseError(line)
        prop = cls(name, line[idx + 1 :])
        for part in parts[1:]:
            if "=" in part:
                key, value = part.split("=", 1)
                prop.attributes[key] = value
        return prop

    def is_(self, name: str) -> Optional[str]:
        """Returns the value if this property is called ``name``"""
        if self.name == name:
            return self.value
        return None

    def to_ical(self) -> str:
        if self.attributes:
            params = ";".join("%s=%s" % (k, v) for k, v in self.attributes.items())
            return "%s;%s:%s" % (self.name, params, self.value)
        return "%s:%s" % (self.name, self.value)


@dataclass
class Node:
    """A ``BEGIN:<name>`` ... ``END:<name>`` block"""

    name: str
    properties: List[Property] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> "Node":
        return parse(text)

    def get(self, child_name: str) -> Optional["Node"]:
        for child in self.children:
            if child.name == child_name:
                return child
        return None

    def get_all(self, child_name: str) -> List["Node"]:
        return [child for child in self.children if child.name == child_name]

    def get_property(self, name: str) -> Optional[Property]:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def get_value(self, name: str) -> Optional[str]:
        prop = self.get_property(name)
        return prop.value if prop is not None else None

    def set_value(self, name: str, value: str) -> Property:
        """
        Replaces the value of the first property called ``name``
        (keeping its attributes), or appends a new property.
        """
        prop = self.get_property(name)
        if prop is None:
            prop = Property(name, value)
            self.properties.append(prop)
        else:
            prop.value = value
        return prop

    def to_ical(self, fold: bool = False) -> str:
        return serialize(self, fold=fold)


class LineCursor:
    """
    Walks the physical lines of a text.  Lines are split on LF, a
    trailing CR is dropped.
    """

    def __init__(self, text: str) -> None:
        self.lines = [
            line[:-1] if line.endswith("\r") else line for line in text.split("\n")
        ]
        self.pos = 0

    def next(self) -> Optional[str]:
        if self.pos >= len(self.lines):
            return None
        line = self.lines[self.pos]
        self.pos += 1
        return line


def parse(text: str) -> Node:
    """
    Parse icalendar text into a tree of nodes, returning the outermost
    one.

    Folded lines (continuations starting with one space or tab) are
    joined.  Folding may have happened after a property line was already
    complete and stored, in which case that property is taken back and
    continued.  Lines without an unquoted colon are held back until the
    continuation completing them shows up.

    Raises:
        PropertyParseError: a logical line has no name or no value separator
        UnterminatedContainer: input ended inside a BEGIN/END block
        EmptyOrInvalidInput: no BEGIN line at all
    """
    cursor = LineCursor(text)
    stack: List[Node] = []
    buffer = ""

    while True:
        line = cursor.next()
        if line is None:
            break
        if not line.strip():
            continue

        if line[0] in " \t":
            if not buffer and stack and stack[-1].properties:
                buffer = stack[-1].properties.pop().to_ical()
            buffer += line[1:]
            continue

        complete = _find_unquoted(line, ":") is not None
        if not complete and not buffer:
            buffer = line
            continue
        if buffer:
            prop = Property.parse(buffer)
            buffer = ""
            if stack:
                stack[-1].properties.append(prop)
        if not complete:
            buffer = line
            continue

        prop = Property.parse(line)
        if prop.name == "BEGIN":
            stack.append(Node(prop.value.strip()))
            continue
        if not stack:
            log.debug("ignoring %s outside of any BEGIN/END block", prop.name)
            continue
        if prop.name == "END":
            if prop.value.strip() == stack[-1].name:
                node = stack.pop()
                if not stack:
                    return node
                stack[-1].children.append(node)
                continue
            log.warning(
                "END:%s found inside %s, kept as property", prop.value, stack[-1].name
            )
        stack[-1].properties.append(prop)

    if stack:
        raise UnterminatedContainer(stack[-1].name)
    raise EmptyOrInvalidInput()


def fold_line(line: str, limit: int = MAX_LINE_OCTETS) -> List[str]:
    """
    Split a content line into physical lines of at most ``limit`` octets
    (utf-8), continuation lines starting with a single space.  Multi-byte
    characters are never split.
    """
    if len(line.encode("utf-8")) <= limit:
        return [line]
    chunks = []
    current = ""
    size = 0
    room = limit
    for char in line:
        octets = len(char.encode("utf-8"))
        if size + octets > room:
            chunks.append(current)
            current = ""
            size = 0
            ## the leading space counts as well
            room = limit - 1
        current += char
        size += octets
    chunks.append(current)
    return chunks[:1] + [" " + chunk for chunk in chunks[1:]]


def _lines(node: Node) -> List[str]:
    lines = ["BEGIN:%s" % node.name]
    lines.extend(prop.to_ical() for prop in node.properties)
    for child in node.children:
        lines.extend(_lines(child))
    lines.append("END:%s" % node.name)
    return lines


def serialize(node: Node, fold: bool = False) -> str:
    """
    Render a node as icalendar text, every line terminated by LF.

    Long lines are left alone unless ``fold`` is set, in which case they
    are folded at 75 octets.
    """
    lines = _lines(node)
    if fold:
        lines = [physical for line in lines for physical in fold_line(line)]
    return "".join(line + "\n" for line in lines)
