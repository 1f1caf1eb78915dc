"""
Turns fetched calendar objects into parsed ones without letting a
single broken object spoil the whole batch.
"""
import logging
from typing import Iterable
from typing import List
from typing import Tuple

from minicaldav import ical
from minicaldav.lib.error import ComponentParseError
from minicaldav.lib.error import ICalError
from minicaldav.protocol.types import ComponentReference
from minicaldav.protocol.types import ParsedComponent

log = logging.getLogger(__name__)


def parse_batch(
    refs: Iterable[ComponentReference],
) -> Tuple[List[ParsedComponent], List[ComponentParseError]]:
    """
    Parse every reference on its own.

    Returns the successfully parsed components and, separately, one
    ComponentParseError per object that could not be parsed, carrying
    the url, the raw text as received and the codec error.  Order is
    kept within both lists.
    """
    parsed: List[ParsedComponent] = []
    failures: List[ComponentParseError] = []
    for ref in refs:
        try:
            node = ical.parse(ref.raw_text)
        except ICalError as e:
            log.warning("Could not parse calendar object at %s: %s", ref.url, e)
            failures.append(
                ComponentParseError(url=ref.url, raw_text=ref.raw_text, cause=e)
            )
            continue
        parsed.append(ParsedComponent(url=ref.url, etag=ref.etag, node=node))
    return parsed, failures
