#!/usr/bin/env python
import sys
from typing import ClassVar
from typing import Dict
from typing import List
from typing import Optional
from typing import Sequence
from typing import Union

from lxml import etree
from lxml.etree import _Element

from minicaldav.lib.namespace import nsmap
from minicaldav.lib.python_utilities import to_unicode

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self


class BaseElement:
    """
    Request body building block.  Elements are combined with ``+``::

        Propfind() + [Prop() + [DisplayName(), ResourceType()]]

    and turned into lxml with ``xmlelement()``.
    """

    tag: ClassVar[Optional[str]] = None
    ## namespace prefixes declared on the element when it is the root
    namespaces: ClassVar[Dict[str, str]] = nsmap

    def __init__(
        self, name: Optional[str] = None, value: Union[str, bytes, None] = None
    ) -> None:
        self.children: List[BaseElement] = []
        self.attributes: Dict[str, str] = {}
        self.value: Optional[str] = to_unicode(value)
        if name is not None:
            self.attributes["name"] = name

    def __add__(self, other: Union["BaseElement", Sequence["BaseElement"]]) -> Self:
        return self.append(other)

    def __str__(self) -> str:
        return etree.tostring(
            self.xmlelement(), encoding="utf-8", xml_declaration=True, pretty_print=True
        ).decode("utf-8")

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self.attributes or self.value)

    def xmlelement(self) -> _Element:
        if self.tag is None:
            raise ValueError("%s has no tag" % self.__class__.__name__)
        root = etree.Element(self.tag, nsmap=self.namespaces)
        if self.value is not None:
            root.text = self.value
        for key, value in self.attributes.items():
            root.set(key, value)
        for child in self.children:
            root.append(child.xmlelement())
        return root

    def append(self, element: Union["BaseElement", Sequence["BaseElement"]]) -> Self:
        if isinstance(element, BaseElement):
            self.children.append(element)
        else:
            self.children.extend(element)
        return self


class NamedBaseElement(BaseElement):
    """An element that is useless without a name attribute (comp, comp-filter)"""

    def __init__(self, name: Optional[str] = None) -> None:
        super().__init__(name=name)

    def xmlelement(self) -> _Element:
        if self.attributes.get("name") is None:
            raise ValueError("name attribute must be defined for %s" % self.tag)
        return super().xmlelement()


class ValuedBaseElement(BaseElement):
    def __init__(self, value: Union[str, bytes, None] = None) -> None:
        super().__init__(value=value)
