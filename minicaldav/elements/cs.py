#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from minicaldav.lib.namespace import ns


## calendarserver.org extension, marks subscribed (read-only) calendars
class Subscribed(BaseElement):
    tag: ClassVar[str] = ns("CS", "subscribed")
