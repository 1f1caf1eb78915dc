#!/usr/bin/env python
from typing import ClassVar

from .base import ValuedBaseElement
from minicaldav.lib.namespace import ns


class CalendarEnabled(ValuedBaseElement):
    tag: ClassVar[str] = ns("OC", "calendar-enabled")
