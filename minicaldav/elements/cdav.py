#!/usr/bin/env python
from datetime import date
from datetime import datetime
from datetime import timezone
from typing import ClassVar
from typing import Optional
from typing import Union

from .base import BaseElement
from .base import NamedBaseElement
from .base import ValuedBaseElement
from minicaldav.lib.namespace import ns

utc_tz = timezone.utc


def _to_utc_date_string(ts: Union[date, datetime, str]) -> str:
    """coerce datetimes to UTC (assume localtime if nothing is given).
    Strings are assumed to be preformatted and passed on as they are."""
    if isinstance(ts, str):
        return ts
    if isinstance(ts, datetime):
        ## ts.astimezone() treats a naive timestamp as localtime
        ts = ts.astimezone(utc_tz)
    return ts.strftime("%Y%m%dT%H%M%SZ")


# Operations
class CalendarQuery(BaseElement):
    tag: ClassVar[str] = ns("C", "calendar-query")


# Filters
class Filter(BaseElement):
    tag: ClassVar[str] = ns("C", "filter")


class CompFilter(NamedBaseElement):
    tag: ClassVar[str] = ns("C", "comp-filter")


class _RangeElement(BaseElement):
    def __init__(
        self,
        start: Optional[Union[datetime, str]] = None,
        end: Optional[Union[datetime, str]] = None,
    ) -> None:
        ## start and end should be an icalendar "date with UTC time",
        ## ref https://tools.ietf.org/html/rfc4791#section-9.9
        super().__init__()
        if start is not None:
            self.attributes["start"] = _to_utc_date_string(start)
        if end is not None:
            self.attributes["end"] = _to_utc_date_string(end)


# Conditions
class TimeRange(_RangeElement):
    tag: ClassVar[str] = ns("C", "time-range")


# Components / Data
class CalendarData(BaseElement):
    tag: ClassVar[str] = ns("C", "calendar-data")


class Expand(_RangeElement):
    tag: ClassVar[str] = ns("C", "expand")


class LimitRecurrenceSet(_RangeElement):
    tag: ClassVar[str] = ns("C", "limit-recurrence-set")


class Comp(NamedBaseElement):
    tag: ClassVar[str] = ns("C", "comp")


# Properties
class CalendarHomeSet(BaseElement):
    tag: ClassVar[str] = ns("C", "calendar-home-set")


# calendar resource type, see rfc4791, sec. 4.2
class Calendar(BaseElement):
    tag: ClassVar[str] = ns("C", "calendar")


class CalendarTimeZone(ValuedBaseElement):
    tag: ClassVar[str] = ns("C", "calendar-timezone")


class SupportedCalendarComponentSet(ValuedBaseElement):
    tag: ClassVar[str] = ns("C", "supported-calendar-component-set")
