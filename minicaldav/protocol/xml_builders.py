"""
Pure functions for building CalDAV XML request bodies.

All functions in this module are pure - they take data in and return XML out,
with no side effects or I/O.
"""
from datetime import datetime
from typing import List
from typing import Optional
from typing import Union

from lxml import etree

from minicaldav.elements import cdav
from minicaldav.elements import dav
from minicaldav.elements import ical
from minicaldav.elements import oc
from minicaldav.elements.base import BaseElement

## Bounds used when only one end of a time range is given
DEFAULT_RANGE_START = "20000103T000000Z"
DEFAULT_RANGE_END = "21000105T000000Z"

## Sent along with new calendars, as the Nextcloud web client does
DEFAULT_CALENDAR_TIMEZONE = """BEGIN:VCALENDAR
PRODID:-//IDN nextcloud.com//Calendar app 5.2.2//EN
CALSCALE:GREGORIAN
VERSION:2.0
BEGIN:VTIMEZONE
TZID:Europe/Berlin
BEGIN:DAYLIGHT
TZOFFSETFROM:+0100
TZOFFSETTO:+0200
TZNAME:CEST
DTSTART:19700329T020000
RRULE:FREQ=YEARLY;BYMONTH=3;BYDAY=-1SU
END:DAYLIGHT
BEGIN:STANDARD
TZOFFSETFROM:+0200
TZOFFSETTO:+0100
TZNAME:CET
DTSTART:19701025T030000
RRULE:FREQ=YEARLY;BYMONTH=10;BYDAY=-1SU
END:STANDARD
END:VTIMEZONE
END:VCALENDAR
"""


def _tostring(root: BaseElement) -> bytes:
    return etree.tostring(root.xmlelement(), encoding="utf-8", xml_declaration=True)


def build_principal_body() -> bytes:
    """PROPFIND body asking for the current-user-principal."""
    propfind = dav.Propfind() + (dav.Prop() + dav.CurrentUserPrincipal())
    return _tostring(propfind)


def build_home_set_body() -> bytes:
    """PROPFIND body asking a principal for its calendar-home-set."""
    propfind = dav.Propfind() + [
        dav.Self(),
        dav.Prop() + cdav.CalendarHomeSet(),
    ]
    return _tostring(propfind)


def _listing_props() -> List[BaseElement]:
    return [
        dav.DisplayName(),
        dav.ResourceType(),
        ical.CalendarColor(),
        dav.CurrentUserPrivilegeSet(),
        cdav.SupportedCalendarComponentSet(),
    ]


def build_calendar_list_body() -> bytes:
    """
    Depth 1 PROPFIND body listing the collections below a home-set,
    with everything needed to tell calendars apart from other
    collections.
    """
    propfind = dav.Propfind() + (dav.Prop() + _listing_props())
    return _tostring(propfind)


def build_calendar_list_query_body() -> bytes:
    """
    calendar-query body used as a listing fallback for servers that
    refuse the PROPFIND listing.
    """
    prop = dav.Prop() + [dav.GetEtag()] + _listing_props()
    filter_elem = cdav.Filter() + cdav.CompFilter("VCALENDAR")
    root = cdav.CalendarQuery() + [prop, filter_elem]
    return _tostring(root)


def build_calendar_query_body(
    component: str = "VEVENT",
    start: Optional[Union[datetime, str]] = None,
    end: Optional[Union[datetime, str]] = None,
    expand: bool = False,
) -> bytes:
    """
    Build calendar-query REPORT request body.

    Without a range and without expand, all objects holding a
    ``component`` are asked for.  Otherwise calendar-data carries either
    an ``expand`` (recurrences expanded by the server) or a
    ``limit-recurrence-set`` element, and the component filter gets a
    matching ``time-range``.  A missing bound falls back to
    DEFAULT_RANGE_START / DEFAULT_RANGE_END.

    Args:
        component: Component type filter name (VEVENT, VTODO)
        start: Start of the time range, a datetime or a preformatted
               UTC date-time string
        end: End of the time range
        expand: Whether to have the server expand recurring events

    Returns:
        UTF-8 encoded XML bytes
    """
    data = cdav.CalendarData()
    comp_filter = cdav.CompFilter(component)

    if start is not None or end is not None or expand:
        if start is None:
            start = DEFAULT_RANGE_START
        if end is None:
            end = DEFAULT_RANGE_END
        if expand:
            data += cdav.Expand(start, end)
        else:
            data += cdav.LimitRecurrenceSet(start, end)
        comp_filter += cdav.TimeRange(start, end)

    prop = dav.Prop() + [dav.GetEtag(), data]
    vcalendar = cdav.CompFilter("VCALENDAR") + comp_filter
    root = cdav.CalendarQuery() + [prop, cdav.Filter() + vcalendar]
    return _tostring(root)


def build_mkcol_body(
    displayname: str,
    color: Optional[str] = None,
    timezone: str = DEFAULT_CALENDAR_TIMEZONE,
    supported_components: Optional[List[str]] = None,
) -> bytes:
    """
    Build the extended MKCOL (RFC 5689) request body creating a calendar.

    Args:
        displayname: Calendar display name
        color: Calendar color, i.e. "#ff0000"
        timezone: VCALENDAR text holding the calendar's VTIMEZONE
        supported_components: Component types, VEVENT by default

    Returns:
        UTF-8 encoded XML bytes
    """
    if supported_components is None:
        supported_components = ["VEVENT"]

    prop = dav.Prop() + [
        dav.ResourceType() + [dav.Collection(), cdav.Calendar()],
        dav.DisplayName(displayname),
    ]
    if color is not None:
        prop += ical.CalendarColor(color)
    prop += oc.CalendarEnabled("1")
    if timezone:
        prop += cdav.CalendarTimeZone(timezone)

    sccs = cdav.SupportedCalendarComponentSet()
    for comp in supported_components:
        sccs += cdav.Comp(comp)
    prop += sccs

    mkcol = dav.Mkcol() + (dav.Set() + prop)
    return _tostring(mkcol)

