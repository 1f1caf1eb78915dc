"""
Pure functions for parsing CalDAV XML responses.

All functions in this module are pure - they take XML bytes in and return
structured data out, with no side effects or I/O.

Elements are matched on their local name only.  Some servers answer with
unusual namespace prefixes (or no namespace at all), and the handful of
fixed paths walked here are unambiguous without the namespace.
"""

from __future__ import annotations

import logging
from typing import Iterator, Sequence

from lxml import etree
from lxml.etree import _Element

from minicaldav.elements import cdav, cs, dav, ical
from minicaldav.lib import error
from minicaldav.lib.url import URL

from .types import CalendarDescriptor, ComponentReference

log = logging.getLogger(__name__)


def _local(tag: str) -> str:
    return etree.QName(tag).localname


MULTISTATUS = _local(dav.MultiStatus.tag)
RESPONSE = _local(dav.Response.tag)
HREF = _local(dav.Href.tag)
PROPSTAT = _local(dav.PropStat.tag)
PROP = _local(dav.Prop.tag)
DISPLAYNAME = _local(dav.DisplayName.tag)
GETETAG = _local(dav.GetEtag.tag)
RESOURCETYPE = _local(dav.ResourceType.tag)
PRIVILEGE_SET = _local(dav.CurrentUserPrivilegeSet.tag)
CALENDAR_COLOR = _local(ical.CalendarColor.tag)
COMPONENT_SET = _local(cdav.SupportedCalendarComponentSet.tag)
COMP = _local(cdav.Comp.tag)
CALENDAR_DATA = _local(cdav.CalendarData.tag)
CALENDAR = _local(cdav.Calendar.tag)
SUBSCRIBED = _local(cs.Subscribed.tag)

PRINCIPAL_PATH = (
    RESPONSE,
    PROPSTAT,
    PROP,
    _local(dav.CurrentUserPrincipal.tag),
    HREF,
)
HOME_SET_PATH = (RESPONSE, PROPSTAT, PROP, _local(cdav.CalendarHomeSet.tag), HREF)

## Components a collection must support to be listed
LISTED_COMPONENTS = ("VEVENT", "VTODO")


def parse_xml(body: bytes, url: str | None = None) -> _Element:
    """
    Parse a response body into an element tree.

    Raises:
        XmlParseError: If body is empty or not well-formed XML
    """
    if not body:
        raise error.XmlParseError(url=url, reason="empty response body")
    try:
        return etree.fromstring(body, etree.XMLParser())
    except etree.XMLSyntaxError as e:
        raise error.XmlParseError(url=url, reason=str(e)) from e


def _multistatus(body: bytes, url: str | None = None) -> _Element:
    root = parse_xml(body, url)
    if _local(root.tag) != MULTISTATUS:
        error.weirdness("expected a multistatus response", root)
    return root


def _children(elem: _Element, name: str) -> Iterator[_Element]:
    for child in elem:
        ## comments and processing instructions have no string tag
        if isinstance(child.tag, str) and _local(child.tag) == name:
            yield child


def find(elem: _Element, path: Sequence[str]) -> _Element | None:
    """
    Walk ``path`` (local names) below ``elem``.  Every matching child is
    tried at each step, so a property found in the second propstat of a
    response is found as well.
    """
    if not path:
        return elem
    for child in _children(elem, path[0]):
        found = find(child, path[1:])
        if found is not None:
            return found
    return None


def find_text(elem: _Element, path: Sequence[str]) -> str | None:
    found = find(elem, path)
    if found is None:
        return None
    return found.text


def find_path(root: _Element, path: Sequence[str], url: str | None = None) -> _Element:
    """
    Like ``find``, but a missing path is an error.

    Raises:
        PropertyPathMissing: If any segment of the path is absent
    """
    found = find(root, path)
    if found is None:
        raise error.PropertyPathMissing(url=url, path=path)
    return found


def parse_href(body: bytes, path: Sequence[str], url: str | None = None) -> str:
    """
    Parse a depth 0 PROPFIND response and return the (stripped) text of
    the href found at ``path``.
    """
    root = _multistatus(body, url)
    href = find_path(root, path, url).text
    if not href or not href.strip():
        raise error.PropertyPathMissing(url=url, path=path, reason="empty href")
    return href.strip()


def _join(base_url: str, href: str) -> str | None:
    try:
        return str(URL.objectify(base_url).join(href))
    except error.UrlJoinError as e:
        log.error("Could not join %s with %s: %s", base_url, href, e)
        return None


def parse_calendar_list_response(
    body: bytes, base_url: str
) -> list[CalendarDescriptor]:
    """
    Parse a depth 1 calendar listing (PROPFIND or calendar-query).

    Only calendar or subscription collections supporting VEVENT or VTODO
    are returned.  Responses without href or displayname are skipped, and
    so are hrefs that aren't parsable URLs.
    """
    root = _multistatus(body, base_url)
    calendars: list[CalendarDescriptor] = []

    for response in _children(root, RESPONSE):
        href = find_text(response, (HREF,))
        name = find_text(response, (PROPSTAT, PROP, DISPLAYNAME))
        color = find_text(response, (PROPSTAT, PROP, CALENDAR_COLOR))

        resourcetype = find(response, (PROPSTAT, PROP, RESOURCETYPE))
        is_calendar = resourcetype is not None and any(
            True for _ in _children(resourcetype, CALENDAR)
        )
        is_subscription = resourcetype is not None and any(
            True for _ in _children(resourcetype, SUBSCRIBED)
        )

        component_set = find(response, (PROPSTAT, PROP, COMPONENT_SET))
        supported = set()
        if component_set is not None:
            supported = {comp.get("name") for comp in _children(component_set, COMP)}

        privileges = set()
        privilege_set = find(response, (PROPSTAT, PROP, PRIVILEGE_SET))
        if privilege_set is not None:
            for privilege in _children(privilege_set, "privilege"):
                for p in privilege:
                    if isinstance(p.tag, str):
                        privileges.add(_local(p.tag))

        if not (is_calendar or is_subscription):
            log.debug("Skipping %s, not a calendar", href)
            continue
        if not supported.intersection(LISTED_COMPONENTS):
            log.debug("Skipping %s, no events or todos supported", href)
            continue
        if not href or not href.strip() or name is None:
            log.debug("Skipping response without href or displayname")
            continue

        url = _join(base_url, href.strip())
        if url is None:
            continue

        calendars.append(
            CalendarDescriptor(
                url=url,
                display_name=name,
                color=color,
                privileges=frozenset(privileges),
                is_subscription=is_subscription,
            )
        )

    return calendars


def parse_calendar_query_response(
    body: bytes, base_url: str
) -> list[ComponentReference]:
    """
    Parse a calendar-query REPORT response into component references.

    Entries missing any of href, getetag or calendar-data are skipped.
    """
    root = _multistatus(body, base_url)
    refs: list[ComponentReference] = []

    for response in _children(root, RESPONSE):
        href = find_text(response, (HREF,))
        etag = find_text(response, (PROPSTAT, PROP, GETETAG))
        data = find_text(response, (PROPSTAT, PROP, CALENDAR_DATA))
        if not href or etag is None or data is None:
            log.debug("Skipping incomplete calendar-query entry %s", href)
            continue

        url = _join(base_url, href.strip())
        if url is None:
            continue
        refs.append(ComponentReference(url=url, etag=etag, raw_text=data))

    return refs
