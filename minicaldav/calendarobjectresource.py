"""
Fetching, saving and removing calendar objects (the single .ics
resources inside a calendar collection).
"""
import copy
import logging
from datetime import datetime
from typing import List
from typing import Optional
from typing import Tuple
from typing import Union

from minicaldav.ical import Node
from minicaldav.io.base import SyncIOProtocol
from minicaldav.lib.error import ComponentParseError
from minicaldav.lib.python_utilities import to_wire
from minicaldav.lib.url import URL
from minicaldav.protocol.operations import CalDAVProtocol
from minicaldav.protocol.types import CalendarDescriptor
from minicaldav.protocol.types import ComponentReference
from minicaldav.protocol.types import ParsedComponent
from minicaldav.requests import Credentials
from minicaldav.results import parse_batch

log = logging.getLogger(__name__)


def fetch_components(
    io: SyncIOProtocol,
    base_url: Union[str, URL],
    calendar_url: Union[str, URL],
    credentials: Optional[Credentials] = None,
    start: Optional[Union[datetime, str]] = None,
    end: Optional[Union[datetime, str]] = None,
    expand: bool = False,
    component: str = "VEVENT",
) -> List[ComponentReference]:
    """
    calendar-query REPORT for the objects of a calendar holding a
    ``component`` (VEVENT or VTODO).

    With ``start``, ``end`` or ``expand`` given, only objects within the
    range are asked for, and with ``expand`` the server is asked to
    expand recurrences into single instances.  Hrefs in the answer are
    resolved against base_url.
    """
    protocol = CalDAVProtocol(credentials)
    request = protocol.calendar_query_request(
        str(calendar_url), component, start=start, end=end, expand=expand
    )
    response = io.execute(request)
    return protocol.parse_calendar_query(response, str(base_url))


def fetch_subscription_export(
    io: SyncIOProtocol,
    calendar_url: Union[str, URL],
    credentials: Optional[Credentials] = None,
) -> ComponentReference:
    """
    Subscriptions can't be queried, but most servers hand out the whole
    subscribed calendar at ``<calendar_url>?export``.
    """
    protocol = CalDAVProtocol(credentials)
    url = URL.objectify(calendar_url).with_query("export")
    request = protocol.get_request(str(url))
    response = io.execute(request)
    protocol.check_response_ok(response, request.url)
    return ComponentReference(url=str(url), etag=None, raw_text=response.text)


def get_components(
    io: SyncIOProtocol,
    base_url: Union[str, URL],
    calendar: CalendarDescriptor,
    credentials: Optional[Credentials] = None,
    start: Optional[Union[datetime, str]] = None,
    end: Optional[Union[datetime, str]] = None,
    expand: bool = False,
    component: str = "VEVENT",
) -> Tuple[List[ParsedComponent], List[ComponentParseError]]:
    """
    Fetch and parse the objects of a calendar.  Returns the parsed
    components and the errors of the ones that failed to parse.
    """
    if calendar.is_subscription:
        refs = [fetch_subscription_export(io, calendar.url, credentials)]
    else:
        refs = fetch_components(
            io,
            base_url,
            calendar.url,
            credentials,
            start=start,
            end=end,
            expand=expand,
            component=component,
        )
    return parse_batch(refs)


def _bump_sequence(event: Node) -> None:
    value = event.get_value("SEQUENCE")
    if value is None:
        return
    try:
        sequence = int(value.strip())
    except ValueError:
        log.debug("non-numeric SEQUENCE %r left alone" % value)
        return
    event.set_value("SEQUENCE", str(sequence + 1))


def save(
    io: SyncIOProtocol,
    component: ParsedComponent,
    credentials: Optional[Credentials] = None,
    fold: bool = False,
    if_match: bool = False,
) -> ParsedComponent:
    """
    PUT a component to its url.

    The SEQUENCE of every event in it is increased by one.  Only when the
    server accepts the object are ``component.node`` and
    ``component.etag`` updated; the etag is the one from the ETag header
    of the answer, or None if the server did not send one.

    Args:
        fold: fold lines longer than 75 octets
        if_match: only overwrite the object if it still has the etag we know

    Raises:
        RequestFailed: non-2xx answer, the component is left untouched
    """
    protocol = CalDAVProtocol(credentials)
    node = copy.deepcopy(component.node)
    for event in node.get_all("VEVENT"):
        _bump_sequence(event)

    request = protocol.put_request(
        component.url,
        to_wire(node.to_ical(fold=fold)),
        etag=component.etag if if_match else None,
    )
    response = io.execute(request)
    protocol.check_response_ok(response, request.url)

    component.node = node
    component.etag = response.header("ETag")
    return component


def remove(
    io: SyncIOProtocol,
    url: Union[str, URL],
    credentials: Optional[Credentials] = None,
) -> None:
    """DELETE a calendar object."""
    protocol = CalDAVProtocol(credentials)
    request = protocol.delete_request(str(url))
    response = io.execute(request)
    protocol.check_response_ok(response, request.url)
