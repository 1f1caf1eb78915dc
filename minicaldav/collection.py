"""
Listing, creating and removing calendar collections.
"""
import logging
from typing import List
from typing import Optional
from typing import Union

from minicaldav.discovery import resolve_home_set_with_fallback
from minicaldav.io.base import SyncIOProtocol
from minicaldav.lib import error
from minicaldav.lib.url import URL
from minicaldav.protocol.operations import CalDAVProtocol
from minicaldav.protocol.types import CalendarDescriptor
from minicaldav.requests import Credentials

log = logging.getLogger(__name__)


def list_calendars(
    io: SyncIOProtocol,
    base_url: Union[str, URL],
    credentials: Optional[Credentials] = None,
) -> List[CalendarDescriptor]:
    """
    List the calendars (and calendar subscriptions) holding events or
    todos.

    The collections below the calendar-home-set are listed with a depth 1
    PROPFIND.  Should the server not cooperate, a calendar-query REPORT
    against base_url is tried instead; errors from that second attempt
    are raised.
    """
    protocol = CalDAVProtocol(credentials)
    home_set = resolve_home_set_with_fallback(io, base_url, credentials)
    try:
        request = protocol.calendar_list_request(str(home_set))
        response = io.execute(request)
        return protocol.parse_calendar_list(response, str(base_url))
    except (error.TransportError, error.RequestFailed, error.XmlParseError) as e:
        log.info("Listing %s failed (%s), trying calendar-query" % (home_set, e))

    request = protocol.calendar_list_query_request(str(base_url))
    response = io.execute(request)
    return protocol.parse_calendar_list(response, str(base_url))


def create_calendar(
    io: SyncIOProtocol,
    base_url: Union[str, URL],
    cal_id: str,
    name: str,
    color: Optional[str] = None,
    credentials: Optional[Credentials] = None,
) -> URL:
    """
    Create a calendar called ``name`` at ``<calendar-home-set>/<cal_id>``
    and return its URL.
    """
    protocol = CalDAVProtocol(credentials)
    home_set = resolve_home_set_with_fallback(io, base_url, credentials)
    url = home_set.join(cal_id)
    request = protocol.mkcol_request(str(url), name, color)
    response = io.execute(request)
    protocol.check_response_ok(response, request.url)
    log.debug("created calendar %s at %s" % (name, url))
    return url


def remove_calendar(
    io: SyncIOProtocol,
    base_url: Union[str, URL],
    cal_id: str,
    credentials: Optional[Credentials] = None,
) -> None:
    protocol = CalDAVProtocol(credentials)
    home_set = resolve_home_set_with_fallback(io, base_url, credentials)
    url = home_set.join(cal_id)
    request = protocol.delete_request(str(url))
    response = io.execute(request)
    protocol.check_response_ok(response, request.url)
