"""
Finding the interesting URLs of a CalDAV server: the principal of the
logged in user and its calendar-home-set (RFC 4791, section 6.2.1).

Many servers are happy to be talked to at the URL the user was given
and don't implement principals properly, so anything going wrong here
is recovered from by simply using the base URL itself.
"""
import logging
from typing import Optional
from typing import Union

from minicaldav.io.base import SyncIOProtocol
from minicaldav.lib import error
from minicaldav.lib.url import URL
from minicaldav.protocol.operations import CalDAVProtocol
from minicaldav.requests import Credentials

log = logging.getLogger(__name__)


def resolve_principal(
    io: SyncIOProtocol,
    base_url: Union[str, URL],
    credentials: Optional[Credentials] = None,
) -> URL:
    """
    Depth 0 PROPFIND for the current-user-principal.

    Raises:
        PropertyPathMissing: the response holds no principal href
        RequestFailed: non-2xx answer
        UrlJoinError: the href is not a parsable URL
    """
    protocol = CalDAVProtocol(credentials)
    request = protocol.principal_request(str(base_url))
    response = io.execute(request)
    href = protocol.parse_principal(response, request.url)
    return URL.objectify(base_url).join(href)


def resolve_home_set(
    io: SyncIOProtocol,
    principal_url: Union[str, URL],
    credentials: Optional[Credentials] = None,
) -> URL:
    """Depth 0 PROPFIND for the calendar-home-set of a principal."""
    protocol = CalDAVProtocol(credentials)
    request = protocol.home_set_request(str(principal_url))
    response = io.execute(request)
    href = protocol.parse_home_set(response, request.url)
    return URL.objectify(principal_url).join(href)


def resolve_home_set_with_fallback(
    io: SyncIOProtocol,
    base_url: Union[str, URL],
    credentials: Optional[Credentials] = None,
) -> URL:
    """
    Principal first, then its home-set.  If either step fails, the base
    URL is returned instead.
    """
    try:
        principal = resolve_principal(io, base_url, credentials)
        return resolve_home_set(io, principal, credentials)
    except error.DAVError as e:
        log.info("Calendar home-set discovery failed (%s), using %s" % (e, base_url))
        return URL.objectify(base_url)


def check_connection(
    io: SyncIOProtocol,
    url: Union[str, URL],
    credentials: Optional[Credentials] = None,
) -> URL:
    """
    Plain GET to see whether the server is there and accepts the
    credentials.  Returns the URL finally answering (redirects followed).

    Raises:
        RequestFailed: non-2xx answer
        TransportError: the server could not be reached
    """
    protocol = CalDAVProtocol(credentials)
    request = protocol.get_request(str(url))
    response = io.execute(request)
    protocol.check_response_ok(response, request.url)
    return URL.objectify(response.url or request.url)
