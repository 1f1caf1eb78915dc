"""
CalDAV protocol operations combining request building and response parsing.

This class provides a high-level interface to CalDAV operations while
remaining completely I/O-free.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Dict, List, Optional, Union

from minicaldav import __version__
from minicaldav.lib import error

from .types import (
    CalendarDescriptor,
    ComponentReference,
    DAVMethod,
    DAVRequest,
    DAVResponse,
)
from .xml_builders import (
    build_calendar_list_body,
    build_calendar_list_query_body,
    build_calendar_query_body,
    build_home_set_body,
    build_mkcol_body,
    build_principal_body,
)
from .xml_parsers import (
    HOME_SET_PATH,
    PRINCIPAL_PATH,
    parse_calendar_list_response,
    parse_calendar_query_response,
    parse_href,
)

if TYPE_CHECKING:
    from minicaldav.requests import Credentials


class CalDAVProtocol:
    """
    Sans-I/O CalDAV protocol handler.

    Builds requests and parses responses without doing any I/O.
    All HTTP communication is delegated to an external I/O implementation.

    Example:
        protocol = CalDAVProtocol(BasicCredentials("user", "secret"))

        # Build request
        request = protocol.calendar_list_request("https://cal.example.com/dav/")

        # Execute with your I/O (not shown)
        response = io.execute(request)

        # Parse response
        calendars = protocol.parse_calendar_list(response, request.url)
    """

    def __init__(self, credentials: Optional["Credentials"] = None) -> None:
        """
        Initialize the protocol handler.

        Args:
            credentials: BasicCredentials or BearerCredentials, or None
                for unauthenticated servers
        """
        self.credentials = credentials
        self._auth_header = credentials.header_value() if credentials else None

    def _base_headers(self) -> Dict[str, str]:
        """Return base headers for all requests."""
        headers = {
            "Content-Type": "application/xml; charset=utf-8",
            "Accept": "text/xml, text/calendar",
            "User-Agent": "minicaldav/%s" % __version__,
        }
        if self._auth_header:
            headers["Authorization"] = self._auth_header
        return headers

    def _xml_request(
        self, method: DAVMethod, url: str, body: bytes, depth: Optional[int] = None
    ) -> DAVRequest:
        headers = self._base_headers()
        if depth is not None:
            headers["Depth"] = str(depth)
        return DAVRequest(method=method, url=str(url), headers=headers, body=body)

    # =========================================================================
    # Request builders
    # =========================================================================

    def principal_request(self, url: str) -> DAVRequest:
        """Depth 0 PROPFIND for the current-user-principal."""
        return self._xml_request(DAVMethod.PROPFIND, url, build_principal_body(), 0)

    def home_set_request(self, principal_url: str) -> DAVRequest:
        """Depth 0 PROPFIND for the calendar-home-set of a principal."""
        return self._xml_request(
            DAVMethod.PROPFIND, principal_url, build_home_set_body(), 0
        )

    def calendar_list_request(self, url: str) -> DAVRequest:
        """Depth 1 PROPFIND listing the collections below ``url``."""
        return self._xml_request(
            DAVMethod.PROPFIND, url, build_calendar_list_body(), 1
        )

    def calendar_list_query_request(self, url: str) -> DAVRequest:
        """Depth 1 calendar-query REPORT, the listing fallback."""
        return self._xml_request(
            DAVMethod.REPORT, url, build_calendar_list_query_body(), 1
        )

    def calendar_query_request(
        self,
        url: str,
        component: str = "VEVENT",
        start: Optional[Union[datetime, str]] = None,
        end: Optional[Union[datetime, str]] = None,
        expand: bool = False,
    ) -> DAVRequest:
        """
        Build a calendar-query REPORT request.

        Args:
            url: Calendar collection URL
            component: VEVENT or VTODO
            start: Start of time range
            end: End of time range
            expand: Expand recurring events

        Returns:
            DAVRequest ready for execution
        """
        body = build_calendar_query_body(component, start, end, expand)
        return self._xml_request(DAVMethod.REPORT, url, body, 1)

    def mkcol_request(
        self, url: str, displayname: str, color: Optional[str] = None
    ) -> DAVRequest:
        """Extended MKCOL creating a calendar collection at ``url``."""
        return self._xml_request(
            DAVMethod.MKCOL, url, build_mkcol_body(displayname, color)
        )

    def get_request(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> DAVRequest:
        """
        Build a GET request.

        Args:
            url: Resource URL
            headers: Additional headers

        Returns:
            DAVRequest ready for execution
        """
        req_headers = self._base_headers()
        req_headers.pop("Content-Type", None)  # GET doesn't need Content-Type
        if headers:
            req_headers.update(headers)

        return DAVRequest(method=DAVMethod.GET, url=str(url), headers=req_headers)

    def put_request(
        self,
        url: str,
        data: bytes,
        content_type: str = "text/calendar",
        etag: Optional[str] = None,
    ) -> DAVRequest:
        """
        Build a PUT request to create/update a resource.

        Args:
            url: Resource URL
            data: Resource content
            content_type: Content-Type header
            etag: If-Match header for conditional update

        Returns:
            DAVRequest ready for execution
        """
        headers = self._base_headers()
        headers["Content-Type"] = content_type
        if etag:
            headers["If-Match"] = etag

        return DAVRequest(method=DAVMethod.PUT, url=str(url), headers=headers, body=data)

    def delete_request(self, url: str) -> DAVRequest:
        """Build a DELETE request."""
        headers = self._base_headers()
        headers.pop("Content-Type", None)  # DELETE doesn't need Content-Type
        return DAVRequest(method=DAVMethod.DELETE, url=str(url), headers=headers)

    # =========================================================================
    # Response parsers
    # =========================================================================

    def check_response_ok(self, response: DAVResponse, url: str) -> DAVResponse:
        """
        Raise RequestFailed unless the response has a 2xx status.
        """
        if not response.ok:
            raise error.RequestFailed(
                url=url, reason=error.errmsg(response), status=response.status
            )
        return response

    def _xml_body(self, response: DAVResponse, url: str) -> bytes:
        self.check_response_ok(response, url)
        ## We cannot trust the content-type (iCloud, OX and others),
        ## so the body is parsed all the same
        content_type = response.header("Content-Type") or ""
        if content_type and not any(
            content_type.startswith(x) for x in ("text/xml", "application/xml")
        ):
            error.weirdness(f"Unexpected content type: {content_type}")
        return response.body

    def parse_principal(self, response: DAVResponse, url: str) -> str:
        """Returns the (unjoined) principal href."""
        return parse_href(self._xml_body(response, url), PRINCIPAL_PATH, url)

    def parse_home_set(self, response: DAVResponse, url: str) -> str:
        """Returns the (unjoined) calendar-home-set href."""
        return parse_href(self._xml_body(response, url), HOME_SET_PATH, url)

    def parse_calendar_list(
        self, response: DAVResponse, base_url: str
    ) -> List[CalendarDescriptor]:
        return parse_calendar_list_response(
            self._xml_body(response, base_url), base_url
        )

    def parse_calendar_query(
        self, response: DAVResponse, base_url: str
    ) -> List[ComponentReference]:
        return parse_calendar_query_response(
            self._xml_body(response, base_url), base_url
        )
