"""
Core protocol types for the Sans-I/O CalDAV implementation.

These dataclasses represent HTTP requests and responses at the protocol level,
independent of any I/O implementation, together with the calendar level
results the protocol layer hands back to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from minicaldav.ical import Node


class DAVMethod(Enum):
    """WebDAV/CalDAV HTTP methods."""

    GET = "GET"
    PUT = "PUT"
    DELETE = "DELETE"
    PROPFIND = "PROPFIND"
    REPORT = "REPORT"
    MKCOL = "MKCOL"


@dataclass(frozen=True)
class DAVRequest:
    """
    Represents an HTTP request to be made.

    This is a pure data structure with no I/O. It describes what request
    should be made, but does not make it.

    Attributes:
        method: HTTP method (GET, PUT, PROPFIND, etc.)
        url: Full URL for the request
        headers: HTTP headers as dict
        body: Request body as bytes (optional)
    """

    method: DAVMethod
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass(frozen=True)
class DAVResponse:
    """
    Represents an HTTP response received.

    Attributes:
        status: HTTP status code
        headers: HTTP headers as dict
        body: Response body as bytes
        url: The URL the response was finally served from (after redirects)
        reason_phrase: Reason phrase as sent by the server, if known
    """

    status: int
    headers: dict[str, str]
    body: bytes
    url: str = ""
    reason_phrase: str = ""

    @property
    def ok(self) -> bool:
        """True if status indicates success (2xx)."""
        return 200 <= self.status < 300

    @property
    def reason(self) -> str:
        """The server's reason phrase, else a stock one for the status code."""
        if self.reason_phrase:
            return self.reason_phrase
        reasons = {
            200: "OK",
            201: "Created",
            204: "No Content",
            207: "Multi-Status",
            301: "Moved Permanently",
            302: "Found",
            400: "Bad Request",
            401: "Unauthorized",
            403: "Forbidden",
            404: "Not Found",
            405: "Method Not Allowed",
            409: "Conflict",
            412: "Precondition Failed",
            415: "Unsupported Media Type",
            500: "Internal Server Error",
            501: "Not Implemented",
            502: "Bad Gateway",
            503: "Service Unavailable",
        }
        return reasons.get(self.status, "Unknown")

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace") if self.body else ""

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return None


@dataclass(frozen=True)
class CalendarDescriptor:
    """
    A calendar collection as found by enumeration.

    Attributes:
        url: Absolute URL of the collection
        display_name: The displayname property
        color: The apple calendar-color, if the server provides one
        privileges: Local names of the current-user-privilege-set
        is_subscription: True for calendarserver "subscribed" collections
    """

    url: str
    display_name: str
    color: str | None = None
    privileges: frozenset[str] = frozenset()
    is_subscription: bool = False

    @property
    def writable(self) -> bool:
        return "write" in self.privileges


@dataclass(frozen=True)
class ComponentReference:
    """One fetched but not yet parsed calendar object."""

    url: str
    etag: str | None
    raw_text: str


@dataclass
class ParsedComponent:
    """
    A parsed calendar object together with where it came from.

    ``etag`` is None until the server hands one out; ``save`` updates both
    ``etag`` and ``node`` after a successful PUT.
    """

    url: str
    etag: str | None
    node: Node
