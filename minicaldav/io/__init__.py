"""
I/O layer for the CalDAV protocol.

The I/O layer is intentionally thin - it only handles HTTP transport.
All protocol logic (XML building/parsing) is in minicaldav.protocol.

Example:
    from minicaldav.protocol import CalDAVProtocol
    from minicaldav.io import SyncIO

    protocol = CalDAVProtocol(credentials)
    with SyncIO() as io:
        request = protocol.calendar_list_request("https://cal.example.com/dav/")
        response = io.execute(request)
        calendars = protocol.parse_calendar_list(response, request.url)
"""

from .base import SyncIOProtocol
from .sync import SyncIO

__all__ = [
    "SyncIOProtocol",
    "SyncIO",
]
