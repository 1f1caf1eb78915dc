"""
Sans-I/O CalDAV protocol layer.

Request bodies are built and responses interpreted here without doing
any network I/O.  See ``minicaldav.io`` for the transport side.
"""
from .operations import CalDAVProtocol
from .types import CalendarDescriptor
from .types import ComponentReference
from .types import DAVMethod
from .types import DAVRequest
from .types import DAVResponse
from .types import ParsedComponent

__all__ = [
    "CalDAVProtocol",
    "CalendarDescriptor",
    "ComponentReference",
    "DAVMethod",
    "DAVRequest",
    "DAVResponse",
    "ParsedComponent",
]
