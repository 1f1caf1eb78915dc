#!/usr/bin/env python
import logging

## setup.py reads the version from this line
__version__ = "2.2.0"

from .calendarobjectresource import fetch_components
from .calendarobjectresource import fetch_subscription_export
from .calendarobjectresource import get_components
from .calendarobjectresource import remove
from .calendarobjectresource import save
from .collection import create_calendar
from .collection import list_calendars
from .collection import remove_calendar
from .discovery import check_connection
from .discovery import resolve_home_set
from .discovery import resolve_home_set_with_fallback
from .discovery import resolve_principal
from .ical import Node
from .ical import Property
from .io import SyncIO
from .protocol.types import CalendarDescriptor
from .protocol.types import ComponentReference
from .protocol.types import ParsedComponent
from .requests import BasicCredentials
from .requests import BearerCredentials
from .results import parse_batch

# Silence notification of no default logging handler
log = logging.getLogger("minicaldav")
log.addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "BasicCredentials",
    "BearerCredentials",
    "CalendarDescriptor",
    "ComponentReference",
    "Node",
    "ParsedComponent",
    "Property",
    "SyncIO",
    "check_connection",
    "create_calendar",
    "fetch_components",
    "fetch_subscription_export",
    "get_components",
    "list_calendars",
    "parse_batch",
    "remove",
    "remove_calendar",
    "resolve_home_set",
    "resolve_home_set_with_fallback",
    "resolve_principal",
    "save",
]
