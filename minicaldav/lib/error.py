#!/usr/bin/env python
import logging
import os
from typing import Optional

from minicaldav import __version__

## Environmental variables prepended with "PYTHON_MINICALDAV" are used for
## debug purposes, variables prepended with "MINICALDAV_" are for
## connection parameters (see minicaldav.config)
debug_dump_communication = os.environ.get("PYTHON_MINICALDAV_COMMDUMP", False)
## one of DEBUG, DEVELOPMENT, PRODUCTION
debugmode = os.environ.get("PYTHON_MINICALDAV_DEBUGMODE")
if not debugmode:
    if "dev" in __version__ or __version__ == "(unknown)":
        debugmode = "DEVELOPMENT"
    else:
        debugmode = "PRODUCTION"

log = logging.getLogger("minicaldav")
if debugmode.startswith("DEBUG"):
    log.setLevel(logging.DEBUG)
else:
    log.setLevel(logging.WARNING)


def errmsg(r) -> str:
    """Utility for formatting an error response to an error string"""
    return "%s %s\n\n%s" % (r.status, r.reason, r.text)


def weirdness(*reasons) -> None:
    from minicaldav.lib.debug import xmlstring

    reason = " : ".join([xmlstring(x) for x in reasons])
    log.warning(f"Deviation from expectations found: {reason}")


class DAVError(Exception):
    url: Optional[str] = None
    reason: str = "no reason"

    def __init__(self, url: Optional[str] = None, reason: Optional[str] = None) -> None:
        if url:
            self.url = str(url)
        if reason:
            self.reason = reason
        super().__init__(self.url, self.reason)

    def __str__(self) -> str:
        return "%s at '%s', reason %s" % (
            self.__class__.__name__,
            self.url,
            self.reason,
        )


class TransportError(DAVError):
    """
    The HTTP library could not deliver the request or read the answer
    (connection refused, TLS trouble, timeouts ...).  Non-2xx answers
    are not transport errors, see RequestFailed.
    """

    pass


class XmlParseError(DAVError):
    pass


class UrlJoinError(DAVError, ValueError):
    pass


class PropertyPathMissing(DAVError):
    """
    An expected element path was not found in a multistatus response.
    Discovery catches this one and falls back to the base URL.
    """

    path: tuple = ()

    def __init__(self, url=None, path=(), reason=None) -> None:
        self.path = tuple(path)
        if reason is None:
            reason = "could not find %s in response" % "/".join(self.path)
        super().__init__(url=url, reason=reason)


class RequestFailed(DAVError):
    """
    The server answered with a status outside of the 2xx range.
    """

    status: int = 0

    def __init__(self, url=None, reason=None, status: int = 0) -> None:
        self.status = status
        super().__init__(url=url, reason=reason)


class ComponentParseError(DAVError):
    """
    One calendar object fetched from the server could not be parsed.
    The offending data is kept in raw_text, the codec error in cause.
    """

    raw_text: str = ""
    cause: Optional[Exception] = None

    def __init__(self, url=None, raw_text: str = "", cause=None) -> None:
        self.raw_text = raw_text
        self.cause = cause
        super().__init__(url=url, reason=str(cause) if cause else None)


class ICalError(ValueError):
    """Base class for errors raised by the icalendar text codec"""

    pass


class PropertyParseError(ICalError):
    def __init__(self, raw_line: str) -> None:
        self.raw_line = raw_line
        super().__init__("malformed property line: %r" % raw_line)


class UnterminatedContainer(ICalError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("missing END:%s" % name)


class EmptyOrInvalidInput(ICalError):
    def __init__(self) -> None:
        super().__init__("no BEGIN line found in input")
