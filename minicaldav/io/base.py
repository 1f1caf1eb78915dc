"""
Abstract I/O protocol definition.

This module defines the interface that all I/O implementations must follow.
"""

from typing import Protocol, runtime_checkable

from minicaldav.protocol.types import DAVRequest, DAVResponse


@runtime_checkable
class SyncIOProtocol(Protocol):
    """
    Protocol defining the synchronous I/O interface.

    Implementations must provide a way to execute DAVRequest objects
    and return DAVResponse objects synchronously.  A status outside the
    2xx range is not an error at this level; failing to get a response at
    all is, and must be raised as ``minicaldav.lib.error.TransportError``.
    """

    def execute(self, request: DAVRequest) -> DAVResponse:
        """
        Execute a request and return the response.

        Args:
            request: The DAVRequest to execute

        Returns:
            DAVResponse with status, headers, body and final url
        """
        ...

    def close(self) -> None:
        """Close any resources (e.g., HTTP session)."""
        ...
