"""
Synchronous I/O implementation using the requests library.
"""

import datetime
import logging
from tempfile import NamedTemporaryFile
from typing import Dict
from typing import Optional

import requests

from minicaldav.lib import error
from minicaldav.lib.python_utilities import to_normal_str
from minicaldav.lib.python_utilities import to_wire
from minicaldav.protocol.types import DAVRequest
from minicaldav.protocol.types import DAVResponse

log = logging.getLogger("minicaldav")


def _redacted(headers: Dict[str, str]) -> Dict[str, str]:
    return {
        k: ("***" if k.lower() == "authorization" else v) for k, v in headers.items()
    }


class SyncIO:
    """
    Synchronous I/O shell using the requests library.

    This is a thin wrapper that executes DAVRequest objects via HTTP
    and returns DAVResponse objects.

    Example:
        with SyncIO() as io:
            request = protocol.calendar_list_request(url)
            response = io.execute(request)
            calendars = protocol.parse_calendar_list(response, url)
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        verify: bool = True,
    ):
        """
        Initialize the sync I/O handler.

        Args:
            session: Existing requests Session to use (creates new if None)
            timeout: Request timeout in seconds
            verify: Verify SSL certificates
        """
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout
        self.verify = verify

    def execute(self, request: DAVRequest) -> DAVResponse:
        """
        Execute a DAVRequest and return DAVResponse.

        Args:
            request: The request to execute

        Returns:
            DAVResponse with status, headers, body and the final url

        Raises:
            TransportError: if no response could be had from the server
        """
        log.debug(
            "sending request - method={0}, url={1}, headers={2}\nbody:\n{3}".format(
                request.method.value,
                request.url,
                _redacted(request.headers),
                to_normal_str(request.body),
            )
        )
        try:
            r = self.session.request(
                method=request.method.value,
                url=request.url,
                headers=request.headers,
                data=to_wire(request.body),
                timeout=self.timeout,
                verify=self.verify,
            )
        except requests.exceptions.RequestException as e:
            raise error.TransportError(url=request.url, reason=str(e)) from e
        log.debug("server responded with %i %s" % (r.status_code, r.reason))

        response = DAVResponse(
            status=r.status_code,
            headers=dict(r.headers),
            body=r.content,
            url=str(r.url or request.url),
            reason_phrase=r.reason or "",
        )
        if error.debug_dump_communication:
            self._dump(request, response)
        return response

    def _dump(self, request: DAVRequest, response: DAVResponse) -> None:
        with NamedTemporaryFile(prefix="minicaldavcomm", delete=False) as commlog:
            commlog.write(b"=" * 80 + b"\n")
            commlog.write(f"{datetime.datetime.now():%FT%H:%M:%S}".encode("utf-8"))
            commlog.write(b"\n====>\n")
            commlog.write(f"{request.method.value} {request.url}\n".encode("utf-8"))
            headers = _redacted(request.headers)
            commlog.write(b"\n".join(to_wire(f"{x}: {headers[x]}") for x in headers))
            commlog.write(b"\n\n")
            commlog.write(to_wire(request.body) or b"")
            commlog.write(b"<====\n")
            commlog.write(f"{response.status} {response.reason}\n".encode("utf-8"))
            commlog.write(
                b"\n".join(
                    to_wire(f"{x}: {response.headers[x]}") for x in response.headers
                )
            )
            commlog.write(b"\n\n")
            commlog.write(response.body or b"")
            log.debug("communication dumped to %s" % commlog.name)

    def close(self) -> None:
        """Close the session if we created it."""
        if self._owns_session and self.session:
            self.session.close()

    def __enter__(self) -> "SyncIO":
        """Context manager entry."""
        return self

    def __exit__(self, *args) -> None:
        """Context manager exit."""
        self.close()
