"""Protocol defining the HTTP boundary.

``HttpTransport`` is the single seam between the client logic and the
network.  In production it is satisfied by ``RequestsTransport``; in tests
a trivial fake returning canned responses can be used instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

_HTTP_SUCCESS_MIN = 200
_HTTP_SUCCESS_MAX = 300

FormFile = tuple[str, bytes, str]
"""Multipart file part: ``(filename, content, content_type)``."""


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Status and decoded JSON body of a completed request."""

    status_code: int
    body: Any = None

    @property
    def ok(self) -> bool:
        """True for 2xx responses."""
        return _HTTP_SUCCESS_MIN <= self.status_code < _HTTP_SUCCESS_MAX


class HttpTransport(Protocol):
    """Minimal interface for HTTP calls used by ``IkatClient``."""

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        json: dict[str, Any] | None = None,
        data: dict[str, str] | None = None,
        files: dict[str, FormFile] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """Send one request and return the response.

        Non-2xx responses are returned, not raised.  Raises
        ``TransportError`` when no response was received.
        """
        ...

    def close(self) -> None:
        """Release any pooled connections."""
        ...
