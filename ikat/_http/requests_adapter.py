"""``requests`` adapter implementing ``HttpTransport``.

This is the only module that imports and interacts with ``requests``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import requests
from loguru import logger

from ikat._http.ports import HttpResponse
from ikat.exceptions import TransportError

if TYPE_CHECKING:
    from ikat._http.ports import FormFile


class RequestsTransport:
    """``HttpTransport`` implementation backed by a ``requests.Session``.

    When no session is passed, one is created and closed by :meth:`close`.
    A caller-provided session is left open.
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        """Wrap *session* or open a new one."""
        self._owns_session = session is None
        self._session = session or requests.Session()

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
        """Send one request; network failures become ``TransportError``."""
        logger.trace(f"{method} {url}")
        try:
            resp = self._session.request(
                method,
                url,
                headers=headers,
                json=json,
                data=data,
                files=files,
                timeout=timeout,
            )
        except (requests.RequestException, ValueError) as e:
            # http.client raises UnicodeEncodeError for non-Latin-1 header values.
            raise TransportError(str(e)) from e
        logger.trace(f"{method} {url} -> HTTP {resp.status_code}")
        return HttpResponse(
            status_code=resp.status_code,
            body=_decode_json(resp),
        )

    def close(self) -> None:
        """Close the session if this transport opened it."""
        if self._owns_session:
            self._session.close()


def _decode_json(resp: requests.Response) -> Any:  # noqa: ANN401
    """Return the decoded JSON body, or None when the body is not JSON."""
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        logger.debug(f"Non-JSON response body (HTTP {resp.status_code})")
        return None
