"""HTTP boundary used by ``ikat.client``."""

from ikat._http.ports import HttpResponse, HttpTransport
from ikat._http.requests_adapter import RequestsTransport

__all__ = [
    "HttpResponse",
    "HttpTransport",
    "RequestsTransport",
]
