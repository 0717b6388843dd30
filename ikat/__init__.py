"""ikat -- client for the ikat file-hosting API."""

from ikat._http.ports import HttpResponse, HttpTransport
from ikat._http.requests_adapter import RequestsTransport
from ikat.client import IkatClient
from ikat.config import IkatConfig
from ikat.exceptions import (
    ConfigurationError,
    IkatError,
    IkatOperationError,
    InteractiveModeRequiredError,
    Operation,
    TransportError,
    UnsupportedOperationError,
)
from ikat.keys import extract_key, migrate_url
from ikat.models import (
    DeleteResult,
    ImageUrls,
    StoredFileInfo,
    UploadFile,
    UploadResponse,
    UploadResult,
)
from ikat.profiles import CURRENT_PROFILE, LEGACY_PROFILE, ApiProfile, ApiVersion

__all__ = [
    "CURRENT_PROFILE",
    "LEGACY_PROFILE",
    "ApiProfile",
    "ApiVersion",
    "ConfigurationError",
    "DeleteResult",
    "HttpResponse",
    "HttpTransport",
    "IkatClient",
    "IkatConfig",
    "IkatError",
    "IkatOperationError",
    "ImageUrls",
    "InteractiveModeRequiredError",
    "Operation",
    "RequestsTransport",
    "StoredFileInfo",
    "TransportError",
    "UnsupportedOperationError",
    "UploadFile",
    "UploadResponse",
    "UploadResult",
    "extract_key",
    "migrate_url",
]
