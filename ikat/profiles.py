"""API revision profiles.

The legacy and current ikat APIs differ only in a handful of request and
response details.  ``ApiProfile`` captures those details so a single
``IkatClient`` can talk to either revision.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from pydantic import ValidationError

from ikat.models import ImageUrls


class ApiVersion(str, Enum):
    """Supported API revisions."""

    LEGACY = "v1"
    CURRENT = "v2"


Feature = Literal["image_optimization", "public_private_toggle", "bucket_deletion"]


@dataclass(frozen=True)
class ApiProfile:
    """Request and response conventions of one API revision."""

    version: ApiVersion
    base_url: str
    upload_method: Literal["PUT", "POST"]
    # Current uploads carry an ``allowPublicAccess`` form field.
    sends_access_flag: bool
    normalizes_remove_key: bool
    features: frozenset[str]

    def supports(self, feature: Feature) -> bool:
        """Return True if this revision provides *feature*."""
        return feature in self.features

    def primary_url(self, upload_result: dict[str, Any]) -> str | None:
        """Return the main access URL from an upload response body."""
        if self.version is ApiVersion.LEGACY:
            url = upload_result.get("url")
            return str(url) if url else None
        try:
            return ImageUrls.model_validate(upload_result.get("urls")).original
        except ValidationError:
            return None


LEGACY_PROFILE = ApiProfile(
    version=ApiVersion.LEGACY,
    base_url="https://api.ikat.id",
    upload_method="PUT",
    sends_access_flag=False,
    normalizes_remove_key=False,
    features=frozenset(),
)

CURRENT_PROFILE = ApiProfile(
    version=ApiVersion.CURRENT,
    base_url="https://ikat.id",
    upload_method="POST",
    sends_access_flag=True,
    normalizes_remove_key=True,
    features=frozenset(
        {"image_optimization", "public_private_toggle", "bucket_deletion"}
    ),
)

_PROFILES: dict[ApiVersion, ApiProfile] = {
    ApiVersion.LEGACY: LEGACY_PROFILE,
    ApiVersion.CURRENT: CURRENT_PROFILE,
}


def get_profile(version: ApiVersion | str) -> ApiProfile:
    """Return the profile for *version* (``"v1"``/``"v2"`` also accepted)."""
    return _PROFILES[ApiVersion(version)]
