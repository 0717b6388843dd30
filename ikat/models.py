"""Pydantic models for files sent to and returned by the ikat service."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# ------------------------------------------------------------------
# Outgoing files
# ------------------------------------------------------------------


class UploadFile(BaseModel):
    """A file to upload: filename, raw bytes and MIME type."""

    model_config = ConfigDict(frozen=True)

    name: str
    content: bytes
    content_type: str = DEFAULT_CONTENT_TYPE

    @classmethod
    def from_path(cls, path: Path | str, content_type: str | None = None) -> UploadFile:
        """Read a local file; the MIME type is guessed from its extension."""
        path = Path(path)
        if content_type is None:
            guessed, _ = mimetypes.guess_type(path.name)
            content_type = guessed or DEFAULT_CONTENT_TYPE
        return cls(name=path.name, content=path.read_bytes(), content_type=content_type)


# ------------------------------------------------------------------
# Upload responses (current API revision)
# ------------------------------------------------------------------


class ImageUrls(BaseModel):
    """Access URLs of an uploaded file.

    ``large``, ``small`` and ``thumb`` are WebP variants generated by the
    service for image uploads only.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    original: str
    large: str | None = None
    small: str | None = None
    thumb: str | None = None

    def variants(self) -> dict[str, str]:
        """Return the non-empty URLs keyed by variant name."""
        urls = {
            "original": self.original,
            "large": self.large,
            "small": self.small,
            "thumb": self.thumb,
        }
        return {name: url for name, url in urls.items() if url}


class StoredFileInfo(BaseModel):
    """File metadata echoed back by the service after an upload."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    original: str
    mimetype: str = ""
    size: int = 0
    allow_public_access: bool = Field(default=True, alias="allowPublicAccess")


class UploadResponse(BaseModel):
    """Typed view of a current-revision upload response body."""

    model_config = ConfigDict(frozen=True, extra="allow")

    success: bool
    message: str = ""
    urls: ImageUrls
    file: StoredFileInfo


# ------------------------------------------------------------------
# Batch results
# ------------------------------------------------------------------


class DeleteResult(BaseModel):
    """Outcome of deleting one key inside ``delete_multiple``."""

    model_config = ConfigDict(frozen=True)

    key: str
    success: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Plain dict without unset optional fields."""
        return self.model_dump(exclude_none=True)


class UploadResult(BaseModel):
    """Outcome of uploading one file inside ``upload_multiple``."""

    model_config = ConfigDict(frozen=True)

    file: str
    success: bool
    data: Any = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Plain dict without unset optional fields."""
        return self.model_dump(exclude_none=True)
