"""Tests for upload file and response models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ikat.models import DEFAULT_CONTENT_TYPE, UploadFile, UploadResponse

if TYPE_CHECKING:
    from pathlib import Path


class TestUploadFileFromPath:
    """Tests for ``UploadFile.from_path``."""

    def test_guesses_content_type(self, tmp_path: Path) -> None:
        path = tmp_path / "image.png"
        path.write_bytes(b"\x89PNG")

        upload = UploadFile.from_path(path)

        assert upload.name == "image.png"
        assert upload.content == b"\x89PNG"
        assert upload.content_type == "image/png"

    def test_unknown_extension_falls_back(self, tmp_path: Path) -> None:
        path = tmp_path / "blob.unknownext"
        path.write_bytes(b"data")

        assert UploadFile.from_path(path).content_type == DEFAULT_CONTENT_TYPE

    def test_explicit_content_type_wins(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("hi", encoding="utf-8")

        upload = UploadFile.from_path(str(path), content_type="text/markdown")

        assert upload.content_type == "text/markdown"


class TestUploadResponse:
    """Typed view over a current-revision upload body."""

    def test_image_variants(self) -> None:
        body = {
            "success": True,
            "message": "File uploaded",
            "urls": {
                "original": "https://ikat.id/u/b/p.jpg",
                "large": "https://ikat.id/u/b/p-large.webp",
                "small": "https://ikat.id/u/b/p-small.webp",
                "thumb": "https://ikat.id/u/b/p-thumb.webp",
            },
            "file": {
                "original": "p.jpg",
                "mimetype": "image/jpeg",
                "size": 1024,
                "allowPublicAccess": False,
            },
        }

        resp = UploadResponse.model_validate(body)

        assert resp.urls.thumb == "https://ikat.id/u/b/p-thumb.webp"
        assert set(resp.urls.variants()) == {"original", "large", "small", "thumb"}
        assert resp.file.allow_public_access is False
        assert resp.file.size == 1024

    def test_non_image_has_only_original(self) -> None:
        body = {
            "success": True,
            "urls": {"original": "https://ikat.id/u/b/doc.pdf"},
            "file": {"original": "doc.pdf"},
        }

        resp = UploadResponse.model_validate(body)

        assert resp.urls.variants() == {"original": "https://ikat.id/u/b/doc.pdf"}
        assert resp.file.allow_public_access is True
