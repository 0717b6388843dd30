"""Tests for the ``ikat`` command-line interface."""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest

from ikat._http.ports import HttpResponse
from ikat.cli import main
from ikat.config import IkatConfig
from ikat.profiles import ApiVersion
from tests.fixtures.fake_transport import (
    API_KEY,
    FakeTransport,
    failing_keys_handler,
    make_client,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

_COMMAND_MODULES = ("ikat.commands.files", "ikat.commands.bucket")


@contextmanager
def _commands_using(transport: FakeTransport, version: ApiVersion) -> Iterator[None]:
    """Make CLI commands build their client over *transport*."""
    cfg = IkatConfig(api_key=API_KEY, api_version=version)
    with ExitStack() as stack:
        for module in _COMMAND_MODULES:
            stack.enter_context(patch(f"{module}.load_config", return_value=cfg))
            stack.enter_context(
                patch(
                    f"{module}.make_client",
                    side_effect=lambda _cfg: make_client(transport, version=version),
                )
            )
        yield


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def cli_current(transport: FakeTransport) -> Iterator[FakeTransport]:
    """Route CLI commands to a current-revision client over *transport*."""
    with _commands_using(transport, ApiVersion.CURRENT):
        yield transport


@pytest.fixture
def cli_legacy(transport: FakeTransport) -> Iterator[FakeTransport]:
    """Route CLI commands to a legacy-revision client over *transport*."""
    with _commands_using(transport, ApiVersion.LEGACY):
        yield transport


# ---------------------------------------------------------------------------
# File commands
# ---------------------------------------------------------------------------


class TestUploadCommand:
    """Tests for ``ikat upload``."""

    def test_single_file_logs_urls(
        self,
        tmp_path: Path,
        cli_current: FakeTransport,
        log_messages: list[str],
    ) -> None:
        path = tmp_path / "a.png"
        path.write_bytes(b"png")

        main(["upload", "images", str(path), "--private"])

        assert cli_current.paths() == ["POST /upload/images"]
        assert cli_current.requests[0].data == {"allowPublicAccess": "false"}
        assert any("https://ikat.id/u/b/a.png" in m for m in log_messages)

    def test_image_variants_and_private_flag_logged(
        self,
        tmp_path: Path,
        transport: FakeTransport,
        cli_current: FakeTransport,
        log_messages: list[str],
    ) -> None:
        path = tmp_path / "p.jpg"
        path.write_bytes(b"jpeg")
        transport.handler = lambda _req: HttpResponse(
            status_code=200,
            body={
                "success": True,
                "urls": {
                    "original": "https://ikat.id/u/b/p.jpg",
                    "thumb": "https://ikat.id/u/b/p-thumb.webp",
                },
                "file": {"original": "p.jpg", "allowPublicAccess": False},
            },
        )

        main(["upload", "images", str(path), "--private"])

        thumb = "p.jpg [thumb]: https://ikat.id/u/b/p-thumb.webp"
        assert any(thumb in m for m in log_messages)
        assert not any("[large]" in m for m in log_messages)
        assert any("p.jpg: private" in m for m in log_messages)

    def test_many_files_uploaded_in_order(
        self, tmp_path: Path, cli_current: FakeTransport
    ) -> None:
        paths = []
        for name in ("a.txt", "b.txt", "c.txt"):
            path = tmp_path / name
            path.write_text(name, encoding="utf-8")
            paths.append(str(path))

        main(["upload", "docs", *paths])

        assert [r.filename for r in cli_current.requests] == ["a.txt", "b.txt", "c.txt"]

    def test_missing_local_file_exits_before_request(
        self, tmp_path: Path, cli_current: FakeTransport
    ) -> None:
        with pytest.raises(SystemExit, match="file\\(s\\) not found"):
            main(["upload", "docs", str(tmp_path / "nope.txt")])
        assert cli_current.requests == []


class TestRemoveCommand:
    """Tests for ``ikat remove``."""

    def test_all_deleted(
        self, cli_current: FakeTransport, log_messages: list[str]
    ) -> None:
        main(["remove", "media", "x.jpg", "https://ikat.id/u/media/y.jpg"])

        assert [r.key for r in cli_current.requests] == ["x.jpg", "y.jpg"]
        assert any("Deleted 2 of 2 file(s)" in m for m in log_messages)

    def test_partial_failure_exit_code(
        self, transport: FakeTransport, cli_current: FakeTransport
    ) -> None:
        transport.handler = failing_keys_handler("y.jpg")

        with pytest.raises(SystemExit) as exc_info:
            main(["remove", "media", "x.jpg", "y.jpg", "z.jpg"])

        assert exc_info.value.code == 1
        assert len(cli_current.requests) == 3


class TestListCommand:
    """Tests for ``ikat list``."""

    def test_lists_file_names(
        self,
        transport: FakeTransport,
        cli_current: FakeTransport,
        log_messages: list[str],
    ) -> None:
        transport.handler = lambda _req: HttpResponse(
            status_code=200,
            body={"success": True, "files": [{"original": "a.png", "size": 10}]},
        )

        main(["list", "media"])

        assert cli_current.paths() == ["GET /files/media"]
        assert any("a.png (10 bytes)" in m for m in log_messages)

    def test_remote_failure_exits_with_tagged_message(
        self, transport: FakeTransport, cli_current: FakeTransport
    ) -> None:
        transport.handler = lambda _req: HttpResponse(
            status_code=403, body={"message": "Origin not allowed"}
        )

        with pytest.raises(SystemExit, match=r"\[list\] Origin not allowed"):
            main(["list", "media"])


class TestReplaceCommand:
    """Tests for ``ikat replace``."""

    def test_deletes_old_then_uploads(
        self, tmp_path: Path, cli_current: FakeTransport
    ) -> None:
        path = tmp_path / "new.png"
        path.write_bytes(b"png")

        main(
            [
                "replace",
                "avatars",
                str(path),
                "--old",
                "https://ikat.id/u/avatars/old.png",
            ]
        )

        assert cli_current.paths() == ["POST /files/delete", "POST /upload/avatars"]
        assert cli_current.requests[0].key == "old.png"


# ---------------------------------------------------------------------------
# delete-bucket
# ---------------------------------------------------------------------------


class TestDeleteBucketCommand:
    """Tests for ``ikat delete-bucket``."""

    def test_yes_skips_prompt(self, cli_current: FakeTransport) -> None:
        with patch("ikat.commands.bucket.questionary.text") as prompt:
            main(["delete-bucket", "old", "--yes"])

        prompt.assert_not_called()
        assert cli_current.paths() == ["POST /files/delete-bucket"]

    def test_confirmed_by_typing_name(self, cli_current: FakeTransport) -> None:
        answer = MagicMock()
        answer.ask.return_value = "old"
        with patch("ikat.commands.bucket.questionary.text", return_value=answer):
            main(["delete-bucket", "old"])

        assert cli_current.requests[0].json == {"bucket": "old"}

    def test_wrong_name_cancels(self, cli_current: FakeTransport) -> None:
        answer = MagicMock()
        answer.ask.return_value = "other"
        with patch("ikat.commands.bucket.questionary.text", return_value=answer):
            main(["delete-bucket", "old"])

        assert cli_current.requests == []

    def test_non_interactive_requires_yes(
        self, monkeypatch: pytest.MonkeyPatch, cli_current: FakeTransport
    ) -> None:
        monkeypatch.setenv("IKAT_NO_INTERACTIVE", "true")

        with pytest.raises(SystemExit, match="--yes"):
            main(["delete-bucket", "old"])
        assert cli_current.requests == []

    def test_legacy_revision_refused(self, cli_legacy: FakeTransport) -> None:
        with pytest.raises(SystemExit, match="cannot delete buckets"):
            main(["delete-bucket", "old", "--yes"])
        assert cli_legacy.requests == []


# ---------------------------------------------------------------------------
# Offline commands
# ---------------------------------------------------------------------------


def test_migrate_url_logs_rewrites(log_messages: list[str]) -> None:
    main(
        [
            "migrate-url",
            "https://api.ikat.id/u/b/photo.jpg",
            "https://ikat.id/u/b/new.jpg",
        ]
    )

    assert any(
        "https://api.ikat.id/u/b/photo.jpg -> https://ikat.id/u/b/photo.jpg" in m
        for m in log_messages
    )
    assert any("https://ikat.id/u/b/new.jpg (unchanged)" in m for m in log_messages)


def test_setup_non_interactive_fails(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("IKAT_NO_INTERACTIVE", "true")

    with pytest.raises(SystemExit, match="IKAT_NO_INTERACTIVE"):
        main(["setup", "--config", str(tmp_path / "config.yaml")])
    assert not (tmp_path / "config.yaml").exists()


def test_setup_writes_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    version_prompt = MagicMock()
    version_prompt.ask.return_value = "v1"

    with (
        patch("ikat.commands.setup.getpass.getpass", return_value="new-key"),
        patch("builtins.input", return_value="https://example.com"),
        patch("ikat.commands.setup.questionary.select", return_value=version_prompt),
    ):
        main(["setup", "--config", str(config_path)])

    cfg = IkatConfig.from_file(config_path)
    assert cfg.api_key == "new-key"
    assert cfg.origin == "https://example.com"
    assert cfg.api_version is ApiVersion.LEGACY
