"""Shared pytest fixtures for ikat tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import yaml
from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

_IKAT_ENV_VARS = (
    "IKAT_API_KEY",
    "IKAT_ORIGIN",
    "IKAT_BASE_URL",
    "IKAT_API_VERSION",
    "IKAT_TIMEOUT",
    "IKAT_CONFIG",
    "IKAT_NO_INTERACTIVE",
)


@pytest.fixture(autouse=True)
def _clean_ikat_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own IKAT_* settings out of every test."""
    for name in _IKAT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru messages (INFO and above) emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda msg: messages.append(str(msg)), level="INFO")
    yield messages
    logger.remove(handler_id)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_test_config(
    path: Path,
    *,
    api_key: str = "file-key",
    **extra: object,
) -> None:
    """Write a minimal ikat config YAML for testing."""
    section: dict[str, object] = {"api_key": api_key, **extra}
    path.write_text(yaml.safe_dump({"ikat": section}), encoding="utf-8")
