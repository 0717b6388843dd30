"""Configuration loading with priority: env > config file > defaults."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

from ikat.exceptions import ConfigurationError, InteractiveModeRequiredError
from ikat.profiles import ApiProfile, ApiVersion, get_profile

CONFIG_DIR = Path.home() / ".config" / "ikat"
CONFIG_PATH = CONFIG_DIR / "config.yaml"

DEFAULT_TIMEOUT = 60.0
"""Seconds to wait for the service before a request fails."""

_SECTION = "ikat"


def is_interactive_disabled() -> bool:
    """Return True when IKAT_NO_INTERACTIVE is set to 'true' (case-insensitive)."""
    return os.environ.get("IKAT_NO_INTERACTIVE", "").lower() == "true"


def require_interactive(hint: str) -> None:
    """Raise if interactive prompts are disabled.

    Parameters
    ----------
    hint:
        Human-readable explanation of which CLI flag / env var the caller
        should use instead of an interactive prompt.

    """
    if is_interactive_disabled():
        raise InteractiveModeRequiredError(
            f"Interactive prompt required but IKAT_NO_INTERACTIVE=true. {hint}"
        )


def get_config_path(config_path: Path | None = None) -> Path:
    """Return path to config file.

    Uses *config_path* if provided, otherwise IKAT_CONFIG env var,
    otherwise default CONFIG_PATH.
    """
    if config_path is not None:
        return config_path
    path = os.environ.get("IKAT_CONFIG")
    return Path(path) if path else CONFIG_PATH


def _load_raw_yaml(path: Path) -> dict[str, object]:
    """Load a YAML file and return its top-level mapping (or empty dict)."""
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        logger.warning(f"Invalid config format in {path}; expected mapping.")
        return {}
    return data


class IkatConfig(BaseModel):
    """Connection settings for the ikat service.

    Unset ``api_version`` means the current revision; unset ``base_url``
    means the revision's default host.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = ""
    origin: str | None = None
    base_url: str | None = None
    api_version: ApiVersion | None = None
    timeout: float | None = None

    @property
    def profile(self) -> ApiProfile:
        """Request conventions of the configured API revision."""
        return get_profile(self.api_version or ApiVersion.CURRENT)

    @property
    def resolved_base_url(self) -> str:
        """Explicit base URL, or the revision's default host."""
        return (self.base_url or self.profile.base_url).rstrip("/")

    @property
    def resolved_timeout(self) -> float:
        """Explicit timeout, or ``DEFAULT_TIMEOUT``."""
        return self.timeout if self.timeout is not None else DEFAULT_TIMEOUT

    @classmethod
    def _from_ikat_section(cls, data: dict[str, object]) -> IkatConfig:
        """Build from a raw YAML top-level dict (reads the ``ikat`` key)."""
        section = data.get(_SECTION, {})
        if not isinstance(section, dict):
            return cls()
        try:
            return cls(**{k: v for k, v in section.items() if k in cls.model_fields})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid '{_SECTION}' config section: {e}") from e

    @classmethod
    def from_file(cls, path: Path = CONFIG_PATH) -> IkatConfig:
        """Load config from a YAML file.  Returns empty config if file is missing."""
        if not path.is_file():
            return cls()
        logger.trace(f"Loading config from {path}")
        data = _load_raw_yaml(path)
        return cls._from_ikat_section(data)

    @classmethod
    def from_env(cls) -> IkatConfig:
        """Build config from environment variables."""
        raw_version = os.environ.get("IKAT_API_VERSION")
        raw_timeout = os.environ.get("IKAT_TIMEOUT")
        try:
            version = ApiVersion(raw_version) if raw_version else None
            timeout = float(raw_timeout) if raw_timeout else None
        except ValueError as e:
            raise ConfigurationError(f"Invalid ikat environment setting: {e}") from e
        return cls(
            api_key=os.environ.get("IKAT_API_KEY", ""),
            origin=os.environ.get("IKAT_ORIGIN"),
            base_url=os.environ.get("IKAT_BASE_URL"),
            api_version=version,
            timeout=timeout,
        )

    def merge(self, override: IkatConfig) -> IkatConfig:
        """Return a new config where *override* values take priority over self.

        Only non-empty / non-None values from *override* win.
        """
        return IkatConfig(
            api_key=override.api_key or self.api_key,
            origin=override.origin or self.origin,
            base_url=override.base_url or self.base_url,
            api_version=override.api_version or self.api_version,
            timeout=override.timeout if override.timeout is not None else self.timeout,
        )

    @classmethod
    def load(cls, config_path: Path | None = None) -> IkatConfig:
        """Merge file and env: file < env."""
        path = get_config_path(config_path)
        file_cfg = cls.from_file(path)
        env_cfg = cls.from_env()
        return file_cfg.merge(env_cfg)

    def require_api_key(self) -> IkatConfig:
        """Return self, or raise ``ConfigurationError`` when no API key is set."""
        if not self.api_key:
            raise ConfigurationError(
                "No API key configured: set IKAT_API_KEY or ikat.api_key "
                "in the config file."
            )
        return self

    def save_to_file(self, path: Path = CONFIG_PATH) -> Path:
        """Write the ``ikat`` section to a YAML file, preserving other sections."""
        path.parent.mkdir(parents=True, exist_ok=True)
        existing = _load_raw_yaml(path)

        section: dict[str, object] = {"api_key": self.api_key}
        if self.origin:
            section["origin"] = self.origin
        if self.base_url:
            section["base_url"] = self.base_url
        if self.api_version:
            section["api_version"] = self.api_version.value
        if self.timeout is not None:
            section["timeout"] = self.timeout
        existing[_SECTION] = section

        content = yaml.safe_dump(existing, default_flow_style=False, sort_keys=False)
        if not content.endswith("\n"):
            content += "\n"
        path.write_text(content, encoding="utf-8")
        logger.info(f"Config saved to {path}")
        return path
