"""Implementation of the ``ikat setup`` command."""

from __future__ import annotations

import getpass
import sys
from typing import TYPE_CHECKING

import questionary
from loguru import logger

from ikat.config import IkatConfig, require_interactive
from ikat.profiles import ApiVersion, get_profile

if TYPE_CHECKING:
    from pathlib import Path


def _ask_api_version(default: ApiVersion) -> ApiVersion:
    answer = questionary.select(
        "API version:",
        choices=[
            questionary.Choice(
                title=f"v2 ({get_profile(ApiVersion.CURRENT).base_url})",
                value=ApiVersion.CURRENT.value,
            ),
            questionary.Choice(
                title=f"v1, legacy ({get_profile(ApiVersion.LEGACY).base_url})",
                value=ApiVersion.LEGACY.value,
            ),
        ],
        default=default.value,
        use_shortcuts=False,
        use_indicator=True,
    ).ask()
    if answer is None:
        sys.exit("Cancelled.")
    return ApiVersion(answer)


def run_setup(config_path: Path) -> None:
    """Interactively ask the user for ikat settings and save them."""
    require_interactive(
        "The 'setup' command is fully interactive. "
        "Configure via env vars (IKAT_API_KEY, IKAT_ORIGIN, IKAT_API_VERSION) "
        "or edit the config file directly."
    )
    existing = IkatConfig.from_file(config_path)

    prompt = "API key"
    if existing.api_key:
        prompt += f" [{existing.api_key[:6]}...]"
    prompt += ": "
    api_key = getpass.getpass(prompt).strip() or existing.api_key
    if not api_key:
        logger.warning("No API key given; it can be added later.")

    origin_default = existing.origin or ""
    origin_prompt = "Origin header (optional)"
    if origin_default:
        origin_prompt += f" [{origin_default}]"
    origin_prompt += ": "
    origin = input(origin_prompt).strip() or origin_default

    version = _ask_api_version(existing.api_version or ApiVersion.CURRENT)

    cfg = IkatConfig(
        api_key=api_key,
        origin=origin or None,
        base_url=existing.base_url,
        api_version=version,
        timeout=existing.timeout,
    )
    saved_path = cfg.save_to_file(config_path)
    logger.info(f"Done! Configuration saved to {saved_path}")
