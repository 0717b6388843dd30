"""Shared helpers for CLI commands."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from loguru import logger
from pydantic import ValidationError

from ikat.client import IkatClient
from ikat.config import IkatConfig, get_config_path
from ikat.models import DeleteResult, UploadResponse

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from ikat.models import UploadResult
    from ikat.profiles import ApiProfile


def load_config(config_path: Path | None = None) -> IkatConfig:
    """Load config from file and env. Path from IKAT_CONFIG or argument."""
    return IkatConfig.load(config_path=config_path)


def require_api_key(cfg: IkatConfig) -> None:
    """Abort with a friendly message when the API key is not configured."""
    if cfg.api_key:
        return
    config_path = get_config_path()
    sys.exit(
        "Error: ikat API key is not configured.\n"
        "Run setup to save your settings:\n  ikat setup\n"
        "Or set the IKAT_API_KEY environment variable.\n"
        f"Config file: {config_path}"
    )


def make_client(cfg: IkatConfig) -> IkatClient:
    """Build a client after checking the API key is present."""
    require_api_key(cfg)
    return IkatClient(cfg)


def log_upload_response(profile: ApiProfile, name: str, response: object) -> None:
    """Log the access URL(s) returned for one uploaded file."""
    if not isinstance(response, dict):
        logger.info(f"{name}: uploaded")
        return
    if profile.supports("image_optimization"):
        try:
            parsed = UploadResponse.model_validate(response)
        except ValidationError:
            logger.debug(f"{name}: unexpected upload response shape")
        else:
            for variant, url in parsed.urls.variants().items():
                logger.info(f"{name} [{variant}]: {url}")
            if not parsed.file.allow_public_access:
                logger.info(f"{name}: private, requests need the API key")
            return
    url = profile.primary_url(response)
    logger.info(f"{name}: {url or 'uploaded'}")


def log_batch_results(
    results: Sequence[DeleteResult] | Sequence[UploadResult],
    verb: str,
) -> int:
    """Log per-item failures and a summary; return the failure count."""
    failed = [r for r in results if not r.success]
    for r in failed:
        label = r.key if isinstance(r, DeleteResult) else r.file
        logger.error(f"  - {label}: {r.error}")
    logger.info(f"{verb} {len(results) - len(failed)} of {len(results)} file(s)")
    return len(failed)
