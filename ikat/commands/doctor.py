"""Health checks for ikat configuration and service access.

Called by ``ikat doctor``.  All checks log their results via loguru
and return ``True`` when everything is fine.
"""

from __future__ import annotations

from loguru import logger

from ikat.client import IkatClient
from ikat.config import IkatConfig, get_config_path
from ikat.exceptions import IkatError


def run_doctor(bucket: str | None = None) -> None:
    """Run all doctor checks and log a final summary."""
    ok = check_config()
    if ok and bucket:
        ok = check_bucket_access(bucket)

    if ok:
        logger.info("doctor: all checks passed")
    else:
        logger.warning("doctor: some checks failed (see messages above)")


# ------------------------------------------------------------------
# 1. Config validation
# ------------------------------------------------------------------


def check_config() -> bool:
    """Validate that the user config is correct.

    Returns ``True`` when everything looks good.
    """
    logger.info("doctor: checking configuration …")

    config_path = get_config_path()
    if not config_path.is_file():
        logger.warning(
            f"Config file not found: {config_path}. "
            "Run 'ikat setup' or set env variables."
        )
    else:
        logger.info(f"Config file: {config_path}")

    try:
        cfg = IkatConfig.load()
    except IkatError as e:
        logger.error(f"config: {e}")
        return False

    if not cfg.api_key:
        logger.error("config: no API key (set IKAT_API_KEY or ikat.api_key in config)")
        return False

    key_preview = cfg.api_key[:4] + "…"
    logger.info(
        f"Config: OK, api={cfg.profile.version.value}, "
        f"base_url={cfg.resolved_base_url}, origin={cfg.origin or '(none)'}, "
        f"api_key={key_preview}"
    )
    return True


# ------------------------------------------------------------------
# 2. Service access
# ------------------------------------------------------------------


def check_bucket_access(bucket: str) -> bool:
    """List *bucket* to verify the key, origin and host work together."""
    logger.info(f"doctor: listing bucket {bucket!r} …")
    try:
        with IkatClient(IkatConfig.load()) as client:
            client.list_files(bucket)
    except IkatError as e:
        logger.error(f"service: {e}")
        return False
    logger.info(f"service: bucket {bucket!r} is reachable")
    return True
