"""Implementation of the ``ikat delete-bucket`` command."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import questionary
from loguru import logger

from ikat.commands._helpers import load_config, make_client
from ikat.config import require_interactive
from ikat.exceptions import IkatError

if TYPE_CHECKING:
    import argparse


def _confirm_bucket_deletion(bucket: str) -> bool:
    """Ask the user to retype *bucket* before deleting it."""
    require_interactive("Pass --yes to delete the bucket without a prompt.")
    logger.warning(
        f"WARNING: deleting bucket {bucket!r} permanently removes every file in it!"
    )
    answer: str | None = questionary.text(
        f"To confirm, type the bucket name ({bucket}):"
    ).ask()
    if answer is None:
        return False
    if answer.strip() != bucket:
        logger.warning("Bucket name does not match.")
        return False
    return True


def run_delete_bucket(args: argparse.Namespace) -> None:
    """Run the ``delete-bucket`` command."""
    cfg = load_config()
    client = make_client(cfg)
    if not client.profile.supports("bucket_deletion"):
        sys.exit(
            f"Error: API {client.profile.version.value} cannot delete buckets; "
            "set IKAT_API_VERSION=v2 or remove the files one by one."
        )
    if not args.yes and not _confirm_bucket_deletion(args.bucket):
        logger.info("Bucket deletion cancelled")
        return
    with client:
        try:
            result = client.delete_bucket(args.bucket)
        except IkatError as e:
            sys.exit(str(e))
    deleted = result.get("filesDeleted") if isinstance(result, dict) else None
    if deleted is None:
        logger.info(f"Deleted bucket {args.bucket!r}")
    else:
        logger.info(f"Deleted bucket {args.bucket!r} ({deleted} file(s))")
