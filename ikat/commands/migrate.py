"""Implementation of the ``ikat migrate-url`` command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from ikat.keys import migrate_url

if TYPE_CHECKING:
    import argparse


def run_migrate_url(args: argparse.Namespace) -> None:
    """Print the current-host form of each legacy URL."""
    for url in args.urls:
        new_url = migrate_url(url)
        if new_url == url:
            logger.info(f"{url} (unchanged)")
        else:
            logger.info(f"{url} -> {new_url}")
