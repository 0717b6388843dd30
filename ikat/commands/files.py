"""Implementation of the ``ikat upload/list/remove/replace`` commands."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from ikat.commands._helpers import (
    load_config,
    log_batch_results,
    log_upload_response,
    make_client,
)
from ikat.exceptions import IkatError

if TYPE_CHECKING:
    import argparse


def _existing_paths(raw_paths: list[str]) -> list[Path]:
    """Return paths for *raw_paths*, exiting if any file is missing."""
    paths = [Path(p) for p in raw_paths]
    missing = [str(p) for p in paths if not p.is_file()]
    if missing:
        sys.exit(f"Error: file(s) not found: {', '.join(missing)}")
    return paths


def run_upload(args: argparse.Namespace) -> None:
    """Run the ``upload`` command."""
    paths = _existing_paths(args.files)
    cfg = load_config()
    with make_client(cfg) as client:
        if len(paths) == 1:
            try:
                response = client.upload(
                    args.bucket, paths[0], allow_public_access=not args.private
                )
            except IkatError as e:
                sys.exit(str(e))
            log_upload_response(client.profile, paths[0].name, response)
            return

        results = client.upload_multiple(
            args.bucket,
            paths,
            allow_public_access=not args.private,
            max_workers=args.workers,
            progress=True,
        )
        for result in results:
            if result.success:
                log_upload_response(client.profile, result.file, result.data)
    if log_batch_results(results, "Uploaded"):
        sys.exit(1)


def run_list(args: argparse.Namespace) -> None:
    """Run the ``list`` command."""
    cfg = load_config()
    with make_client(cfg) as client:
        try:
            response = client.list_files(args.bucket)
        except IkatError as e:
            sys.exit(str(e))

    files = response.get("files") if isinstance(response, dict) else None
    if not isinstance(files, list):
        logger.info(f"Bucket {args.bucket!r}: {response}")
        return
    if not files:
        logger.info(f"Bucket {args.bucket!r}: no files")
        return
    logger.info(f"Bucket {args.bucket!r}: {len(files)} file(s):")
    for item in files:
        if not isinstance(item, dict):
            logger.info(f"  - {item}")
            continue
        name = item.get("original") or item.get("key") or "<unknown>"
        size = item.get("size")
        size_str = f" ({size} bytes)" if size is not None else ""
        logger.info(f"  - {name}{size_str}")
        if item.get("url"):
            logger.info(f"    {item['url']}")


def run_remove(args: argparse.Namespace) -> None:
    """Run the ``remove`` command."""
    cfg = load_config()
    with make_client(cfg) as client:
        results = client.delete_multiple(
            args.bucket,
            args.keys,
            max_workers=args.workers,
            progress=len(args.keys) > 1,
        )
    if log_batch_results(results, "Deleted"):
        sys.exit(1)


def run_replace(args: argparse.Namespace) -> None:
    """Run the ``replace`` command."""
    (path,) = _existing_paths([args.file])
    cfg = load_config()
    with make_client(cfg) as client:
        try:
            response = client.replace(
                args.bucket,
                path,
                args.old,
                allow_public_access=not args.private,
            )
        except IkatError as e:
            sys.exit(str(e))
        log_upload_response(client.profile, path.name, response)
