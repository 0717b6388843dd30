"""CLI entry point for ikat."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from ikat.commands.bucket import run_delete_bucket
from ikat.commands.doctor import run_doctor
from ikat.commands.files import run_list, run_remove, run_replace, run_upload
from ikat.commands.migrate import run_migrate_url
from ikat.commands.setup import run_setup
from ikat.config import get_config_path
from ikat.exceptions import IkatError


class CliApp:
    """Command-line interface for ikat."""

    def __init__(self) -> None:
        """Initialize parser and command definitions."""
        self._parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="Upload and manage files on ikat.",
        )
        parser.add_argument(
            "--verbose",
            "-v",
            action="store_true",
            help="Log request details (DEBUG level).",
        )
        subparsers = parser.add_subparsers(dest="command", required=True)

        self._add_upload_parser(subparsers)
        self._add_list_parser(subparsers)
        self._add_remove_parser(subparsers)
        self._add_replace_parser(subparsers)
        self._add_delete_bucket_parser(subparsers)
        self._add_migrate_url_parser(subparsers)
        self._add_setup_parser(subparsers)
        self._add_doctor_parser(subparsers)

        return parser

    @staticmethod
    def _add_workers_argument(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--workers",
            "-w",
            type=int,
            default=None,
            help="Process files concurrently with this many workers (default: one).",
        )

    def _add_upload_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``upload`` command parser."""
        parser = subparsers.add_parser("upload", help="Upload files to a bucket.")
        parser.add_argument("bucket", help="Target bucket name.")
        parser.add_argument("files", nargs="+", help="Local files to upload.")
        parser.add_argument(
            "--private",
            action="store_true",
            help="Require the API key to access the uploaded files (API v2).",
        )
        self._add_workers_argument(parser)

    def _add_list_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``list`` command parser."""
        parser = subparsers.add_parser("list", help="List files in a bucket.")
        parser.add_argument("bucket", help="Bucket name.")

    def _add_remove_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``remove`` command parser."""
        parser = subparsers.add_parser(
            "remove",
            help="Delete files by key or full file URL.",
        )
        parser.add_argument("bucket", help="Bucket name.")
        parser.add_argument("keys", nargs="+", help="File keys or URLs.")
        self._add_workers_argument(parser)

    def _add_replace_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``replace`` command parser."""
        parser = subparsers.add_parser(
            "replace",
            help="Upload a file and delete the one it replaces.",
        )
        parser.add_argument("bucket", help="Bucket name.")
        parser.add_argument("file", help="Local file to upload.")
        parser.add_argument(
            "--old",
            default=None,
            help="Key or URL of the file to delete (failure does not stop the upload).",
        )
        parser.add_argument(
            "--private",
            action="store_true",
            help="Require the API key to access the uploaded file (API v2).",
        )

    def _add_delete_bucket_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``delete-bucket`` command parser."""
        parser = subparsers.add_parser(
            "delete-bucket",
            help="Delete a bucket and all its files (API v2).",
        )
        parser.add_argument("bucket", help="Bucket name.")
        parser.add_argument(
            "--yes",
            "-y",
            action="store_true",
            help="Skip the confirmation prompt.",
        )

    def _add_migrate_url_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``migrate-url`` command parser."""
        parser = subparsers.add_parser(
            "migrate-url",
            help="Rewrite legacy api.ikat.id file URLs to the ikat.id host.",
        )
        parser.add_argument("urls", nargs="+", help="Legacy file URLs.")

    def _add_setup_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``setup`` command parser."""
        parser = subparsers.add_parser(
            "setup",
            help="Interactively configure the API key and connection settings.",
        )
        parser.add_argument(
            "--config",
            default=None,
            help=(
                "Path to YAML config (default: ~/.config/ikat/config.yaml "
                "or IKAT_CONFIG)."
            ),
        )

    def _add_doctor_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``doctor`` command parser."""
        parser = subparsers.add_parser(
            "doctor",
            help="Check configuration and, optionally, access to a bucket.",
        )
        parser.add_argument(
            "--bucket",
            default=None,
            help="Also list this bucket to verify the key and origin.",
        )

    def _run_command(self, args: argparse.Namespace) -> None:
        """Dispatch parsed args to the target command implementation."""
        if args.command == "setup":
            config_path = Path(args.config) if args.config else get_config_path()
            run_setup(config_path)
            return
        if args.command == "doctor":
            run_doctor(args.bucket)
            return
        handlers = {
            "upload": run_upload,
            "list": run_list,
            "remove": run_remove,
            "replace": run_replace,
            "delete-bucket": run_delete_bucket,
            "migrate-url": run_migrate_url,
        }
        handler = handlers.get(args.command)
        if handler is None:
            sys.exit(f"Unknown command: {args.command}")
        handler(args)

    def run(self, argv: list[str] | None = None) -> None:
        """Run the CLI with the given arguments."""
        args = self._parser.parse_args(argv)
        if args.verbose:
            logger.remove()
            logger.add(sys.stderr, level="DEBUG")
        try:
            self._run_command(args)
        except IkatError as e:
            sys.exit(f"Error: {e}")


def main(argv: list[str] | None = None) -> None:
    """Compatibility entry point for setuptools/CLI wrappers."""
    CliApp().run(argv)


if __name__ == "__main__":
    main()
