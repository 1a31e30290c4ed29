"""Etymolog CLI entry points.
This module exposes export, import, and inspect commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import EtymologConfig
from core.errors import EtymologError
from core.progress import LoggingProgressSink
from transfer.client import EtymologClient
from transfer.service import ARTIFACT_DOCUMENT, ARTIFACT_IMAGE

_FORMAT_TO_KIND = {"json": ARTIFACT_DOCUMENT, "png": ARTIFACT_IMAGE}


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="etymolog", description="Etymolog export/import CLI")
    parser.add_argument("--data-root", help="Override ETYMOLOG_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_export_command(subparsers)
    _add_import_command(subparsers)
    _add_inspect_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Etymolog CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root)
        try:
            if args.command == "export":
                return _run_export_command(client, args)
            if args.command == "import":
                return _run_import_command(client, args)
            if args.command == "inspect":
                return _run_inspect_command(client, args)
        finally:
            client.close()
    except EtymologError as error:
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None) -> EtymologClient:
    """Build SDK client with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = EtymologConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return EtymologClient(config)


def _run_export_command(client: EtymologClient, args: argparse.Namespace) -> int:
    """Handle export command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    kind = _FORMAT_TO_KIND[args.format]
    output_path = client.export_to_path(
        args.output,
        kind=kind,
        progress=LoggingProgressSink(operation=f"export_{kind}"),
    )
    print(output_path)
    return 0


def _run_import_command(client: EtymologClient, args: argparse.Namespace) -> int:
    """Handle import command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    envelope = client.import_from_path(
        args.artifact,
        progress=LoggingProgressSink(operation="import"),
    )
    print(f"imported_rows={envelope.row_count()}")
    print(f"conlang_name={envelope.display_name or '-'}")
    return 0


def _run_inspect_command(client: EtymologClient, args: argparse.Namespace) -> int:
    """Handle inspect command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    summary = client.inspect_path(args.artifact)
    print(f"kind={summary.kind}")
    print(f"conlang_name={summary.display_name or '-'}")
    exported_at = summary.exported_at.isoformat() if summary.exported_at else "-"
    print(f"exported_at={exported_at}")
    for collection, row_count in summary.row_counts:
        print(f"{collection}\t{row_count}")
    return 0


def _add_export_command(subparsers: Any) -> None:
    """Register export subcommand."""
    parser = subparsers.add_parser("export", help="Export the lexicon database")
    parser.add_argument(
        "--format",
        choices=tuple(_FORMAT_TO_KIND),
        default="json",
        help="Artifact format: JSON document or PNG image",
    )
    parser.add_argument(
        "--output",
        required=True,
        help="Output file, or an existing directory for a default file name",
    )


def _add_import_command(subparsers: Any) -> None:
    """Register import subcommand."""
    parser = subparsers.add_parser(
        "import",
        help="Replace the lexicon database with an exported artifact",
    )
    parser.add_argument("artifact", help="Path to a .etymolog.json or .etymolog.png file")


def _add_inspect_command(subparsers: Any) -> None:
    """Register inspect subcommand."""
    parser = subparsers.add_parser(
        "inspect",
        help="Validate an exported artifact and print its contents summary",
    )
    parser.add_argument("artifact", help="Path to a .etymolog.json or .etymolog.png file")
