#!/usr/bin/env python3
"""
CLI interface for nbws.

Usage:
    nbws status /Users/me/etl
    nbws ls / --recursive --objects
    nbws create /Users/me/etl --source etl.py
    nbws export /Users/me/etl --output etl.py

This provides the same functionality as the MCP tools but via command line.
Results are printed as JSON; failures print the error as JSON and exit 1.
"""

import argparse
import json
import sys
from typing import Any

from config import log_level
from extractors import extract_listing_content
from logging_config import configure_logging
from models import NotebookSettings, WorkspaceError
from tools import (
    create_from_settings,
    delete_if_present,
    do_export,
    do_read,
    export_to_file,
    update_from_settings,
    walk,
)

FORMATS = ["SOURCE", "HTML", "JUPYTER", "DBC", "R_MARKDOWN", "AUTO"]
LANGUAGES = ["PYTHON", "SCALA", "SQL", "R"]


def _print(result: dict[str, Any]) -> None:
    print(json.dumps(result, indent=2))


def _settings(args: argparse.Namespace) -> NotebookSettings:
    content = None
    if args.source is None:
        content = args.content.encode("utf-8") if args.content is not None else None
        if content is None:
            # Read from stdin if no --content or --source provided
            content = sys.stdin.buffer.read()
    return NotebookSettings(
        path=args.path,
        source=args.source,
        content=content,
        language=args.language,
        format=args.format,
        overwrite=getattr(args, "overwrite", True),
    )


def cmd_status(args: argparse.Namespace) -> None:
    """Show the status of one path."""
    result = do_read(args.path, with_content=args.md5)
    if result is None:
        _print({"path": args.path, "exists": False})
    else:
        _print({"exists": True, **result.to_dict()})


def cmd_ls(args: argparse.Namespace) -> None:
    """List directories (and optionally objects) under a path."""
    directories, all_objects = walk(args.path, recursive=args.recursive)
    objects = all_objects if args.objects else None

    if args.markdown:
        print(extract_listing_content(args.path, directories, objects, recursive=args.recursive))
        return

    result: dict[str, Any] = {
        "path": args.path,
        "recursive": args.recursive,
        "directories": [d.path for d in directories],
    }
    if objects is not None:
        result["objects"] = [o.to_dict() for o in objects]
    _print(result)


def cmd_create(args: argparse.Namespace) -> None:
    """Create a notebook."""
    _print(create_from_settings(_settings(args)).to_dict())


def cmd_update(args: argparse.Namespace) -> None:
    """Replace a notebook's content."""
    _print(update_from_settings(_settings(args)).to_dict())


def cmd_delete(args: argparse.Namespace) -> None:
    """Delete a notebook or directory."""
    deleted = delete_if_present(args.path, recursive=args.recursive)
    _print({"path": args.path, "operation": "delete", "deleted": deleted})


def cmd_export(args: argparse.Namespace) -> None:
    """Export a notebook to a file or stdout."""
    if args.output:
        written = export_to_file(args.path, args.output, args.format)
        _print({"path": args.path, "format": args.format, "file": str(written)})
    else:
        sys.stdout.buffer.write(do_export(args.path, args.format))


def _add_content_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", help="Absolute workspace path of the notebook")
    content = parser.add_mutually_exclusive_group()
    content.add_argument("--source", help="Local file to upload")
    content.add_argument("--content", help="Notebook text (or read from stdin)")
    parser.add_argument(
        "--format",
        choices=FORMATS,
        help="Import format (default: inferred from --source, else SOURCE)",
    )
    parser.add_argument(
        "--language",
        choices=LANGUAGES,
        help="Notebook language (default: inferred from --source)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nbws",
        description="Notebook workspace CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    nbws status /Users/me/etl
    nbws ls /Users/me --recursive
    nbws ls / --objects --markdown
    nbws create /Users/me/etl --source etl.py
    echo "print(1)" | nbws create /Users/me/scratch --language PYTHON
    nbws update /Shared/archive --source archive.dbc
    nbws delete /Users/me/old
    nbws export /Users/me/etl --format JUPYTER --output etl.ipynb

Environment:
    NBWS_HOST, NBWS_TOKEN (required), NBWS_TIMEOUT, NBWS_LOG_LEVEL
""",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # status
    status_p = subparsers.add_parser("status", help="Show what is at a path")
    status_p.add_argument("path", help="Absolute workspace path")
    status_p.add_argument(
        "--md5",
        action="store_true",
        help="Also export the content and report its md5",
    )
    status_p.set_defaults(func=cmd_status)

    # ls
    ls_p = subparsers.add_parser("ls", help="List a workspace directory")
    ls_p.add_argument("path", nargs="?", default="/", help="Directory to list (default: /)")
    ls_p.add_argument("--recursive", "-r", action="store_true", help="Descend into subdirectories")
    ls_p.add_argument("--objects", action="store_true", help="Also list notebooks and files")
    ls_p.add_argument("--markdown", action="store_true", help="Print a markdown listing")
    ls_p.set_defaults(func=cmd_ls)

    # create
    create_p = subparsers.add_parser("create", help="Create a notebook")
    _add_content_args(create_p)
    create_p.add_argument(
        "--no-overwrite",
        dest="overwrite",
        action="store_false",
        help="Fail if something already exists at the path",
    )
    create_p.set_defaults(func=cmd_create)

    # update
    update_p = subparsers.add_parser("update", help="Replace a notebook's content")
    _add_content_args(update_p)
    update_p.set_defaults(func=cmd_update)

    # delete
    delete_p = subparsers.add_parser("delete", help="Delete a notebook or directory")
    delete_p.add_argument("path", help="Absolute workspace path")
    delete_p.add_argument(
        "--no-recursive",
        dest="recursive",
        action="store_false",
        help="Refuse to delete a non-empty directory",
    )
    delete_p.set_defaults(func=cmd_delete)

    # export
    export_p = subparsers.add_parser("export", help="Export a notebook")
    export_p.add_argument("path", help="Absolute workspace path")
    export_p.add_argument("--format", choices=FORMATS, default="SOURCE", help="Export format")
    export_p.add_argument("--output", "-o", help="Write to this file instead of stdout")
    export_p.set_defaults(func=cmd_export)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(log_level())
    try:
        args.func(args)
    except WorkspaceError as e:
        _print(e.to_dict())
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
