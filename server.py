#!/usr/bin/env python3
"""
Notebook Workspace MCP Server

Manage notebooks and directories in a remote workspace over its REST API.

Verb model (4 tools):
- status: What is at a path (absence is a normal answer, not an error)
- ls: Directories and objects under a path, optionally recursive
- export: Notebook content in a given format
- do: Change the workspace (create, update, delete)

Documentation is provided via MCP Resources, not a tool.

Architecture:
- extractors/: Pure functions (no MCP, no API calls)
- adapters/: Thin workspace API wrappers
- tools/: Tool implementations (business logic)
- server.py: Thin MCP wrappers (this file)
"""

import base64
import binascii
import os
import signal
from typing import Any

from mcp.server.fastmcp import FastMCP

from config import log_level
from extractors import extract_listing_content
from logging_config import configure_logging
from models import ErrorKind, NotebookSettings, WorkspaceError
from tools import (
    OPERATIONS,
    create_from_settings,
    delete_if_present,
    do_export,
    do_read,
    export_to_file,
    update_from_settings,
    walk,
)
from resources.tools import get_tool_registry


def _decode_content(content: str | None, content_base64: str | None) -> bytes | None:
    """Inline content arrives as text or base64; both end up as bytes."""
    if content is not None and content_base64 is not None:
        raise WorkspaceError(
            ErrorKind.INVALID_INPUT, "Provide 'content' or 'content_base64', not both"
        )
    if content_base64 is not None:
        try:
            return base64.b64decode(content_base64, validate=True)
        except binascii.Error as e:
            raise WorkspaceError(
                ErrorKind.INVALID_INPUT, f"content_base64 is not valid base64: {e}"
            ) from e
    if content is not None:
        return content.encode("utf-8")
    return None


def _settings(p: dict[str, Any]) -> NotebookSettings:
    return NotebookSettings(
        path=p["path"],
        source=p["source"],
        content=_decode_content(p["content"], p["content_base64"]),
        language=p["language"],
        format=p["format"],
        overwrite=p["overwrite"],
    )


def _delete(p: dict[str, Any]) -> dict[str, Any]:
    deleted = delete_if_present(p["path"], recursive=p["recursive"])
    return {"path": p["path"], "operation": "delete", "deleted": deleted}


# Dispatch table for do() operations.
# Each handler receives the full params dict and handles its own validation.
_DISPATCH: dict[str, Any] = {
    "create": lambda p: create_from_settings(_settings(p), base_path=p["base_path"]),
    "update": lambda p: update_from_settings(_settings(p), base_path=p["base_path"]),
    "delete": _delete,
}

# Initialize MCP server
mcp = FastMCP("Notebook Workspace")


# ============================================================================
# TOOLS — Verb Model (thin wrappers)
# ============================================================================

@mcp.tool()
def status(path: str) -> dict[str, Any]:
    """
    Look up the object at a workspace path.

    Args:
        path: Absolute workspace path, e.g. '/Users/me@example.com/etl'

    Returns:
        exists: False when nothing is at the path (not an error)
        object_id, object_type, language, path: Service-assigned status
        url: Link to the object in the workspace UI
        workspace_path: Same path under the /Workspace mount
    """
    try:
        result = do_read(path)
    except WorkspaceError as e:
        return e.to_dict()
    if result is None:
        return {"path": path, "exists": False}
    return {"exists": True, **result.to_dict()}


@mcp.tool()
def ls(
    path: str = "/",
    recursive: bool = False,
    objects: bool = False,
    markdown: bool = False,
) -> dict[str, Any]:
    """
    List what is under a workspace directory.

    Args:
        path: Directory to list (never included in the result)
        recursive: Descend into every directory found
        objects: Also list notebooks, files and libraries, not only directories
        markdown: Return a markdown listing instead of structured entries

    Returns:
        directories: Directory paths in discovery order (parents before children)
        objects: Object statuses (when objects=True)
        content: Markdown listing (when markdown=True)
    """
    try:
        directories, all_objects = walk(path, recursive=recursive)
    except WorkspaceError as e:
        return e.to_dict()
    found = all_objects if objects else None

    if markdown:
        return {
            "path": path,
            "content": extract_listing_content(path, directories, found, recursive=recursive),
        }

    result: dict[str, Any] = {
        "path": path,
        "recursive": recursive,
        "directories": [d.path for d in directories],
    }
    if found is not None:
        result["objects"] = [o.to_dict() for o in found]
    return result


@mcp.tool()
def export(
    path: str,
    format: str = "SOURCE",
    destination: str | None = None,
) -> dict[str, Any]:
    """
    Export a notebook's content.

    Args:
        path: Absolute workspace path of the notebook
        format: SOURCE | HTML | JUPYTER | DBC | R_MARKDOWN | AUTO
        destination: Local file to write. Without it, content is returned inline
            (as text when it decodes as UTF-8, otherwise as base64).

    Returns:
        path, format
        file: Written file (when destination is set)
        content or content_base64: Inline content (when destination is not set)
    """
    try:
        if destination:
            written = export_to_file(path, destination, format)
            return {"path": path, "format": format, "file": str(written)}
        content = do_export(path, format)
    except WorkspaceError as e:
        return e.to_dict()

    try:
        return {"path": path, "format": format, "content": content.decode("utf-8")}
    except UnicodeDecodeError:
        return {
            "path": path,
            "format": format,
            "content_base64": base64.b64encode(content).decode("ascii"),
        }


@mcp.tool()
def do(
    operation: str = "create",
    path: str | None = None,
    content: str | None = None,
    content_base64: str | None = None,
    source: str | None = None,
    base_path: str | None = None,
    format: str | None = None,
    language: str | None = None,
    overwrite: bool = True,
    recursive: bool = True,
) -> dict[str, Any]:
    """
    Act on the workspace — create, update or delete a notebook.

    Args:
        operation: What to do. One of: 'create', 'update', 'delete'
        path: Absolute workspace path of the notebook (required)
        content: Notebook text (for create/update)
        content_base64: Binary notebook content, base64-encoded (for create/update)
        source: Local file to upload instead of inline content (for create/update).
                Format and language are inferred from its extension
                (.py/.scala/.sql/.r → SOURCE, .ipynb → JUPYTER, .dbc → DBC).
        base_path: Directory for resolving relative source paths (pass your cwd)
        format: SOURCE | JUPYTER | DBC | HTML | R_MARKDOWN | AUTO (overrides inference)
        language: PYTHON | SCALA | SQL | R (overrides inference; SOURCE only)
        overwrite: Replace an existing object on create (ignored for DBC)
        recursive: Delete directory contents too (for delete)

    Returns:
        create/update: path, object_id, object_type, language, url, warnings
        delete: path, deleted (False when it was already gone)
    """
    handler = _DISPATCH.get(operation)
    if not handler:
        return {"error": True, "kind": "invalid_input",
                "message": f"Unknown operation: {operation}. Supported: {sorted(OPERATIONS)}"}
    if not path:
        return {"error": True, "kind": "invalid_input",
                "message": f"{operation} requires 'path'"}

    params = {
        "path": path, "content": content, "content_base64": content_base64,
        "source": source, "base_path": base_path, "format": format,
        "language": language, "overwrite": overwrite, "recursive": recursive,
    }
    try:
        result = handler(params)
    except WorkspaceError as e:
        return e.to_dict()
    return result if isinstance(result, dict) else result.to_dict()


# ============================================================================
# RESOURCES — Self-documenting MCP capabilities
# ============================================================================

@mcp.resource("nbws://docs/overview")
def docs_overview() -> str:
    """Overview of the notebook workspace MCP server."""
    return """# Notebook Workspace MCP

Manage notebooks in a remote workspace: look them up, list directories,
upload, replace, export and delete.

## Tools

| Tool | Purpose |
|------|---------|
| `status(path)` | What is at a path; `exists: false` when nothing is |
| `ls(path, recursive, objects, markdown)` | Directories (and objects) under a path |
| `export(path, format, destination)` | Content in SOURCE, JUPYTER, DBC, HTML... |
| `do(operation, path, ...)` | create, update, delete |

## Paths

Absolute, `/`-separated, no trailing slash (`/` itself is the root).
`/Users/me/etl` and `/Workspace/Users/me/etl` name the same object.

## Formats

| Extension | Format | Language |
|-----------|--------|----------|
| .py | SOURCE | PYTHON |
| .scala | SOURCE | SCALA |
| .sql | SOURCE | SQL |
| .r | SOURCE | R |
| .ipynb | JUPYTER | (from the notebook) |
| .dbc | DBC | (from the archive) |

DBC archives can't overwrite: update deletes the old object, then imports.

## Errors

Failures come back as `{"error": true, "kind": ..., "message": ...}`.
Service messages are passed through unchanged.

## Configuration

`NBWS_HOST` and `NBWS_TOKEN` are required. `NBWS_TIMEOUT` (seconds) and
`NBWS_LOG_LEVEL` are optional.
"""


# ============================================================================
# AUTO-GENERATED TOOL DOCUMENTATION RESOURCES
# ============================================================================

# Must be done after all @mcp.tool() decorators have run
_tool_registry = get_tool_registry()
_tool_registry.register_all({"status": status, "ls": ls, "export": export, "do": do})


@mcp.resource("nbws://tools/{tool_name}")
def tool_resource(tool_name: str) -> str:
    """Auto-generated documentation for a specific tool from its docstring."""
    try:
        resource = _tool_registry.get_resource(f"nbws://tools/{tool_name}")
        return resource["text"]
    except KeyError:
        return f"# {tool_name}()\n\nTool not found."


# ============================================================================
# SERVER ENTRY POINT
# ============================================================================

def _shutdown_handler(signum: int, frame: object) -> None:
    """Handle termination signals by exiting immediately.

    os._exit() is required because sys.exit() raises SystemExit,
    which asyncio's event loop catches and ignores.
    """
    os._exit(0)


def main() -> None:
    configure_logging(log_level())
    signal.signal(signal.SIGTERM, _shutdown_handler)
    signal.signal(signal.SIGINT, _shutdown_handler)
    mcp.run()


if __name__ == "__main__":
    main()
