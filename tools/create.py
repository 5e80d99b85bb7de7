"""
Create tool implementation.

Creates a notebook at a workspace path: make sure the parent directory
exists, import the content, then read back the status the service assigned.
"""

import threading
from pathlib import Path

from adapters.workspace import import_object, mkdirs
from extractors.source import build_import_request, infer_format_and_language, status_warnings
from logging_config import logger
from models import (
    ErrorKind,
    ExportFormat,
    ImportRequest,
    Language,
    NotebookResult,
    NotebookSettings,
    RemoteError,
    WorkspaceError,
)
from tools.common import build_result, check_cancelled
from tools.resolve import resolve
from validation import ROOT, parent_path, validate_path


def _resolve_source(source: str, base_path: str | None) -> Path:
    """Resolve source path relative to base_path (absolute paths pass through)."""
    source_path = Path(source)
    if source_path.is_absolute() or not base_path:
        return source_path
    return Path(base_path) / source_path


def read_settings(settings: NotebookSettings, base_path: str | None = None) -> ImportRequest:
    """
    Turn notebook settings into an import request.

    Reads the source file when one is given.

    Raises:
        WorkspaceError: INVALID_INPUT if both or neither of source/content
            are set, or the source file is missing
    """
    if settings.source and settings.content is not None:
        raise WorkspaceError(
            ErrorKind.INVALID_INPUT,
            "Provide 'content' or 'source', not both",
            details={"path": settings.path},
        )

    if settings.source:
        source_path = _resolve_source(settings.source, base_path)
        if not source_path.is_file():
            raise WorkspaceError(
                ErrorKind.INVALID_INPUT,
                f"Source file not found: {source_path}",
                details={"path": settings.path, "source": str(source_path)},
            )
        content = source_path.read_bytes()
    elif settings.content is not None:
        content = settings.content
    else:
        raise WorkspaceError(
            ErrorKind.INVALID_INPUT,
            "Notebook requires 'content' or 'source'",
            details={"path": settings.path},
        )

    format, language = infer_format_and_language(
        settings.source, settings.format, settings.language
    )
    return build_import_request(
        settings.path, content, format, language, overwrite=settings.overwrite
    )


def import_and_resolve(
    request: ImportRequest,
    operation: str,
    cancel: threading.Event | None = None,
) -> NotebookResult:
    """
    Import, then resolve the status the service assigned.

    Shared by create and update. Absence right after a successful import
    is reported as NOT_FOUND rather than silently returning nothing.
    """
    check_cancelled(cancel, operation, request.path)
    import_object(request, cancel=cancel)

    status = resolve(request.path, cancel=cancel)
    if status is None:
        raise RemoteError(
            code="NOT_FOUND",
            message=f"{request.path} not found after import",
            path=request.path,
            kind=ErrorKind.NOT_FOUND,
        )

    warnings = status_warnings(request, status)
    for warning in warnings:
        logger.warning(f"{operation}: {warning}")

    return build_result(request.path, status, operation, warnings=warnings)


def do_create(
    path: str,
    content: bytes,
    format: ExportFormat | str = ExportFormat.SOURCE,
    language: Language | str | None = None,
    overwrite: bool = True,
    cancel: threading.Event | None = None,
) -> NotebookResult:
    """
    Create a notebook at ``path``.

    Steps, each aborting the rest on failure (no rollback):
    1. mkdirs on the parent directory (skipped for top-level paths)
    2. import with overwrite, so a retry after partial failure is safe
    3. resolve the new object's status

    Args:
        path: Absolute workspace path; stays the notebook's identity
        content: Raw notebook bytes
        format: SOURCE, JUPYTER, DBC, ...
        language: Notebook language, sent for SOURCE imports only
        overwrite: Replace an existing object (ignored for DBC)
        cancel: Optional cancellation event

    Returns:
        NotebookResult with the resolved status

    Raises:
        InvalidPathError: Malformed path (no remote call made)
        RemoteError: First failing remote call, unmodified
    """
    validate_path(path)
    request = build_import_request(path, content, format, language, overwrite)

    parent = parent_path(path)
    if parent != ROOT:
        check_cancelled(cancel, "create", parent)
        mkdirs(parent, cancel=cancel)

    return import_and_resolve(request, "create", cancel=cancel)


def create_from_settings(
    settings: NotebookSettings,
    base_path: str | None = None,
    cancel: threading.Event | None = None,
) -> NotebookResult:
    """Create a notebook from settings (inline content or a local source file)."""
    validate_path(settings.path)
    request = read_settings(settings, base_path)
    return do_create(
        request.path,
        request.content,
        format=request.format,
        language=request.language,
        overwrite=request.overwrite,
        cancel=cancel,
    )
