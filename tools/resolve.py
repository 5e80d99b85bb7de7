"""
Status resolver — path → object status.

The one place that decides what "not found" means: absence is a normal
outcome (returned as None), every other failure is an error.
"""

import threading

from adapters.workspace import export_object, get_status
from extractors.source import content_md5
from logging_config import logger
from models import ErrorKind, ExportFormat, NotebookResult, ObjectStatus, RemoteError
from tools.common import build_result, check_cancelled
from validation import validate_path


def resolve(path: str, cancel: threading.Event | None = None) -> ObjectStatus | None:
    """
    Resolve a workspace path to its current status.

    Read-only and idempotent.

    Args:
        path: Absolute workspace path
        cancel: Optional event; when set, raises OperationCancelled instead of calling out

    Returns:
        ObjectStatus, or None when nothing exists at path

    Raises:
        InvalidPathError: Malformed path (no remote call made)
        RemoteError: Any failure other than not-found, message unchanged
    """
    validate_path(path)
    check_cancelled(cancel, "resolve", path)
    try:
        return get_status(path, cancel=cancel)
    except RemoteError as e:
        if e.kind is ErrorKind.NOT_FOUND:
            logger.debug(f"resolve: nothing at {path} ({e.code})")
            return None
        raise


def do_read(
    path: str,
    with_content: bool = False,
    export_format: ExportFormat | str = ExportFormat.SOURCE,
    cancel: threading.Event | None = None,
) -> NotebookResult | None:
    """
    Read the current state of a managed notebook.

    Args:
        path: Absolute workspace path
        with_content: Also export the content and report its md5
        export_format: Format used for the export when with_content is set
        cancel: Optional cancellation event

    Returns:
        NotebookResult, or None when the notebook no longer exists
        (callers treat that as "already gone")
    """
    status = resolve(path, cancel=cancel)
    if status is None:
        return None

    md5 = None
    if with_content:
        check_cancelled(cancel, "read", path)
        md5 = content_md5(
            export_object(path, ExportFormat.parse(export_format), cancel=cancel)
        )

    return build_result(path, status, "read", md5=md5)
