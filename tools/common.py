"""
Shared helpers for tool modules.

Cancellation checks between remote calls, and result assembly.
"""

import threading

from adapters.services import workspace_host
from models import NotebookResult, ObjectStatus, OperationCancelled
from validation import notebook_url, workspace_path


def check_cancelled(cancel: threading.Event | None, operation: str, path: str) -> None:
    """
    Raise OperationCancelled if the caller has set ``cancel``.

    Called before every remote call: each call is atomic on the service
    side, so stopping between calls leaves nothing half-applied.
    """
    if cancel is not None and cancel.is_set():
        raise OperationCancelled(operation, path)


def build_result(
    path: str,
    status: ObjectStatus,
    operation: str,
    md5: str | None = None,
    warnings: list[str] | None = None,
) -> NotebookResult:
    """Assemble a NotebookResult with browser URL and mounted path filled in."""
    return NotebookResult(
        path=path,
        status=status,
        operation=operation,
        url=notebook_url(workspace_host(), path),
        workspace_path=workspace_path(path),
        md5=md5,
        warnings=warnings or [],
    )
