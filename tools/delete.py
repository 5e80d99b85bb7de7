"""
Delete tool implementation — one recursive delete call.

Deleting something already gone is the caller's call to make: the
service's NOT_FOUND error propagates unchanged, and the CLI/MCP wrappers
report it as "already gone".
"""

import threading

from adapters.workspace import delete_object
from logging_config import logger
from models import DeleteRequest, ErrorKind, RemoteError
from tools.common import check_cancelled
from validation import validate_path


def do_delete(
    path: str,
    recursive: bool = True,
    cancel: threading.Event | None = None,
) -> None:
    """
    Delete the object at ``path``.

    Args:
        path: Absolute workspace path
        recursive: Also delete directory contents
        cancel: Optional cancellation event

    Raises:
        InvalidPathError: Malformed path (no remote call made)
        RemoteError: The service refused, message unchanged
    """
    validate_path(path)
    check_cancelled(cancel, "delete", path)
    delete_object(DeleteRequest(path=path, recursive=recursive), cancel=cancel)


def delete_if_present(
    path: str,
    recursive: bool = True,
    cancel: threading.Event | None = None,
) -> bool:
    """
    Delete, treating NOT_FOUND as "already gone".

    Returns:
        True if the object was deleted, False if it was already absent
    """
    try:
        do_delete(path, recursive=recursive, cancel=cancel)
    except RemoteError as e:
        if e.kind is ErrorKind.NOT_FOUND:
            logger.info(f"delete: {path} already gone")
            return False
        raise
    return True
