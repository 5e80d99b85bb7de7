"""
Export tool implementation — fetch a notebook's content in a given format.
"""

import threading
from pathlib import Path

from adapters.workspace import export_object
from models import ErrorKind, ExportFormat, WorkspaceError
from tools.common import check_cancelled
from validation import validate_path


def do_export(
    path: str,
    format: ExportFormat | str = ExportFormat.SOURCE,
    cancel: threading.Event | None = None,
) -> bytes:
    """
    Export the object at ``path``.

    Returns:
        Decoded content bytes

    Raises:
        InvalidPathError: Malformed path (no remote call made)
        RemoteError: On API failure
    """
    validate_path(path)
    check_cancelled(cancel, "export", path)
    return export_object(path, ExportFormat.parse(format), cancel=cancel)


def export_to_file(
    path: str,
    destination: str | Path,
    format: ExportFormat | str = ExportFormat.SOURCE,
    cancel: threading.Event | None = None,
) -> Path:
    """
    Export to a local file, creating parent folders. Returns the written path.

    Raises:
        WorkspaceError: INVALID_INPUT when the destination can't be written
    """
    content = do_export(path, format, cancel=cancel)
    target = Path(destination)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    except OSError as e:
        raise WorkspaceError(
            ErrorKind.INVALID_INPUT,
            f"Cannot write {target}: {e.strerror or e}",
            details={"path": path, "destination": str(target)},
        ) from e
    return target
