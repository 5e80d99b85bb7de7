"""
Update tool implementation — replace a notebook's content in place.

Most formats overwrite in a single import. DBC archives can't: the service
expands them into a directory tree, so the old object is deleted first and
the archive imported fresh. Delete always comes before import.
"""

import threading

from adapters.workspace import delete_object
from extractors.source import build_import_request
from logging_config import logger
from models import DeleteRequest, ExportFormat, Language, NotebookResult, NotebookSettings
from tools.common import check_cancelled
from tools.create import import_and_resolve, read_settings
from validation import validate_path


def do_update(
    path: str,
    content: bytes,
    format: ExportFormat | str = ExportFormat.SOURCE,
    language: Language | str | None = None,
    cancel: threading.Event | None = None,
) -> NotebookResult:
    """
    Replace the notebook at ``path`` with new content.

    Args:
        path: Absolute workspace path of an existing notebook
        content: Raw notebook bytes
        format: SOURCE, JUPYTER, DBC, ...
        language: Notebook language, sent for SOURCE imports only
        cancel: Optional cancellation event

    Returns:
        NotebookResult with the refreshed status

    Raises:
        InvalidPathError: Malformed path (no remote call made)
        RemoteError: First failing remote call, unmodified. Updating a path
            that doesn't exist surfaces whatever the service says.
    """
    validate_path(path)
    resolved_format = ExportFormat.parse(format)
    request = build_import_request(path, content, resolved_format, language, overwrite=True)

    if not resolved_format.supports_overwrite:
        logger.info(f"update: {resolved_format.value} can't overwrite, deleting {path} first")
        check_cancelled(cancel, "update", path)
        delete_object(DeleteRequest(path=path, recursive=True), cancel=cancel)

    return import_and_resolve(request, "update", cancel=cancel)


def update_from_settings(
    settings: NotebookSettings,
    base_path: str | None = None,
    cancel: threading.Event | None = None,
) -> NotebookResult:
    """Update a notebook from settings (inline content or a local source file)."""
    validate_path(settings.path)
    request = read_settings(settings, base_path)
    return do_update(
        request.path,
        request.content,
        format=request.format,
        language=request.language,
        cancel=cancel,
    )
