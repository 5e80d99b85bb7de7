"""
Directory walker — enumerate a workspace subtree.

Lists the children of a root path and, when recursive, descends into each
child directory depth-first, in the order the service returned them.

A failing listing at any depth aborts the whole walk: the error propagates
and nothing collected so far is returned.
"""

import threading

from adapters.workspace import list_objects as list_children
from logging_config import logger
from models import DirectoryDescriptor, ObjectStatus
from tools.common import check_cancelled
from validation import validate_path


def _walk(
    path: str,
    recursive: bool,
    cancel: threading.Event | None,
    directories: list[DirectoryDescriptor],
    objects: list[ObjectStatus],
) -> None:
    check_cancelled(cancel, "walk", path)
    for child in list_children(path, cancel=cancel):
        if child.is_directory:
            directories.append(DirectoryDescriptor(path=child.path))
            if recursive:
                _walk(child.path, recursive, cancel, directories, objects)
        else:
            objects.append(child)


def list_directories(
    root: str,
    recursive: bool = False,
    cancel: threading.Event | None = None,
) -> list[DirectoryDescriptor]:
    """
    Directories under ``root``.

    Args:
        root: Absolute workspace path to start from (never part of the result)
        recursive: Descend into every directory found; otherwise direct children only
        cancel: Optional event checked before each listing call

    Returns:
        Directory descriptors in discovery order: each directory is followed
        by its own descendants before its next sibling

    Raises:
        InvalidPathError: Malformed root (no remote call made)
        RemoteError: Any listing failed; no partial result
    """
    validate_path(root)
    directories: list[DirectoryDescriptor] = []
    _walk(root, recursive, cancel, directories, [])
    logger.debug(f"list_directories({root}, recursive={recursive}): {len(directories)} found")
    return directories


def list_objects(
    root: str,
    recursive: bool = False,
    cancel: threading.Event | None = None,
) -> list[ObjectStatus]:
    """
    Non-directory objects (notebooks, files, libraries...) under ``root``.

    Same traversal and abort rules as list_directories().

    Returns:
        ObjectStatus entries in discovery order
    """
    validate_path(root)
    objects: list[ObjectStatus] = []
    _walk(root, recursive, cancel, [], objects)
    logger.debug(f"list_objects({root}, recursive={recursive}): {len(objects)} found")
    return objects


def walk(
    root: str,
    recursive: bool = False,
    cancel: threading.Event | None = None,
) -> tuple[list[DirectoryDescriptor], list[ObjectStatus]]:
    """
    Directories and objects under ``root`` from a single traversal.

    Each directory is listed once, so both halves describe the same pass.
    Same traversal and abort rules as list_directories().

    Returns:
        (directories, objects), each in discovery order
    """
    validate_path(root)
    directories: list[DirectoryDescriptor] = []
    objects: list[ObjectStatus] = []
    _walk(root, recursive, cancel, directories, objects)
    logger.debug(
        f"walk({root}, recursive={recursive}): "
        f"{len(directories)} directories, {len(objects)} objects"
    )
    return directories, objects
