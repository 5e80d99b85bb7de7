"""
Workspace path utilities and field comparison rules.

Handles:
- Path validation (absolute, slash-delimited, no trailing slash)
- Parent/child derivation
- URL query encoding for path-addressed API calls
- Display forms (workspace path, browser URL)
- Equality rules for fields the service normalises (language, path)

Everything here is pure: no API calls, no logging.
"""

from pathlib import PurePosixPath
from urllib.parse import quote

from models import ExportFormat, InvalidPathError, Language, WorkspaceError

SEPARATOR = "/"
ROOT = "/"

# Prefix the service adds when paths are shown through the /Workspace mount
WORKSPACE_MOUNT = "/Workspace"


# =============================================================================
# SOURCE EXTENSIONS
# =============================================================================

# Lower-cased source file extension → (format, language)
# Jupyter and DBC carry their language inside the payload.
EXTENSION_MAP: dict[str, tuple[ExportFormat, Language | None]] = {
    ".py": (ExportFormat.SOURCE, Language.PYTHON),
    ".scala": (ExportFormat.SOURCE, Language.SCALA),
    ".sql": (ExportFormat.SOURCE, Language.SQL),
    ".r": (ExportFormat.SOURCE, Language.R),
    ".ipynb": (ExportFormat.JUPYTER, None),
    ".dbc": (ExportFormat.DBC, None),
}


def extension_of(source: str) -> str:
    """Lower-cased extension of a file name, including the dot ('' if none)."""
    return PurePosixPath(source.replace("\\", SEPARATOR)).suffix.lower()


def language_for_source(source: str) -> Language | None:
    """Language implied by a source file's extension, if any."""
    entry = EXTENSION_MAP.get(extension_of(source))
    return entry[1] if entry else None


def format_for_source(source: str) -> ExportFormat | None:
    """Import format implied by a source file's extension, if any."""
    entry = EXTENSION_MAP.get(extension_of(source))
    return entry[0] if entry else None


# =============================================================================
# PATH VALIDATION
# =============================================================================

def validate_path(path: str) -> str:
    """
    Check that a workspace path is well formed.

    Accepts:
    - Root: /
    - Absolute paths: /Users/alice/etl.py

    Returns:
        The path, unchanged

    Raises:
        InvalidPathError: If path is empty, relative, or ends with a separator
    """
    if not isinstance(path, str) or not path:
        raise InvalidPathError(path, "path is required")
    if not path.startswith(SEPARATOR):
        raise InvalidPathError(path, "must start with '/'")
    if path != ROOT and path.endswith(SEPARATOR):
        raise InvalidPathError(path, "must not end with '/'")
    return path


def parent_path(path: str) -> str:
    """
    Parent directory of a workspace path.

    Examples:
        "/foo/path.py" -> "/foo"
        "/Mars" -> "/"
        "/" -> "/"
    """
    validate_path(path)
    head, _, _ = path.rpartition(SEPARATOR)
    return head or ROOT


def child_path(parent: str, name: str) -> str:
    """Join a directory path and a child name."""
    validate_path(parent)
    name = name.strip(SEPARATOR)
    if not name:
        raise InvalidPathError(name, "child name is required")
    if parent == ROOT:
        return f"{ROOT}{name}"
    return f"{parent}{SEPARATOR}{name}"


def encode_path(path: str) -> str:
    """
    URL-encode a path for use as a query parameter value.

    Every reserved character is escaped, separators included:
        "/foo/path.py" -> "%2Ffoo%2Fpath.py"
    """
    return quote(path, safe="")


def workspace_path(path: str) -> str:
    """Path as seen through the /Workspace mount."""
    if path == WORKSPACE_MOUNT or path.startswith(WORKSPACE_MOUNT + SEPARATOR):
        return path
    return f"{WORKSPACE_MOUNT}{path}"


def notebook_url(host: str, path: str) -> str:
    """Browser URL for a workspace object."""
    return f"{host}/#workspace{path}"


# =============================================================================
# FIELD COMPARISON
# =============================================================================

def language_matches_source(old_language: str | Language | None, source: str | None) -> bool:
    """
    True when a stored language is implied by the source file anyway.

    Lets callers ignore a language difference when the language was never
    set explicitly but inferred from the source file's extension.
    """
    if not source or not old_language:
        return False
    inferred = language_for_source(source)
    if inferred is None:
        return False
    try:
        return Language.parse(old_language) is inferred
    except WorkspaceError:
        return False


def _strip_mount(path: str) -> str:
    if path.startswith(WORKSPACE_MOUNT + SEPARATOR):
        return path[len(WORKSPACE_MOUNT):]
    return path


def _strip_source_extension(path: str) -> str:
    ext = extension_of(path)
    entry = EXTENSION_MAP.get(ext)
    if entry and entry[0] is ExportFormat.SOURCE:
        return path[: -len(ext)]
    return path


def paths_equivalent(a: str, b: str) -> bool:
    """
    Compare two workspace paths the way the service normalises them.

    - "/Workspace/Users/x/nb" and "/Users/x/nb" are the same object
    - "/Users/x/nb.py" and "/Users/x/nb" are the same notebook
      (source imports drop the extension; compared case-insensitively)
    """
    a, b = _strip_mount(a), _strip_mount(b)
    if a == b:
        return True
    stripped_a, stripped_b = _strip_source_extension(a), _strip_source_extension(b)
    return (stripped_a == b and stripped_a != a) or (stripped_b == a and stripped_b != b)
