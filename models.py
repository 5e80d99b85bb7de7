"""
Type definitions for nbws.

Dataclasses and enums defining the contracts between layers:
- Adapters produce these structures from workspace API responses
- Extractors consume and build them without any I/O
- Tools wire everything together

These types make the adapter→tool contract explicit and IDE-checkable.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from logging_config import logger


# ============================================================================
# ERROR TYPES
# ============================================================================

class ErrorKind(Enum):
    """Categories of errors for consistent handling."""
    AUTH_EXPIRED = "auth_expired"        # Token rejected (401)
    AUTH_REQUIRED = "auth_required"      # No host/token configured
    NOT_FOUND = "not_found"              # Object doesn't exist
    PERMISSION_DENIED = "permission_denied"  # No access to object
    RATE_LIMITED = "rate_limited"        # Hit API quota
    NETWORK_ERROR = "network_error"      # Connection failed
    TIMEOUT = "timeout"                  # Request timed out
    INVALID_INPUT = "invalid_input"      # Bad parameters, caught locally
    REMOTE = "remote"                    # Any other error reported by the service
    CANCELLED = "cancelled"              # Caller asked us to stop
    UNKNOWN = "unknown"                  # Unexpected error


class WorkspaceError(Exception):
    """
    Structured error for consistent handling across layers.

    Adapters and tools raise these.
    CLI and MCP wrappers catch and format them.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for CLI/MCP response."""
        return {
            "error": True,
            "kind": self.kind.value,
            "message": self.message,
            "retryable": self.retryable,
            **self.details,
        }


class InvalidPathError(WorkspaceError):
    """Malformed workspace path. Raised before any remote call."""

    def __init__(self, path: Any, reason: str):
        super().__init__(
            ErrorKind.INVALID_INPUT,
            f"Invalid path {path!r}: {reason}",
            details={"path": path},
        )
        self.path = path


class RemoteError(WorkspaceError):
    """
    Error reported by the workspace service.

    ``message`` is the service's text, verbatim. Callers match on prefixes.
    ``code`` is the machine-readable error code (e.g. NOT_FOUND,
    INVALID_REQUEST, RESOURCE_DOES_NOT_EXIST).
    """

    def __init__(
        self,
        code: str,
        message: str,
        status: int | None = None,
        path: str | None = None,
        kind: ErrorKind = ErrorKind.REMOTE,
        retryable: bool = False,
    ):
        details: dict[str, Any] = {"code": code}
        if status is not None:
            details["http_status"] = status
        if path is not None:
            details["path"] = path
        super().__init__(kind, message, details=details, retryable=retryable)
        self.code = code
        self.status = status
        self.path = path

    @property
    def is_not_found(self) -> bool:
        return self.code in NOT_FOUND_CODES


class OperationCancelled(WorkspaceError):
    """Raised between remote calls once the caller's cancel event is set."""

    def __init__(self, operation: str, path: str):
        super().__init__(
            ErrorKind.CANCELLED,
            f"{operation} cancelled at {path}",
            details={"path": path},
        )


# Error codes the service uses for a missing object
NOT_FOUND_CODES = frozenset({"NOT_FOUND", "RESOURCE_DOES_NOT_EXIST"})


# ============================================================================
# OBJECT TYPES
# ============================================================================

class ObjectType(Enum):
    """Kind of object stored at a workspace path."""
    NOTEBOOK = "NOTEBOOK"
    DIRECTORY = "DIRECTORY"
    FILE = "FILE"
    LIBRARY = "LIBRARY"
    REPO = "REPO"
    DASHBOARD = "DASHBOARD"

    @classmethod
    def parse(cls, value: str | None) -> "ObjectType | None":
        """Map a wire value to an ObjectType. Empty or unknown → None."""
        if not value:
            return None
        try:
            return cls(value.upper())
        except ValueError:
            logger.warning(f"Unknown object type from workspace API: {value!r}")
            return None


class Language(Enum):
    """Source language of a notebook."""
    PYTHON = "PYTHON"
    SCALA = "SCALA"
    SQL = "SQL"
    R = "R"

    @classmethod
    def parse(cls, value: "str | Language | None") -> "Language | None":
        """Map a wire value to a Language. Empty string means no language."""
        if value is None or isinstance(value, Language):
            return value
        if not value:
            return None
        try:
            return cls(value.upper())
        except ValueError:
            raise WorkspaceError(
                ErrorKind.INVALID_INPUT,
                f"Unknown language {value!r}. Supported: {[m.value for m in cls]}",
            )


class ExportFormat(Enum):
    """Encoding used for import/export of workspace objects."""
    SOURCE = "SOURCE"
    HTML = "HTML"
    JUPYTER = "JUPYTER"
    DBC = "DBC"
    R_MARKDOWN = "R_MARKDOWN"
    AUTO = "AUTO"

    @classmethod
    def parse(cls, value: "str | ExportFormat | None") -> "ExportFormat":
        if isinstance(value, ExportFormat):
            return value
        if not value:
            return cls.SOURCE
        try:
            return cls(value.upper())
        except ValueError:
            raise WorkspaceError(
                ErrorKind.INVALID_INPUT,
                f"Unknown format {value!r}. Supported: {[m.value for m in cls]}",
            )

    @property
    def supports_overwrite(self) -> bool:
        """DBC archives expand into directories and can't be replaced in place."""
        return self is not ExportFormat.DBC

    @property
    def carries_language(self) -> bool:
        """Only plain source imports need an explicit language."""
        return self is ExportFormat.SOURCE


# ============================================================================
# WORKSPACE OBJECTS
# ============================================================================

@dataclass
class ObjectStatus:
    """
    Status of a single workspace object, as returned by get-status and list.

    ``path`` is the natural key. ``object_id`` is assigned by the service and
    may change when an object is re-created. ``language`` is only ever set
    for notebooks.
    """
    object_id: int
    path: str
    object_type: ObjectType | None = None
    language: Language | None = None

    def __post_init__(self) -> None:
        if self.object_type is not ObjectType.NOTEBOOK:
            self.language = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ObjectStatus":
        """Build from a workspace API object dict."""
        try:
            language = Language.parse(data.get("language"))
        except WorkspaceError:
            logger.warning(f"Unknown language from workspace API: {data.get('language')!r}")
            language = None
        return cls(
            object_id=int(data.get("object_id", 0) or 0),
            path=data.get("path", ""),
            object_type=ObjectType.parse(data.get("object_type")),
            language=language,
        )

    @property
    def is_directory(self) -> bool:
        return self.object_type is ObjectType.DIRECTORY

    @property
    def is_placeholder(self) -> bool:
        """
        Zero-identity entry ({}) that list responses may return for an
        empty directory. API quirk: treated as non-existent.
        """
        return not self.object_id and not self.path and self.object_type is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "object_id": self.object_id,
            "path": self.path,
            "object_type": self.object_type.value if self.object_type else None,
            "language": self.language.value if self.language else None,
        }


@dataclass
class DirectoryDescriptor:
    """A confirmed directory found during a walk."""
    path: str


@dataclass
class ImportRequest:
    """Payload for the import call. ``content`` is raw bytes, encoded on the wire."""
    path: str
    content: bytes
    format: ExportFormat = ExportFormat.SOURCE
    language: Language | None = None
    overwrite: bool = False


@dataclass
class DeleteRequest:
    """Payload for the delete call."""
    path: str
    recursive: bool = False


@dataclass
class NotebookSettings:
    """
    Desired state of one managed notebook.

    Content comes from exactly one of ``source`` (a local file, read at
    create/update time) or ``content`` (inline bytes). ``format`` and
    ``language`` left unset are inferred from the source extension.
    """
    path: str
    source: str | None = None
    content: bytes | None = None
    language: Language | None = None
    format: ExportFormat | None = None
    overwrite: bool = True


# ============================================================================
# OPERATION RESULTS
# ============================================================================

@dataclass
class NotebookResult:
    """Successful result from a read/create/update operation.

    ``path`` is the durable identity of the managed object; the status
    carries whatever the service reported after the operation.
    """
    path: str
    status: ObjectStatus
    operation: str
    url: str = ""
    workspace_path: str = ""
    md5: str | None = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        status = self.status.to_dict()
        # Identity is the managed path, not whatever the service echoed back
        status.pop("path")
        result: dict[str, Any] = {
            "path": self.path,
            "operation": self.operation,
            "url": self.url,
            "workspace_path": self.workspace_path,
            **status,
        }
        if self.md5 is not None:
            result["md5"] = self.md5
        if self.warnings:
            result["warnings"] = self.warnings
        return result
