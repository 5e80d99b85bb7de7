"""
Workspace adapter — workspace object REST API wrapper.

One function per remote call: get-status, list, mkdirs, import, export,
delete. All calls are path-addressed; paths travel URL-query-encoded in
GET requests and as JSON in POST bodies.

Each call takes an optional ``cancel`` event, which with_retry watches
between attempts.

Errors the service reports become RemoteError with its message verbatim.
Deciding what a NOT_FOUND *means* is left to the caller (see tools/resolve.py).
"""

import base64
import threading
from typing import Any

import httpx

from adapters.services import get_workspace_client
from logging_config import log_api_call, log_api_result
from models import (
    DeleteRequest,
    ErrorKind,
    ExportFormat,
    ImportRequest,
    NOT_FOUND_CODES,
    ObjectStatus,
    RemoteError,
)
from retry import with_retry
from validation import encode_path

__all__ = [
    "get_status",
    "list_objects",
    "mkdirs",
    "import_object",
    "export_object",
    "delete_object",
]


def _error_kind(status: int, code: str) -> ErrorKind:
    """Map HTTP status / service error code onto an ErrorKind.

    A 404 only means "nothing at this path" when the service says so, or when
    the body carried no error code at all. Other 404s (wrong host, a proxy
    answering ENDPOINT_NOT_FOUND) stay REMOTE.
    """
    if code in NOT_FOUND_CODES or (status == 404 and code == "HTTP_404"):
        return ErrorKind.NOT_FOUND
    if status == 401:
        return ErrorKind.AUTH_EXPIRED
    if status == 403:
        return ErrorKind.PERMISSION_DENIED
    if status == 429:
        return ErrorKind.RATE_LIMITED
    return ErrorKind.REMOTE


def _remote_error(response: httpx.Response, path: str) -> RemoteError:
    """
    Build a RemoteError from a non-2xx response.

    The service answers with {"error_code": ..., "message": ...}. Anything
    else (proxies, gateways) falls back to HTTP_<status> and the body text.
    """
    status = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}

    code = body.get("error_code") or f"HTTP_{status}"
    message = body.get("message") or response.text.strip() or response.reason_phrase

    return RemoteError(
        code=code,
        message=message,
        status=status,
        path=path,
        kind=_error_kind(status, code),
        retryable=status in (429, 502, 503, 504),
    )


def _parse_body(response: httpx.Response, path: str) -> dict[str, Any]:
    if response.is_error:
        raise _remote_error(response, path)
    if not response.content:
        return {}
    body = response.json()
    return body if isinstance(body, dict) else {}


def _get(endpoint: str, path: str, **query: str) -> dict[str, Any]:
    """GET with query parameters; ``path`` goes last, encoded."""
    params = [f"{key}={encode_path(value)}" for key, value in query.items()]
    params.append(f"path={encode_path(path)}")
    log_api_call("GET", endpoint, path=path, **query)
    response = get_workspace_client().get(f"{endpoint}?{'&'.join(params)}")
    return _parse_body(response, path)


def _post(endpoint: str, path: str, body: dict[str, Any]) -> dict[str, Any]:
    log_api_call("POST", endpoint, path=path)
    response = get_workspace_client().post(endpoint, json=body)
    return _parse_body(response, path)


@with_retry(max_attempts=3, delay_ms=1000)
def get_status(path: str, *, cancel: threading.Event | None = None) -> ObjectStatus:
    """
    Get the status of the object at ``path``.

    Raises:
        RemoteError: NOT_FOUND kind when nothing exists at path,
            REMOTE (or a more specific kind) on any other failure
    """
    result = _get("/get-status", path)
    log_api_result("/get-status")
    return ObjectStatus.from_api(result)


@with_retry(max_attempts=3, delay_ms=1000)
def list_objects(path: str, *, cancel: threading.Event | None = None) -> list[ObjectStatus]:
    """
    List direct children of the directory at ``path``. Does not recurse.

    An empty directory may come back as no "objects" key, an empty list, or
    a single zero-identity {} entry. Placeholders are dropped so all three
    read as an empty listing.

    Raises:
        RemoteError: On API failure
    """
    result = _get("/list", path)

    children = [ObjectStatus.from_api(item) for item in result.get("objects") or []]
    children = [child for child in children if not child.is_placeholder]

    log_api_result("/list", len(children))
    return children


@with_retry(max_attempts=3, delay_ms=1000)
def mkdirs(path: str, *, cancel: threading.Event | None = None) -> None:
    """
    Create ``path`` and any missing parents.

    Idempotent: an existing directory is success.
    """
    _post("/mkdirs", path, {"path": path})
    log_api_result("/mkdirs")


def import_body(request: ImportRequest) -> dict[str, Any]:
    """
    JSON body for the import call.

    ``language`` is omitted when unset and ``overwrite`` when false,
    matching what the service expects for DBC and Jupyter payloads.
    """
    body: dict[str, Any] = {
        "path": request.path,
        "format": request.format.value,
        "content": base64.b64encode(request.content).decode("ascii"),
    }
    if request.language is not None:
        body["language"] = request.language.value
    if request.overwrite:
        body["overwrite"] = True
    return body


# Only a replacing import can be repeated safely: a second non-overwrite
# import after one that landed fails with RESOURCE_ALREADY_EXISTS.
@with_retry(max_attempts=3, delay_ms=1000, retry_if=lambda request, **_: request.overwrite)
def import_object(request: ImportRequest, *, cancel: threading.Event | None = None) -> None:
    """
    Import content at ``request.path``.

    Retried on transient failures only when ``request.overwrite`` is set.

    Raises:
        RemoteError: On API failure (e.g. RESOURCE_ALREADY_EXISTS without overwrite)
    """
    _post("/import", request.path, import_body(request))
    log_api_result("/import")


@with_retry(max_attempts=3, delay_ms=1000)
def export_object(
    path: str,
    format: ExportFormat = ExportFormat.SOURCE,
    *,
    cancel: threading.Event | None = None,
) -> bytes:
    """
    Export the object at ``path`` in the given format.

    Returns:
        Decoded content bytes

    Raises:
        RemoteError: On API failure
    """
    result = _get("/export", path, format=format.value)
    log_api_result("/export")
    return base64.b64decode(result.get("content", ""))


# Single attempt: a retry after a delete that landed would report NOT_FOUND
@with_retry(max_attempts=1)
def delete_object(request: DeleteRequest, *, cancel: threading.Event | None = None) -> None:
    """
    Delete the object at ``request.path``. Never retried.

    Raises:
        RemoteError: On API failure, including NOT_FOUND when already gone
    """
    body: dict[str, Any] = {"path": request.path}
    if request.recursive:
        body["recursive"] = True
    _post("/delete", request.path, body)
    log_api_result("/delete")
