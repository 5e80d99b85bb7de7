"""
Workspace Configuration - Single Source of Truth

Connection settings, read from the environment.
Do not duplicate these lookups elsewhere.
"""

import os
from dataclasses import dataclass

from models import ErrorKind, WorkspaceError

# Environment variable names
ENV_HOST = "NBWS_HOST"
ENV_TOKEN = "NBWS_TOKEN"
ENV_TIMEOUT = "NBWS_TIMEOUT"
ENV_LOG_LEVEL = "NBWS_LOG_LEVEL"

# Default timeout for workspace API calls (seconds)
# Prevents indefinite hangs when the service is slow or connections stall
DEFAULT_TIMEOUT = 60.0

# All workspace object endpoints live under this prefix
API_PREFIX = "/api/2.0/workspace"


@dataclass(frozen=True)
class WorkspaceConfig:
    """Resolved connection settings for one workspace."""
    host: str
    token: str
    timeout: float = DEFAULT_TIMEOUT

    @property
    def api_base(self) -> str:
        return f"{self.host}{API_PREFIX}"


def normalize_host(host: str) -> str:
    """
    Normalise a workspace host to ``https://name`` form.

    Examples:
        "adb-123.azuredatabricks.net" -> "https://adb-123.azuredatabricks.net"
        "https://example.cloud/" -> "https://example.cloud"
    """
    host = host.strip().rstrip("/")
    if host and not host.startswith(("http://", "https://")):
        host = f"https://{host}"
    return host


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise WorkspaceError(
            ErrorKind.INVALID_INPUT,
            f"{name} must be a number, got {raw!r}",
        )


def load_config() -> WorkspaceConfig:
    """
    Load workspace settings from the environment.

    Raises:
        WorkspaceError: AUTH_REQUIRED if host or token is missing,
            INVALID_INPUT if the timeout doesn't parse
    """
    host = normalize_host(os.environ.get(ENV_HOST, ""))
    token = os.environ.get(ENV_TOKEN, "").strip()

    missing = [name for name, value in ((ENV_HOST, host), (ENV_TOKEN, token)) if not value]
    if missing:
        raise WorkspaceError(
            ErrorKind.AUTH_REQUIRED,
            f"Workspace not configured. Set {' and '.join(missing)}.",
            details={"missing": missing},
        )

    return WorkspaceConfig(
        host=host,
        token=token,
        timeout=_env_float(ENV_TIMEOUT, DEFAULT_TIMEOUT),
    )


def log_level() -> str:
    """Log level for CLI/server entry points (default INFO)."""
    return os.environ.get(ENV_LOG_LEVEL, "INFO")
