"""
Workspace API client initialization.

Shared by all adapters. Reads configuration, builds one httpx.Client.
Uses lru_cache for thread-safe caching.

The client uses the configured timeout (60 seconds by default) to prevent
indefinite hangs when the service is slow or network connections stall.
"""

from functools import lru_cache

import httpx

from config import load_config

__all__ = [
    "get_workspace_client",
    "build_workspace_client",
    "workspace_host",
    "clear_client_cache",
    "USER_AGENT",
]

USER_AGENT = "nbws/0.1"


def build_workspace_client(
    base_url: str,
    token: str,
    timeout: float,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Build an authorized client rooted at the workspace API prefix.

    NOT cached. ``transport`` lets tests plug in httpx.MockTransport.
    """
    return httpx.Client(
        base_url=base_url,
        headers={
            "Authorization": f"Bearer {token}",
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        },
        timeout=httpx.Timeout(timeout),
        transport=transport,
    )


@lru_cache(maxsize=1)
def get_workspace_client() -> httpx.Client:
    """Get authenticated workspace API client (cached, thread-safe)."""
    config = load_config()
    return build_workspace_client(config.api_base, config.token, config.timeout)


def workspace_host() -> str:
    """Scheme and host of the configured workspace, e.g. https://example.cloud."""
    url = get_workspace_client().base_url
    return f"{url.scheme}://{url.netloc.decode('ascii')}"


def clear_client_cache() -> None:
    """Clear cached client. Useful for testing or after a rejected token."""
    get_workspace_client.cache_clear()
