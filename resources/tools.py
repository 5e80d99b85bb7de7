"""
Tool documentation resources.

Builds nbws://tools/* resources from the MCP tool docstrings, so the
docstrings stay the only copy of each tool's documentation.

Tools are registered explicitly by server.py after decoration, which keeps
this module clear of FastMCP internals.
"""

import inspect
from typing import Any, Callable

from logging_config import logger

URI_PREFIX = "nbws://tools/"


def docstring_to_markdown(tool_name: str, docstring: str | None) -> str:
    """Render a tool docstring as markdown under a ``# name()`` heading."""
    if not docstring:
        return f"# {tool_name}()\n\nNo documentation available."
    return f"# {tool_name}()\n\n{inspect.cleandoc(docstring)}"


class ToolResourceRegistry:
    """Registry of tool functions, rendered lazily and cached by URI."""

    def __init__(self) -> None:
        self._tools: dict[str, Callable[..., Any]] = {}
        self._cache: dict[str, dict[str, str]] = {}

    def register_tool(self, name: str, func: Callable[..., Any]) -> None:
        self._tools[name] = func
        self._cache.pop(f"{URI_PREFIX}{name}", None)

    def register_all(self, tools: dict[str, Callable[..., Any]]) -> int:
        """Register several tools at once. Returns how many were added."""
        for name, func in tools.items():
            self.register_tool(name, func)
        logger.debug(f"Registered {len(tools)} tool doc resources")
        return len(tools)

    def get_resource(self, uri: str) -> dict[str, str]:
        """
        Get one tool's documentation resource.

        Raises:
            KeyError: Unknown URI or tool name
        """
        if not uri.startswith(URI_PREFIX):
            raise KeyError(f"Not a tool resource: {uri}")
        if uri in self._cache:
            return self._cache[uri]

        name = uri[len(URI_PREFIX):]
        func = self._tools.get(name)
        if func is None:
            raise KeyError(f"Unknown tool: {name}")

        resource = {
            "uri": uri,
            "name": f"{name}()",
            "mimeType": "text/markdown",
            "text": docstring_to_markdown(name, func.__doc__),
        }
        self._cache[uri] = resource
        return resource

    def list_resources(self) -> list[dict[str, str]]:
        return [
            {"uri": f"{URI_PREFIX}{name}", "name": f"{name}()", "mimeType": "text/markdown"}
            for name in sorted(self._tools)
        ]


_registry: ToolResourceRegistry | None = None


def get_tool_registry() -> ToolResourceRegistry:
    """Get the process-wide registry."""
    global _registry
    if _registry is None:
        _registry = ToolResourceRegistry()
    return _registry
