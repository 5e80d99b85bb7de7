"""MCP resources generated from tool docstrings."""
