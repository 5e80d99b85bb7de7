"""
Extractors — Pure functions for payload building and rendering.

No MCP awareness, no workspace API calls. Just transform input → output.
Easily testable without mocks.
"""

from .listing import extract_listing_content
from .source import (
    build_import_request,
    content_md5,
    infer_format_and_language,
    status_warnings,
)

__all__ = [
    "extract_listing_content",
    "build_import_request",
    "content_md5",
    "infer_format_and_language",
    "status_warnings",
]
