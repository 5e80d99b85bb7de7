"""
Source extractor — pure functions, no I/O.

Turns notebook settings (inline bytes or a source file's name + bytes)
into an ImportRequest, and checks what the service reported back against
what was asked for.
"""

import hashlib

from models import ExportFormat, ImportRequest, Language, ObjectStatus, ObjectType
from validation import format_for_source, language_for_source


def infer_format_and_language(
    source: str | None,
    format: ExportFormat | str | None = None,
    language: Language | str | None = None,
) -> tuple[ExportFormat, Language | None]:
    """
    Decide import format and language.

    Explicit values win. Otherwise the source file extension decides
    (".py" → SOURCE/PYTHON, ".ipynb" → JUPYTER, ".dbc" → DBC), falling
    back to SOURCE with no language.
    """
    resolved_format = ExportFormat.parse(format) if format else None
    resolved_language = Language.parse(language)

    if source:
        if resolved_format is None:
            resolved_format = format_for_source(source)
        if resolved_language is None:
            resolved_language = language_for_source(source)

    return resolved_format or ExportFormat.SOURCE, resolved_language


def build_import_request(
    path: str,
    content: bytes,
    format: ExportFormat | str | None = ExportFormat.SOURCE,
    language: Language | str | None = None,
    overwrite: bool = True,
) -> ImportRequest:
    """
    Build the import payload for one notebook.

    - language is only sent for plain source imports
    - overwrite is dropped for formats that can't replace in place (DBC)
    """
    resolved_format = ExportFormat.parse(format)
    resolved_language = Language.parse(language) if resolved_format.carries_language else None
    return ImportRequest(
        path=path,
        content=content,
        format=resolved_format,
        language=resolved_language,
        overwrite=overwrite and resolved_format.supports_overwrite,
    )


def status_warnings(request: ImportRequest, status: ObjectStatus) -> list[str]:
    """
    Compare a post-import status with the import that produced it.

    Source and Jupyter imports should land as notebooks; a source import
    with an explicit language should keep it. Mismatches are reported,
    not raised: the service has the final say on what it stored.
    """
    warnings: list[str] = []
    if request.format not in (ExportFormat.SOURCE, ExportFormat.JUPYTER):
        return warnings

    if status.object_type is not ObjectType.NOTEBOOK:
        found = status.object_type.value if status.object_type else "unknown"
        warnings.append(
            f"Expected a notebook at {request.path}, service reports {found}"
        )
    elif request.language is not None and status.language is not request.language:
        found = status.language.value if status.language else "none"
        warnings.append(
            f"Imported as {request.language.value} but service reports language {found}"
        )
    return warnings


def content_md5(content: bytes) -> str:
    """Hex md5 of content, for change detection between reads."""
    return hashlib.md5(content).hexdigest()
