"""Tests for import payload building and post-import checks (pure, no mocks)."""

import hashlib

from extractors.source import (
    build_import_request,
    content_md5,
    infer_format_and_language,
    status_warnings,
)
from models import ExportFormat, ImportRequest, Language, ObjectStatus, ObjectType


class TestInferFormatAndLanguage:

    def test_from_source_extension(self) -> None:
        assert infer_format_and_language("etl.py") == (ExportFormat.SOURCE, Language.PYTHON)
        assert infer_format_and_language("nb.ipynb") == (ExportFormat.JUPYTER, None)
        assert infer_format_and_language("a.dbc") == (ExportFormat.DBC, None)

    def test_explicit_values_win(self) -> None:
        result = infer_format_and_language("etl.py", format="JUPYTER", language="SCALA")
        assert result == (ExportFormat.JUPYTER, Language.SCALA)

    def test_explicit_language_keeps_inferred_format(self) -> None:
        assert infer_format_and_language("q.sql", language="PYTHON") == (ExportFormat.SOURCE, Language.PYTHON)

    def test_no_source(self) -> None:
        assert infer_format_and_language(None) == (ExportFormat.SOURCE, None)

    def test_unknown_extension_falls_back_to_source(self) -> None:
        assert infer_format_and_language("notes.txt") == (ExportFormat.SOURCE, None)


class TestBuildImportRequest:

    def test_source(self) -> None:
        request = build_import_request("/foo/path.py", b"abc\n", "SOURCE", "PYTHON")
        assert request == ImportRequest(
            path="/foo/path.py",
            content=b"abc\n",
            format=ExportFormat.SOURCE,
            language=Language.PYTHON,
            overwrite=True,
        )

    def test_jupyter_drops_language(self) -> None:
        request = build_import_request("/nb", b"{}", ExportFormat.JUPYTER, Language.PYTHON)
        assert request.language is None
        assert request.overwrite is True

    def test_dbc_drops_language_and_overwrite(self) -> None:
        request = build_import_request("/arch", b"PK", ExportFormat.DBC, Language.SCALA, overwrite=True)
        assert request.language is None
        assert request.overwrite is False

    def test_no_overwrite(self) -> None:
        assert build_import_request("/n", b"", overwrite=False).overwrite is False


class TestStatusWarnings:

    def _request(self, fmt: ExportFormat, language: Language | None = None) -> ImportRequest:
        return ImportRequest(path="/n", content=b"", format=fmt, language=language, overwrite=True)

    def test_matching_notebook(self) -> None:
        status = ObjectStatus(1, "/n", ObjectType.NOTEBOOK, Language.PYTHON)
        assert status_warnings(self._request(ExportFormat.SOURCE, Language.PYTHON), status) == []

    def test_not_a_notebook(self) -> None:
        status = ObjectStatus(1, "/n", ObjectType.FILE)
        warnings = status_warnings(self._request(ExportFormat.JUPYTER), status)
        assert warnings == ["Expected a notebook at /n, service reports FILE"]

    def test_language_mismatch(self) -> None:
        status = ObjectStatus(1, "/n", ObjectType.NOTEBOOK, Language.SCALA)
        warnings = status_warnings(self._request(ExportFormat.SOURCE, Language.PYTHON), status)
        assert warnings == ["Imported as PYTHON but service reports language SCALA"]

    def test_dbc_not_checked(self) -> None:
        status = ObjectStatus(1, "/n", ObjectType.DIRECTORY)
        assert status_warnings(self._request(ExportFormat.DBC), status) == []


def test_content_md5() -> None:
    assert content_md5(b"abc\n") == hashlib.md5(b"abc\n").hexdigest()
