"""Tests for workspace path rules and field comparison."""

import pytest

from models import ExportFormat, InvalidPathError, Language
from validation import (
    child_path,
    encode_path,
    extension_of,
    format_for_source,
    language_for_source,
    language_matches_source,
    notebook_url,
    parent_path,
    paths_equivalent,
    validate_path,
    workspace_path,
)


class TestValidatePath:

    @pytest.mark.parametrize("path", ["/", "/Mars", "/foo/path.py", "/Users/me@example.com/etl"])
    def test_valid(self, path: str) -> None:
        assert validate_path(path) == path

    @pytest.mark.parametrize("path,reason", [
        ("", "required"),
        ("foo/bar", "start with"),
        ("/foo/", "end with"),
    ])
    def test_invalid(self, path: str, reason: str) -> None:
        with pytest.raises(InvalidPathError, match=reason):
            validate_path(path)

    def test_non_string(self) -> None:
        with pytest.raises(InvalidPathError):
            validate_path(None)  # type: ignore[arg-type]


class TestParentAndChild:

    @pytest.mark.parametrize("path,parent", [
        ("/foo/path.py", "/foo"),
        ("/a/b/c", "/a/b"),
        ("/Mars", "/"),
        ("/", "/"),
    ])
    def test_parent_path(self, path: str, parent: str) -> None:
        assert parent_path(path) == parent

    def test_child_path(self) -> None:
        assert child_path("/", "Kid1") == "/Kid1"
        assert child_path("/Parent", "Kid1") == "/Parent/Kid1"

    def test_child_name_required(self) -> None:
        with pytest.raises(InvalidPathError):
            child_path("/Parent", "/")


class TestEncodingAndDisplay:

    def test_encode_escapes_separators(self) -> None:
        assert encode_path("/foo/path.py") == "%2Ffoo%2Fpath.py"
        assert encode_path("/") == "%2F"

    def test_encode_escapes_reserved(self) -> None:
        assert encode_path("/Users/me@example.com/a b") == "%2FUsers%2Fme%40example.com%2Fa%20b"

    def test_workspace_path(self) -> None:
        assert workspace_path("/Users/x/nb") == "/Workspace/Users/x/nb"
        assert workspace_path("/Workspace/Users/x/nb") == "/Workspace/Users/x/nb"

    def test_notebook_url(self) -> None:
        assert notebook_url("https://ws.test", "/foo/path.py") == "https://ws.test/#workspace/foo/path.py"


class TestExtensions:

    @pytest.mark.parametrize("source,fmt,language", [
        ("etl.py", ExportFormat.SOURCE, Language.PYTHON),
        ("Job.SCALA", ExportFormat.SOURCE, Language.SCALA),
        ("q.sql", ExportFormat.SOURCE, Language.SQL),
        ("stats.R", ExportFormat.SOURCE, Language.R),
        ("nb.ipynb", ExportFormat.JUPYTER, None),
        ("archive.dbc", ExportFormat.DBC, None),
    ])
    def test_known(self, source: str, fmt: ExportFormat, language: Language | None) -> None:
        assert format_for_source(source) is fmt
        assert language_for_source(source) is language

    def test_unknown(self) -> None:
        assert format_for_source("README") is None
        assert language_for_source("notes.txt") is None

    def test_extension_of_windows_path(self) -> None:
        assert extension_of("C:\\work\\etl.PY") == ".py"


class TestFieldComparison:

    def test_language_matches_source(self) -> None:
        assert language_matches_source("PYTHON", "this.PY")
        assert language_matches_source(Language.SQL, "dir/q.sql")

    def test_language_differs_from_source(self) -> None:
        assert not language_matches_source("SCALA", "this.py")
        assert not language_matches_source("PYTHON", None)
        assert not language_matches_source(None, "this.py")
        assert not language_matches_source("PYTHON", "nb.ipynb")

    def test_unknown_stored_language_does_not_match(self) -> None:
        assert not language_matches_source("COBOL", "this.py")

    @pytest.mark.parametrize("a,b", [
        ("/Users/x/nb", "/Users/x/nb"),
        ("/Workspace/Users/x/nb", "/Users/x/nb"),
        ("/Users/x/nb.py", "/Users/x/nb"),
        ("/Users/x/nb", "/Workspace/Users/x/nb.sql"),
    ])
    def test_paths_equivalent(self, a: str, b: str) -> None:
        assert paths_equivalent(a, b)
        assert paths_equivalent(b, a)

    @pytest.mark.parametrize("a,b", [
        ("/Users/x/nb", "/Users/x/other"),
        ("/Users/x/nb.ipynb", "/Users/x/nb"),
        ("/Users/x/nb.py", "/Users/x/nb.sql"),
    ])
    def test_paths_not_equivalent(self, a: str, b: str) -> None:
        assert not paths_equivalent(a, b)
