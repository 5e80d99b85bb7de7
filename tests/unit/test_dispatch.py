"""Tests for the MCP tool wrappers and do() dispatch."""

import base64
from pathlib import Path
from unittest.mock import MagicMock, patch

from models import ErrorKind, Language, NotebookResult, ObjectStatus, ObjectType, WorkspaceError
from server import _DISPATCH, do, export, ls, status, tool_resource
from tools import OPERATIONS
from tests.helpers import HTTPFixture, workspace_fixtures
from tests.mock_utils import error_response, make_remote_error, status_body


def _result(path: str, operation: str) -> NotebookResult:
    return NotebookResult(
        path=path,
        status=ObjectStatus(789, path, ObjectType.NOTEBOOK, Language.PYTHON),
        operation=operation,
    )


class TestDispatchConstant:
    """OPERATIONS constant and _DISPATCH dict stay in sync."""

    def test_operations_matches_dispatch_keys(self) -> None:
        """Every operation in OPERATIONS has a dispatch handler, and vice versa."""
        assert set(OPERATIONS) == set(_DISPATCH.keys())

    def test_operations_is_frozenset(self) -> None:
        """OPERATIONS is immutable."""
        assert isinstance(OPERATIONS, frozenset)

    def test_unknown_operation_returns_error(self) -> None:
        result = do(operation="explode", path="/a")
        assert result["error"] is True
        assert result["kind"] == "invalid_input"
        assert "explode" in result["message"]
        # Error message lists supported operations
        for op in OPERATIONS:
            assert op in result["message"]

    def test_path_required(self) -> None:
        result = do(operation="delete")
        assert result["error"] is True
        assert "path" in result["message"]


class TestDoOperations:

    @patch("server.create_from_settings")
    def test_create_inline_text(self, mock_create: MagicMock) -> None:
        mock_create.return_value = _result("/foo/path.py", "create")

        result = do(operation="create", path="/foo/path.py", content="abc\n", language="PYTHON")

        settings = mock_create.call_args.args[0]
        assert settings.content == b"abc\n"
        assert settings.language == "PYTHON"
        assert settings.overwrite is True
        assert result["operation"] == "create"
        assert result["object_id"] == 789

    @patch("server.update_from_settings")
    def test_update_base64(self, mock_update: MagicMock) -> None:
        mock_update.return_value = _result("/arch", "update")

        do(operation="update", path="/arch", content_base64=base64.b64encode(b"PK").decode(), format="DBC")

        settings = mock_update.call_args.args[0]
        assert settings.content == b"PK"
        assert settings.format == "DBC"

    @patch("server.create_from_settings")
    def test_source_and_base_path_passed_through(self, mock_create: MagicMock) -> None:
        mock_create.return_value = _result("/etl", "create")
        do(operation="create", path="/etl", source="etl.py", base_path="/home/me")

        settings = mock_create.call_args.args[0]
        assert settings.source == "etl.py"
        assert settings.content is None
        assert mock_create.call_args.kwargs["base_path"] == "/home/me"

    def test_bad_base64(self) -> None:
        result = do(operation="create", path="/n", content_base64="not base64!")
        assert result["kind"] == "invalid_input"

    def test_text_and_base64_conflict(self) -> None:
        result = do(operation="create", path="/n", content="x", content_base64="eA==")
        assert result["kind"] == "invalid_input"

    @patch("server.create_from_settings")
    def test_errors_become_dicts(self, mock_create: MagicMock) -> None:
        mock_create.side_effect = make_remote_error("INVALID_REQUEST", "Internal error happened")
        result = do(operation="create", path="/n", content="x")
        assert result["error"] is True
        assert result["kind"] == "remote"
        assert result["message"] == "Internal error happened"
        assert result["code"] == "INVALID_REQUEST"

    def test_delete(self) -> None:
        with workspace_fixtures([
            HTTPFixture("POST", "/delete", {}, expected_body={"path": "/n", "recursive": True}),
        ]):
            assert do(operation="delete", path="/n") == {"path": "/n", "operation": "delete", "deleted": True}

    def test_delete_already_gone(self) -> None:
        with workspace_fixtures([
            HTTPFixture("POST", "/delete", error_response(404, "RESOURCE_DOES_NOT_EXIST", "gone")),
        ]):
            result = do(operation="delete", path="/n", recursive=False)
        assert result["deleted"] is False


class TestReadTools:

    def test_status_exists(self) -> None:
        with workspace_fixtures([
            HTTPFixture("GET", "/get-status?path=%2Ffoo%2Fpath.py", status_body("/foo/path.py")),
        ]):
            result = status("/foo/path.py")
        assert result["exists"] is True
        assert result["language"] == "PYTHON"

    def test_status_absent(self) -> None:
        with workspace_fixtures([
            HTTPFixture("GET", "/get-status?path=%2Fgone", error_response(404, "RESOURCE_DOES_NOT_EXIST", "gone")),
        ]):
            assert status("/gone") == {"path": "/gone", "exists": False}

    def test_status_invalid_path(self) -> None:
        assert status("nope")["kind"] == "invalid_input"

    @patch("server.do_read")
    def test_status_unconfigured(self, mock_read: MagicMock) -> None:
        mock_read.side_effect = WorkspaceError(ErrorKind.AUTH_REQUIRED, "Workspace not configured.")
        assert status("/a")["kind"] == "auth_required"

    def test_ls_with_objects(self) -> None:
        listing = {"objects": [
            status_body("/Kid1", "DIRECTORY", 2, None),
            status_body("/nb", "NOTEBOOK", 3, "SQL"),
        ]}
        with workspace_fixtures([HTTPFixture("GET", "/list?path=%2F", listing)]) as ws:
            result = ls("/", objects=True)

        assert result["directories"] == ["/Kid1"]
        assert result["objects"][0]["path"] == "/nb"
        assert ws.resources == ["GET /list?path=%2F"]

    def test_ls_markdown(self) -> None:
        with workspace_fixtures([HTTPFixture("GET", "/list?path=%2F", {"objects": []})]):
            result = ls("/", markdown=True)
        assert result["content"].startswith("# / (direct children)")

    def test_export_inline_text(self) -> None:
        with workspace_fixtures([
            HTTPFixture("GET", "/export?format=SOURCE&path=%2Fn", {"content": "YWJjCg=="}),
        ]):
            assert export("/n")["content"] == "abc\n"

    def test_export_binary_is_base64(self) -> None:
        with workspace_fixtures([
            HTTPFixture("GET", "/export?format=DBC&path=%2Fn", {"content": "//4="}),
        ]):
            assert export("/n", format="DBC")["content_base64"] == "//4="

    def test_export_to_unwritable_destination(self, tmp_path: Path) -> None:
        blocker = tmp_path / "taken"
        blocker.write_text("a file, not a folder")
        with workspace_fixtures([
            HTTPFixture("GET", "/export?format=SOURCE&path=%2Fn", {"content": "YWJjCg=="}),
        ]):
            result = export("/n", destination=str(blocker / "n.py"))

        assert result["error"] is True
        assert result["kind"] == "invalid_input"


class TestToolResources:

    def test_registered_tool_docs(self) -> None:
        text = tool_resource("do")
        assert text.startswith("# do()")
        assert "operation:" in text

    def test_unknown_tool(self) -> None:
        assert "Tool not found" in tool_resource("nope")
