"""
Shared test helpers for nbws.

Centralizes the HTTP fixture-table pattern that repeats across test files:
declare the calls a test expects, plug them into a real httpx.Client via
MockTransport, then assert on what was sent.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator
from unittest.mock import patch

import httpx

from adapters.services import build_workspace_client
from config import API_PREFIX

TEST_HOST = "https://ws.test"


@dataclass
class HTTPFixture:
    """One expected call and the response it gets.

    ``resource`` is relative to the workspace API prefix and includes the
    query string exactly as sent, e.g. "/list?path=%2F".

    ``response`` is a JSON body (dict), an httpx.Response (see
    mock_utils.error_response), or an exception to raise from the transport.
    """

    method: str
    resource: str
    response: Any = None
    expected_body: dict[str, Any] | None = None
    reuse: bool = False
    used: int = 0


@dataclass
class FixtureTransport:
    """Records requests and answers them from a fixture table."""

    fixtures: list[HTTPFixture]
    calls: list[tuple[str, str, dict[str, Any] | None]] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        resource = request.url.raw_path.decode("ascii")[len(API_PREFIX):]
        body = json.loads(request.content) if request.content else None
        self.calls.append((request.method, resource, body))

        for fixture in self.fixtures:
            if fixture.method != request.method or fixture.resource != resource:
                continue
            if fixture.used and not fixture.reuse:
                continue
            fixture.used += 1
            if fixture.expected_body is not None:
                assert body == fixture.expected_body, f"{request.method} {resource}: {body}"
            if isinstance(fixture.response, Exception):
                raise fixture.response
            if isinstance(fixture.response, httpx.Response):
                return fixture.response
            return httpx.Response(200, json=fixture.response or {})

        # 501 is not retried, so an unexpected call fails fast
        return httpx.Response(
            501,
            json={"error_code": "NO_FIXTURE", "message": f"no fixture for {request.method} {resource}"},
        )

    @property
    def resources(self) -> list[str]:
        """"METHOD resource" for each call, in order."""
        return [f"{method} {resource}" for method, resource, _ in self.calls]

    def assert_all_used(self) -> None:
        unused = [f"{f.method} {f.resource}" for f in self.fixtures if not f.used]
        assert not unused, f"fixtures never requested: {unused}"


@contextmanager
def workspace_fixtures(fixtures: list[HTTPFixture]) -> Iterator[FixtureTransport]:
    """Patch the workspace client with one answering from ``fixtures``.

    Usage:
        with workspace_fixtures([HTTPFixture("GET", "/list?path=%2F", {"objects": []})]) as ws:
            list_directories("/")
        assert ws.resources == ["GET /list?path=%2F"]
    """
    transport = FixtureTransport(fixtures)
    client = build_workspace_client(
        f"{TEST_HOST}{API_PREFIX}",
        token="test-token",
        timeout=5.0,
        transport=httpx.MockTransport(transport.handler),
    )
    with patch("adapters.workspace.get_workspace_client", return_value=client), \
            patch("tools.common.workspace_host", return_value=TEST_HOST):
        yield transport
