from unittest.mock import MagicMock

import httpx
import pytest
from click.testing import CliRunner
from opentracing.mocktracer import MockTracer

from httpx_tracer import cli
from httpx_tracer.exporters import span_tree
from httpx_tracer.instrumentation import request, send


@pytest.fixture
def use_transport(monkeypatch, transport):
    monkeypatch.setattr(cli, "_build_client", lambda timeout: httpx.Client(transport=transport))


def test_traces_a_request(use_transport, sent_requests):
    result = CliRunner().invoke(cli.main, ["-X", "post", "-H", "Accept: application/json",
                                           "http://localhost/api/data"])

    assert result.exit_code == 0, result.output
    assert "POST http://localhost/api/data: HTTP 200" in result.output
    assert "http.request" in result.output
    assert "'python-httpx'" in result.output
    assert sent_requests[0].headers["accept"] == "application/json"
    assert "ot-tracer-traceid" in sent_requests[0].headers
    assert not send.is_instrumented()


def test_request_boundary(use_transport):
    result = CliRunner().invoke(cli.main, ["--boundary", "request", "http://localhost/missing"])

    assert result.exit_code == 0, result.output
    assert "HTTP 404" in result.output
    assert "'HTTP'" in result.output
    assert not request.is_instrumented()


def test_transport_failure_exits_non_zero(monkeypatch):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    monkeypatch.setattr(
        cli, "_build_client", lambda timeout: httpx.Client(transport=httpx.MockTransport(handler))
    )

    result = CliRunner().invoke(cli.main, ["http://localhost:1/"])

    assert result.exit_code == 1
    assert "Request failed: connection refused" in result.output
    assert not send.is_instrumented()


def test_rejects_malformed_headers():
    result = CliRunner().invoke(cli.main, ["-H", "no-colon", "http://localhost/"])

    assert result.exit_code == 2
    assert "expected 'Name: value'" in result.output


@pytest.mark.parametrize("seconds, expected", [
    (0.0, "0.0ms"),
    (0.0125, "12.5ms"),
    (2.25, "2.25s"),
])
def test_format_duration(seconds, expected):
    assert span_tree.format_duration(seconds) == expected


def test_build_tree_groups_children_under_parents():
    tracer = MockTracer()
    with tracer.start_active_span("parent") as scope:
        with tracer.start_active_span("child"):
            pass

    children = span_tree.build_tree(tracer.finished_spans())

    [root] = children[None]
    assert root.operation_name == "parent"
    assert [span.operation_name for span in children[scope.span.context.span_id]] == ["child"]


def test_invalid_url_exits_non_zero(monkeypatch):
    client = MagicMock()
    client.__enter__.return_value.request.side_effect = httpx.InvalidURL("Invalid IPv6 address")
    monkeypatch.setattr(cli, "_build_client", lambda timeout: client)

    result = CliRunner().invoke(cli.main, ["http://["])

    assert result.exit_code == 1
    assert "Request failed: Invalid IPv6 address" in result.output
    assert not send.is_instrumented()
