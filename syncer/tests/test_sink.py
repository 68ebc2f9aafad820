"""Tests for the HTTP sink client."""

import json

import httpx

from syncer.src.models import Category, NormalizedEvent
from syncer.src.sink import SinkClient

ENDPOINT = "http://sink.test/api/logs"


def _event() -> NormalizedEvent:
    return NormalizedEvent(Category.EXEC, "tool:bash:start",
                           {"toolCallId": "c1", "raw": "tool start"},
                           "2026-10-17T09:00:00.000Z")


def _client(handler) -> SinkClient:
    return SinkClient(ENDPOINT, timeout=1.0, transport=httpx.MockTransport(handler))


class TestDeliver:
    def test_posts_event_as_json(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"success": True, "id": 1})

        with _client(handler) as client:
            result = client.deliver(_event())

        assert result.delivered is True
        assert result.status_code == 200
        assert len(seen) == 1
        assert seen[0].method == "POST"
        assert str(seen[0].url) == ENDPOINT
        assert seen[0].headers["content-type"] == "application/json"
        assert json.loads(seen[0].content) == {
            "category": "exec",
            "action": "tool:bash:start",
            "details": {"toolCallId": "c1", "raw": "tool start"},
            "timestamp": "2026-10-17T09:00:00.000Z",
        }

    def test_any_2xx_is_success(self):
        with _client(lambda request: httpx.Response(201)) as client:
            assert client.deliver(_event()).delivered is True

    def test_non_success_status(self):
        with _client(lambda request: httpx.Response(500, json={"success": False})) as client:
            result = client.deliver(_event())
        assert result.delivered is False
        assert result.status_code == 500
        assert result.error == "HTTP 500"

    def test_client_error_status(self):
        with _client(lambda request: httpx.Response(400)) as client:
            assert client.deliver(_event()).delivered is False

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with _client(handler) as client:
            result = client.deliver(_event())
        assert result.delivered is False
        assert result.status_code is None
        assert "connection refused" in result.error

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with _client(handler) as client:
            assert client.deliver(_event()).delivered is False

    def test_single_attempt_per_event(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        with _client(handler) as client:
            client.deliver(_event())
        assert len(calls) == 1
