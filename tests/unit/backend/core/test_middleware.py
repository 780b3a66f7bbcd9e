"""
Unit Tests for Request Context Middleware.

Tests request ID propagation, client address resolution and timing headers.
"""

from unittest.mock import MagicMock, patch

import pytest
from starlette.requests import Request
from starlette.responses import Response

from mynote.backend.core.middleware import RequestContextMiddleware, resolve_client_ip


def _request(headers: dict | None = None, host: str | None = "127.0.0.1") -> MagicMock:
    request = MagicMock(spec=Request)
    request.headers = headers or {}
    request.method = "GET"
    request.url = MagicMock()
    request.url.path = "/api/chat/list"
    if host is None:
        request.client = None
    else:
        request.client = MagicMock()
        request.client.host = host
    request.state = MagicMock()
    return request


class TestResolveClientIp:

    def test_uses_socket_peer_without_proxy_header(self):
        assert resolve_client_ip(_request()) == "127.0.0.1"

    def test_prefers_first_forwarded_hop(self):
        request = _request({"X-Forwarded-For": "203.0.113.7, 10.0.0.2"})
        assert resolve_client_ip(request) == "203.0.113.7"

    def test_blank_forwarded_header_falls_back(self):
        request = _request({"X-Forwarded-For": "  "})
        assert resolve_client_ip(request) == "127.0.0.1"

    def test_no_client_at_all(self):
        assert resolve_client_ip(_request(host=None)) is None


class TestRequestContextMiddleware:

    @pytest.fixture
    def middleware(self):
        return RequestContextMiddleware(MagicMock())

    @pytest.mark.asyncio
    async def test_generates_request_id(self, middleware):
        request = _request()

        async def call_next(req):
            return Response(content="OK", status_code=200)

        with patch("mynote.backend.core.middleware.structlog.contextvars"):
            response = await middleware.dispatch(request, call_next)

        assert response.headers["X-Request-ID"]
        assert response.headers["X-Response-Time"].endswith("ms")

    @pytest.mark.asyncio
    async def test_propagates_incoming_request_id(self, middleware):
        request = _request({"X-Request-ID": "req-123"})

        async def call_next(req):
            assert req.state.request_id == "req-123"
            return Response(content="OK", status_code=200)

        with patch("mynote.backend.core.middleware.structlog.contextvars"):
            response = await middleware.dispatch(request, call_next)

        assert response.headers["X-Request-ID"] == "req-123"

    @pytest.mark.asyncio
    async def test_stores_client_ip_on_state(self, middleware):
        request = _request({"X-Forwarded-For": "198.51.100.4"})

        async def call_next(req):
            assert req.state.client_ip == "198.51.100.4"
            return Response(content="OK", status_code=200)

        with patch("mynote.backend.core.middleware.structlog.contextvars"):
            await middleware.dispatch(request, call_next)

    @pytest.mark.asyncio
    async def test_binds_web_source(self, middleware):
        request = _request()

        async def call_next(req):
            return Response(content="OK", status_code=200)

        with patch("mynote.backend.core.middleware.structlog.contextvars") as contextvars:
            await middleware.dispatch(request, call_next)

        bound = contextvars.bind_contextvars.call_args.kwargs
        assert bound["source"] == "web"
        assert bound["client_ip"] == "127.0.0.1"

    @pytest.mark.asyncio
    async def test_reraises_handler_errors(self, middleware):
        request = _request()

        async def call_next(req):
            raise RuntimeError("boom")

        with patch("mynote.backend.core.middleware.structlog.contextvars"):
            with pytest.raises(RuntimeError):
                await middleware.dispatch(request, call_next)
