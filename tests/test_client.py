from __future__ import annotations

import asyncio
from typing import Any

import httpx

from conftest import ok_transport, refusing_transport
from edgebench.config import TransportConfig
from edgebench.loadgen import client as client_module
from edgebench.loadgen.client import build_client, send_request
from edgebench.metrics import ErrorType, RequestFailure, RequestOutcome


class _RecordingClient:
    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs


def test_tls_verification_is_off_by_default(monkeypatch) -> None:
    # Known, intentional weakening: target certificates are not validated
    # unless --verify-tls is passed.
    monkeypatch.setattr(client_module.httpx, "AsyncClient", _RecordingClient)
    built = build_client(TransportConfig())
    assert TransportConfig().verify_tls is False
    assert built.kwargs["verify"] is False


def test_tls_verification_can_be_enabled(monkeypatch) -> None:
    monkeypatch.setattr(client_module.httpx, "AsyncClient", _RecordingClient)
    built = build_client(TransportConfig(verify_tls=True))
    assert built.kwargs["verify"] is True


def test_reuse_policy_controls_keepalive(monkeypatch) -> None:
    monkeypatch.setattr(client_module.httpx, "AsyncClient", _RecordingClient)
    fresh = build_client(TransportConfig(reuse_connections=False))
    reused = build_client(TransportConfig(reuse_connections=True))
    assert fresh.kwargs["limits"].max_keepalive_connections == 0
    assert fresh.kwargs["headers"]["Connection"] == "close"
    assert reused.kwargs["limits"].max_keepalive_connections == 1


def test_send_request_targets_configured_url(make_config) -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, content=b"x" * 1024)

    config = make_config()

    async def go():
        async with build_client(config.transport, httpx.MockTransport(handler)) as client:
            return await send_request(client, config, worker=1, operation=7)

    result = asyncio.run(go())
    assert seen == ["http://bench.local:8000/function/hello"]
    assert isinstance(result, RequestOutcome)
    assert result.success
    assert (result.worker, result.operation) == (1, 7)
    assert result.latency_ms >= 0


def test_send_request_returns_failure_value(make_config) -> None:
    config = make_config()

    async def go():
        async with build_client(config.transport, refusing_transport()) as client:
            return await send_request(client, config, worker=0, operation=0)

    result = asyncio.run(go())
    assert isinstance(result, RequestFailure)
    assert result.error_type is ErrorType.CONNECT
    assert not result.success


def test_redirect_status_is_not_success(make_config) -> None:
    config = make_config()

    async def go():
        async with build_client(config.transport, ok_transport(status_code=302)) as client:
            return await send_request(client, config, worker=0, operation=0)

    result = asyncio.run(go())
    assert isinstance(result, RequestOutcome)
    assert result.status_code == 302
    assert not result.success
