from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import pytest

from edgebench.config import RunConfig, TargetConfig, TransportConfig


def ok_transport(status_code: int = 200, body: bytes = b"hello") -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=body)

    return httpx.MockTransport(handler)


def slow_transport(delay_sec: float) -> httpx.MockTransport:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(delay_sec)
        return httpx.Response(200, content=b"late")

    return httpx.MockTransport(handler)


def refusing_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_config(tmp_path: Path):
    def _make(workers: int = 2, ops: int = 3, **transport: object) -> RunConfig:
        return RunConfig(
            target=TargetConfig(host="bench.local", path="/function/hello"),
            transport=TransportConfig(**transport),
            workers=workers,
            ops_per_worker=ops,
            attempt_log_path=tmp_path / "log.txt",
            report_path=tmp_path / "results.json",
        )

    return _make
