from __future__ import annotations

import asyncio
import logging
import time

import httpx

from edgebench.config import RunConfig, TransportConfig
from edgebench.metrics import AttemptResult, ErrorType, RequestFailure, RequestOutcome

LOGGER = logging.getLogger(__name__)


def build_client(
    transport_config: TransportConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the client owned by a single worker.

    With connection reuse disabled the pool keeps no idle connections, so
    every request is sent over a fresh connection.
    """
    if transport_config.reuse_connections:
        limits = httpx.Limits(max_connections=1, max_keepalive_connections=1)
        headers = {"Connection": "keep-alive"}
    else:
        limits = httpx.Limits(max_connections=1, max_keepalive_connections=0)
        headers = {"Connection": "close"}
    return httpx.AsyncClient(
        verify=transport_config.verify_tls,
        limits=limits,
        headers=headers,
        timeout=httpx.Timeout(transport_config.timeout_sec),
        transport=transport,
    )


async def _get(client: httpx.AsyncClient, config: RunConfig) -> httpx.Response:
    # the body is read in full before this returns
    return await client.request(config.target.method, config.url)


async def send_request(
    client: httpx.AsyncClient,
    config: RunConfig,
    worker: int,
    operation: int,
) -> AttemptResult:
    timeout_sec = config.transport.timeout_sec
    start_mono = time.perf_counter()
    try:
        if timeout_sec is None:
            resp = await _get(client, config)
        else:
            resp = await asyncio.wait_for(_get(client, config), timeout=timeout_sec)
        latency_ms = (time.perf_counter() - start_mono) * 1000.0
        return RequestOutcome(
            worker=worker,
            operation=operation,
            latency_ms=latency_ms,
            status_code=resp.status_code,
        )
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        err, detail = ErrorType.TIMEOUT, f"no response within {config.transport.timeout_ms}ms"
        cause: Exception = exc
    except httpx.ConnectError as exc:
        err, detail, cause = ErrorType.CONNECT, str(exc), exc
    except httpx.ReadError as exc:
        err, detail, cause = ErrorType.READ, str(exc), exc
    except httpx.RemoteProtocolError as exc:
        err, detail, cause = ErrorType.PROTOCOL, str(exc), exc
    except (httpx.HTTPError, OSError) as exc:
        err, detail, cause = ErrorType.OTHER, str(exc), exc
    elapsed_ms = (time.perf_counter() - start_mono) * 1000.0
    LOGGER.warning(
        "worker %d operation %d failed (%s): %s",
        worker,
        operation,
        err.value,
        detail or type(cause).__name__,
    )
    return RequestFailure(
        worker=worker,
        operation=operation,
        error_type=err,
        detail=detail or type(cause).__name__,
        elapsed_ms=elapsed_ms,
    )
