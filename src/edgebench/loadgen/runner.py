from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone

import httpx

from edgebench.config import RunConfig
from edgebench.loadgen.attempt_log import AttemptLog
from edgebench.loadgen.client import build_client, send_request
from edgebench.metrics import RequestOutcome, RunResult, WorkerResult

LOGGER = logging.getLogger(__name__)


async def run_benchmark(
    config: RunConfig,
    attempt_log: AttemptLog,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RunResult:
    """Run ``config.workers`` concurrent workers to completion.

    Every worker issues ``config.ops_per_worker`` requests one after another.
    The returned duration spans from the first dispatch to the moment the
    last worker finished.
    """
    LOGGER.info(
        "starting %d worker(s) x %d operation(s) against %s",
        config.workers,
        config.ops_per_worker,
        config.url,
    )
    started_at = datetime.now(timezone.utc)
    started_mono = time.perf_counter()
    tasks = [
        asyncio.create_task(_worker(worker_id, config, attempt_log, transport))
        for worker_id in range(config.workers)
    ]
    results = await asyncio.gather(*tasks)
    duration_ms = (time.perf_counter() - started_mono) * 1000.0
    LOGGER.info("all workers finished in %.2f ms", duration_ms)
    return RunResult(
        config=config,
        workers=list(results),
        started_at=started_at,
        duration_ms=duration_ms,
    )


def run_benchmark_sync(
    config: RunConfig,
    attempt_log: AttemptLog,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RunResult:
    return asyncio.run(run_benchmark(config, attempt_log, transport=transport))


async def _worker(
    worker_id: int,
    config: RunConfig,
    attempt_log: AttemptLog,
    transport: httpx.AsyncBaseTransport | None,
) -> WorkerResult:
    latencies: list[float] = []
    success_count = 0
    failure_count = 0
    async with build_client(config.transport, transport) as client:
        for operation in range(config.ops_per_worker):
            result = await send_request(client, config, worker_id, operation)
            await attempt_log.arecord(result)
            if isinstance(result, RequestOutcome):
                latencies.append(result.latency_ms)
                if result.success:
                    success_count += 1
            else:
                failure_count += 1
    LOGGER.debug(
        "worker %d done: %d ok, %d failed, %d completed",
        worker_id,
        success_count,
        failure_count,
        len(latencies),
    )
    return WorkerResult(
        worker=worker_id,
        attempts=config.ops_per_worker,
        success_count=success_count,
        failure_count=failure_count,
        latencies_ms=latencies,
    )

