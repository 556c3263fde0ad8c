"""Summary statistics over the latencies collected by all workers.

Percentiles use the nearest-rank estimator: the value at zero-based index
``ceil(p / 100 * n) - 1`` of the ascending sequence, clamped to the valid
range. No interpolation happens between samples, so for small runs (fewer
than 20 samples) p95 and p99 may select the same element.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from edgebench.metrics.models import AggregateStats, RunResult, WorkerResult


class InsufficientDataError(ValueError):
    """No latency samples (or no elapsed time) to compute statistics from."""


def merge_latencies(results: Iterable[WorkerResult]) -> np.ndarray:
    chunks = [np.asarray(r.latencies_ms, dtype=float) for r in results]
    if not chunks:
        return np.empty(0, dtype=float)
    return np.sort(np.concatenate(chunks), kind="stable")


def _require_samples(sorted_ms: np.ndarray) -> None:
    if sorted_ms.size == 0:
        msg = "insufficient data: no completed requests to compute latency statistics"
        raise InsufficientDataError(msg)


def median(sorted_ms: np.ndarray) -> float:
    _require_samples(sorted_ms)
    return float(np.median(sorted_ms))


def mean(sorted_ms: np.ndarray) -> float:
    _require_samples(sorted_ms)
    return float(np.mean(sorted_ms))


def nearest_rank_index(percentile: int | float, n: int) -> int:
    if n <= 0:
        msg = "insufficient data: percentile of an empty sequence"
        raise InsufficientDataError(msg)
    if not 0 < percentile <= 100:
        msg = f"percentile must be in (0, 100], got {percentile}"
        raise ValueError(msg)
    # ceil(p * n / 100) without float rounding for integral p
    rank = -(-percentile * n // 100)
    return min(max(int(rank) - 1, 0), n - 1)


def nearest_rank_percentile(sorted_ms: np.ndarray, percentile: int | float) -> float:
    _require_samples(sorted_ms)
    return float(sorted_ms[nearest_rank_index(percentile, sorted_ms.size)])


def throughput(operations: int, duration_ms: float) -> float:
    if duration_ms <= 0:
        msg = "insufficient data: run duration is zero"
        raise InsufficientDataError(msg)
    return operations / (duration_ms / 1000.0)


def aggregate(run: RunResult) -> AggregateStats:
    sorted_ms = merge_latencies(run.workers)
    _require_samples(sorted_ms)
    attempted = run.attempted
    return AggregateStats(
        total_requests=attempted,
        completed=int(sorted_ms.size),
        success_count=sum(w.success_count for w in run.workers),
        failure_count=sum(w.failure_count for w in run.workers),
        sorted_latencies_ms=tuple(float(v) for v in sorted_ms),
        mean_ms=mean(sorted_ms),
        median_ms=median(sorted_ms),
        p95_ms=nearest_rank_percentile(sorted_ms, 95),
        p99_ms=nearest_rank_percentile(sorted_ms, 99),
        duration_ms=run.duration_ms,
        throughput_ops=throughput(attempted, run.duration_ms),
    )
