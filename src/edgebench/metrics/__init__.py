from __future__ import annotations

from edgebench.metrics.aggregator import (
    InsufficientDataError,
    aggregate,
    mean,
    median,
    merge_latencies,
    nearest_rank_percentile,
    throughput,
)
from edgebench.metrics.models import (
    AggregateStats,
    AttemptResult,
    ErrorType,
    RequestFailure,
    RequestOutcome,
    RunResult,
    WorkerResult,
)

__all__ = [
    "AggregateStats",
    "AttemptResult",
    "ErrorType",
    "InsufficientDataError",
    "RequestFailure",
    "RequestOutcome",
    "RunResult",
    "WorkerResult",
    "aggregate",
    "mean",
    "median",
    "merge_latencies",
    "nearest_rank_percentile",
    "throughput",
]
