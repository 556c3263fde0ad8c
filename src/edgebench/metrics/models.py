from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Union

from edgebench.config import RunConfig


class ErrorType(str, Enum):
    TIMEOUT = "timeout"
    CONNECT = "connect"
    READ = "read"
    PROTOCOL = "protocol"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class RequestOutcome:
    worker: int
    operation: int
    latency_ms: float
    status_code: int

    @property
    def success(self) -> bool:
        return self.status_code == 200


@dataclass(frozen=True, slots=True)
class RequestFailure:
    worker: int
    operation: int
    error_type: ErrorType
    detail: str
    # time until the failure surfaced; never used as a latency sample
    elapsed_ms: float

    @property
    def success(self) -> bool:
        return False


AttemptResult = Union[RequestOutcome, RequestFailure]


@dataclass(frozen=True, slots=True)
class WorkerResult:
    worker: int
    attempts: int
    success_count: int
    failure_count: int
    latencies_ms: list[float]


@dataclass(frozen=True, slots=True)
class RunResult:
    config: RunConfig
    workers: list[WorkerResult]
    started_at: datetime
    duration_ms: float

    @property
    def attempted(self) -> int:
        return sum(w.attempts for w in self.workers)


@dataclass(frozen=True, slots=True)
class AggregateStats:
    total_requests: int
    completed: int
    success_count: int
    failure_count: int
    sorted_latencies_ms: tuple[float, ...]
    mean_ms: float
    median_ms: float
    p95_ms: float
    p99_ms: float
    duration_ms: float
    throughput_ops: float
