from __future__ import annotations

import asyncio
import logging
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from edgebench.metrics import AttemptResult, ErrorType, RequestOutcome

LOGGER = logging.getLogger(__name__)

FAILURE_MARKER = "FAILED"

_LINE_RE = re.compile(
    r"^Worker (?P<worker>\d+), Operation (?P<operation>\d+), "
    r"Status: (?:(?P<status>\d{3})|" + FAILURE_MARKER + r":(?P<error>[a-z_]+)), "
    r"Latency: (?P<latency>\d+(?:\.\d+)?)ms$"
)


@dataclass(frozen=True, slots=True)
class AttemptRecord:
    worker: int
    operation: int
    status_code: int | None
    error_type: ErrorType | None
    latency_ms: float


def format_attempt_line(result: AttemptResult) -> str:
    if isinstance(result, RequestOutcome):
        status = str(result.status_code)
        latency = result.latency_ms
    else:
        status = f"{FAILURE_MARKER}:{result.error_type.value}"
        latency = result.elapsed_ms
    return f"Worker {result.worker}, Operation {result.operation}, Status: {status}, Latency: {latency:.2f}ms\n"


def parse_attempt_line(line: str) -> AttemptRecord:
    match = _LINE_RE.match(line.rstrip("\n"))
    if match is None:
        msg = f"Malformed attempt log line: {line!r}"
        raise ValueError(msg)
    status = match.group("status")
    error = match.group("error")
    return AttemptRecord(
        worker=int(match.group("worker")),
        operation=int(match.group("operation")),
        status_code=int(status) if status is not None else None,
        error_type=ErrorType(error) if error is not None else None,
        latency_ms=float(match.group("latency")),
    )


class AttemptLog:
    """Append-only log with one complete line per attempted operation.

    Each line goes out in a single write under a lock so concurrent workers
    never interleave partial lines. Write failures are reported and counted
    but never propagate to the caller.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.write_errors = 0
        self.lines_written = 0
        self._lock = threading.Lock()
        self._fh: IO[str] | None = None

    def open(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self.path.open("a", encoding="utf-8")
        except OSError as exc:
            self._fh = None
            LOGGER.warning("attempt log %s unavailable, attempts will not be logged: %s", self.path, exc)

    def close(self) -> None:
        with self._lock:
            if self._fh is None:
                return
            try:
                self._fh.close()
            except OSError as exc:
                LOGGER.warning("failed to close attempt log %s: %s", self.path, exc)
            self._fh = None

    def __enter__(self) -> AttemptLog:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def record(self, result: AttemptResult) -> bool:
        line = format_attempt_line(result)
        with self._lock:
            if self._fh is None:
                self.write_errors += 1
                return False
            try:
                self._fh.write(line)
                self._fh.flush()
            except OSError as exc:
                self.write_errors += 1
                LOGGER.warning(
                    "could not append worker %d operation %d to %s: %s",
                    result.worker,
                    result.operation,
                    self.path,
                    exc,
                )
                return False
            self.lines_written += 1
            return True

    async def arecord(self, result: AttemptResult) -> bool:
        # file I/O runs in a worker thread so in-flight requests keep being timed
        return await asyncio.to_thread(self.record, result)
