from __future__ import annotations

from pathlib import Path

import pandas as pd

from edgebench.loadgen.attempt_log import parse_attempt_line

COLUMNS = ["worker", "operation", "status_code", "error_type", "latency_ms", "success"]


def read_attempt_log(path: Path | str) -> pd.DataFrame:
    rows = []
    with Path(path).open(encoding="utf-8") as fh:
        for line in fh:
            if not line.strip():
                continue
            record = parse_attempt_line(line)
            rows.append(
                {
                    "worker": record.worker,
                    "operation": record.operation,
                    "status_code": record.status_code,
                    "error_type": record.error_type.value if record.error_type else None,
                    "latency_ms": record.latency_ms,
                    "success": record.status_code == 200,
                }
            )
    return pd.DataFrame(rows, columns=COLUMNS)


def worker_breakdown(frame: pd.DataFrame) -> pd.DataFrame:
    """Per-worker attempt counts and latency of completed requests."""
    if frame.empty:
        return pd.DataFrame(columns=["worker", "attempts", "successes", "failures", "mean_ms", "max_ms"])
    completed = frame[frame["error_type"].isna()]
    counts = frame.groupby("worker").agg(
        attempts=("operation", "count"),
        successes=("success", "sum"),
        failures=("error_type", lambda s: int(s.notna().sum())),
    )
    latency = completed.groupby("worker")["latency_ms"].agg(mean_ms="mean", max_ms="max")
    return counts.join(latency, how="left").reset_index()
