from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from edgebench.config import RunConfig
from edgebench.metrics import AggregateStats
from edgebench.report.models import Report, Statistic

LOGGER = logging.getLogger(__name__)

ENVIRONMENT_PREFIX = "edge-server: "


class ReportWriteError(OSError):
    """The report could not be written; any previous report is left intact."""


def format_duration(milliseconds: float) -> str:
    """Render a duration as ``Xm YYs``."""
    total_seconds = int(max(0.0, milliseconds) / 1000.0 + 0.5)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}m {seconds:02d}s"


def _stat(name: str, value: float, unit: str) -> Statistic:
    return Statistic(name=name, value=f"{value:.2f}", unit=unit)


def build_report(
    stats: AggregateStats,
    config: RunConfig,
    environment_label: str,
    *,
    created_at: datetime | None = None,
) -> Report:
    return Report(
        created_at=created_at or datetime.now(timezone.utc),
        execution_time=format_duration(stats.duration_ms),
        parametrization=config.to_metadata(),
        other_info=f"{ENVIRONMENT_PREFIX}{environment_label}",
        results=(
            _stat("avg latency", stats.mean_ms, "ms"),
            _stat("throughput", stats.throughput_ops, "ops/s"),
            _stat("95th percentile latency", stats.p95_ms, "ms"),
            _stat("99th percentile latency", stats.p99_ms, "ms"),
            _stat("median latency", stats.median_ms, "ms"),
        ),
    )


def write_report(report: Report, path: Path | str) -> Path:
    """Atomically replace ``path`` with the JSON rendering of ``report``."""
    path = Path(path)
    payload = json.dumps(report.to_dict(), indent=2)
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as fh:
            tmp_name = fh.name
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
        msg = f"Failed to write report to {path}: {exc}"
        raise ReportWriteError(msg) from exc
    LOGGER.info("report written to %s", path)
    return path


def load_report(path: Path | str) -> dict[str, Any]:
    with Path(path).open(encoding="utf-8") as fh:
        return json.load(fh)
