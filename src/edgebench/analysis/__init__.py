from __future__ import annotations

from edgebench.analysis.attempts import read_attempt_log, worker_breakdown
from edgebench.analysis.compare import Regression, compare_reports, results_frame

__all__ = [
    "Regression",
    "compare_reports",
    "read_attempt_log",
    "results_frame",
    "worker_breakdown",
]
