from __future__ import annotations

from edgebench.report.models import Report, Statistic
from edgebench.report.writer import ReportWriteError, build_report, format_duration, load_report, write_report

__all__ = [
    "Report",
    "ReportWriteError",
    "Statistic",
    "build_report",
    "format_duration",
    "load_report",
    "write_report",
]
