from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import pandas as pd

# statistic name -> (direction, threshold); +1 flags increases, -1 flags drops
_RULES: dict[str, tuple[int, float]] = {
    "99th percentile latency": (1, 0.2),
    "95th percentile latency": (1, 0.2),
    "avg latency": (1, 0.2),
    "throughput": (-1, 0.2),
}


@dataclass(frozen=True, slots=True)
class Regression:
    metric: str
    delta_pct: float
    message: str


def results_frame(report: Mapping[str, Any]) -> pd.DataFrame:
    frame = pd.DataFrame(report.get("results", []), columns=["name", "value", "unit"])
    frame["value"] = pd.to_numeric(frame["value"], errors="coerce")
    return frame


def compare_reports(base: Mapping[str, Any], candidate: Mapping[str, Any]) -> list[Regression]:
    regressions: list[Regression] = []
    base_df = results_frame(base)
    cand_df = results_frame(candidate)
    if base_df.empty or cand_df.empty:
        return regressions
    merged = base_df.merge(cand_df, on="name", suffixes=("_base", "_cand"))
    for _, row in merged.iterrows():
        rule = _RULES.get(row["name"])
        if rule is None:
            continue
        direction, threshold = rule
        base_value = row["value_base"]
        cand_value = row["value_cand"]
        if pd.isna(base_value) or pd.isna(cand_value) or base_value <= 0:
            continue
        delta = direction * (cand_value - base_value) / base_value
        if delta > threshold:
            if direction > 0:
                message = f"{row['name']} increased materially"
            else:
                message = f"{row['name']} regression detected"
            regressions.append(
                Regression(
                    metric=row["name"],
                    delta_pct=delta * 100,
                    message=message,
                )
            )
    return regressions
