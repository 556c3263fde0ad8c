from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class Statistic:
    name: str
    value: str
    unit: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "value": self.value, "unit": self.unit}


@dataclass(frozen=True, slots=True)
class Report:
    created_at: datetime
    execution_time: str
    parametrization: Mapping[str, Any]
    other_info: str
    results: tuple[Statistic, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.created_at.isoformat(),
            "benchInfo": {
                "executionTime": self.execution_time,
                "parametrization": dict(self.parametrization),
                "otherInfo": self.other_info,
            },
            "results": [s.to_dict() for s in self.results],
        }
