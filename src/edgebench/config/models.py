from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import httpx

DEFAULT_PORT = 8000


class ConfigError(ValueError):
    """Raised when a run is configured with missing or invalid parameters."""


class Scheme(str, Enum):
    HTTP = "http"
    HTTPS = "https"


@dataclass(frozen=True, slots=True)
class TargetConfig:
    host: str
    path: str
    port: int = DEFAULT_PORT
    method: str = "GET"

    def __post_init__(self) -> None:
        if not self.host:
            msg = "No host specified, use --host HOST"
            raise ConfigError(msg)
        if not self.path:
            msg = "No function specified, use --function PATH"
            raise ConfigError(msg)
        if not 0 < self.port < 65536:
            msg = f"Port out of range: {self.port}"
            raise ConfigError(msg)
        if not self.path.startswith("/"):
            object.__setattr__(self, "path", "/" + self.path)


@dataclass(frozen=True, slots=True)
class TransportConfig:
    """How requests reach the target.

    ``verify_tls`` defaults to off: certificates presented by the target are
    not validated. This only matters when ``scheme`` is https and is kept as
    an explicit field so the relaxation is visible to callers and tests.
    """

    scheme: Scheme = Scheme.HTTP
    verify_tls: bool = False
    reuse_connections: bool = False
    timeout_ms: float | None = None

    def __post_init__(self) -> None:
        if self.timeout_ms is not None and self.timeout_ms <= 0:
            msg = f"Timeout must be a positive number of milliseconds, got {self.timeout_ms}"
            raise ConfigError(msg)

    @property
    def timeout_sec(self) -> float | None:
        if self.timeout_ms is None:
            return None
        return self.timeout_ms / 1000.0


@dataclass(frozen=True, slots=True)
class RunConfig:
    target: TargetConfig
    transport: TransportConfig = field(default_factory=TransportConfig)
    workers: int = 1
    ops_per_worker: int = 1
    attempt_log_path: Path = Path("log.txt")
    report_path: Path = Path("results.json")

    def __post_init__(self) -> None:
        for name in ("workers", "ops_per_worker"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                msg = f"{name} must be a positive integer, got {value!r}"
                raise ConfigError(msg)
        try:
            parsed = httpx.URL(self.url)
        except httpx.InvalidURL as exc:
            msg = f"Invalid target {self.url!r}: {exc}"
            raise ConfigError(msg) from exc
        # httpx reports the scheme default port as None
        if parsed.host != self.target.host.lower() or parsed.port not in (None, self.target.port):
            msg = f"Invalid host {self.target.host!r}, pass the port with --port and the path with --function"
            raise ConfigError(msg)

    @property
    def url(self) -> str:
        return f"{self.transport.scheme.value}://{self.target.host}:{self.target.port}{self.target.path}"

    @property
    def total_operations(self) -> int:
        return self.workers * self.ops_per_worker

    def to_metadata(self) -> Mapping[str, Any]:
        return {
            "protocol": f"{self.transport.scheme.value}:",
            "host": self.target.host,
            "port": self.target.port,
            "func": self.target.path,
            "threads": self.workers,
            "ops": self.ops_per_worker,
            "agent_reuse": self.transport.reuse_connections,
            "timeout_ms": self.transport.timeout_ms,
            "verify_tls": self.transport.verify_tls,
        }
