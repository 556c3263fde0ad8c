from __future__ import annotations

from edgebench.config.environment import EnvironmentFileError, load_environment_label
from edgebench.config.models import (
    DEFAULT_PORT,
    ConfigError,
    RunConfig,
    Scheme,
    TargetConfig,
    TransportConfig,
)

__all__ = [
    "DEFAULT_PORT",
    "ConfigError",
    "EnvironmentFileError",
    "RunConfig",
    "Scheme",
    "TargetConfig",
    "TransportConfig",
    "load_environment_label",
]
