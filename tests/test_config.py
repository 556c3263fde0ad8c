from __future__ import annotations

from pathlib import Path

import pytest

from edgebench.config import (
    ConfigError,
    EnvironmentFileError,
    RunConfig,
    Scheme,
    TargetConfig,
    TransportConfig,
    load_environment_label,
)


def test_defaults_and_url() -> None:
    config = RunConfig(target=TargetConfig(host="10.0.0.5", path="function/echo"))
    assert config.workers == 1
    assert config.ops_per_worker == 1
    assert config.transport.timeout_ms is None
    assert config.transport.reuse_connections is False
    assert config.url == "http://10.0.0.5:8000/function/echo"
    https = RunConfig(
        target=TargetConfig(host="edge", path="/f", port=8443),
        transport=TransportConfig(scheme=Scheme.HTTPS),
    )
    assert https.url == "https://edge:8443/f"


@pytest.mark.parametrize("field", ["workers", "ops_per_worker"])
@pytest.mark.parametrize("value", [0, -1, 1.5, True])
def test_counts_must_be_positive_integers(field: str, value: object) -> None:
    with pytest.raises(ConfigError):
        RunConfig(target=TargetConfig(host="h", path="/"), **{field: value})


@pytest.mark.parametrize(("host", "path"), [("", "/f"), ("h", "")])
def test_host_and_path_required(host: str, path: str) -> None:
    with pytest.raises(ConfigError):
        TargetConfig(host=host, path=path)


def test_timeout_must_be_positive() -> None:
    with pytest.raises(ConfigError):
        TransportConfig(timeout_ms=0)
    assert TransportConfig(timeout_ms=250).timeout_sec == 0.25


def test_metadata_echoes_configuration() -> None:
    config = RunConfig(target=TargetConfig(host="h", path="/f"), workers=4, ops_per_worker=10)
    meta = config.to_metadata()
    assert meta["protocol"] == "http:"
    assert meta["func"] == "/f"
    assert meta["threads"] == 4
    assert meta["ops"] == 10


def test_environment_label_strips_quotes(tmp_path: Path) -> None:
    env = tmp_path / "infra.txt"
    env.write_text('MACHINE_TYPE="raspberry-pi 4B"\n', encoding="utf-8")
    assert load_environment_label(env) == "raspberry-pi 4B"


def test_environment_label_by_key(tmp_path: Path) -> None:
    env = tmp_path / "infra.txt"
    env.write_text("# edge node\nREGION='eu-1'\nMACHINE_TYPE=t3.small\n", encoding="utf-8")
    assert load_environment_label(env, "MACHINE_TYPE") == "t3.small"
    with pytest.raises(EnvironmentFileError, match="--env-key"):
        load_environment_label(env)
    with pytest.raises(EnvironmentFileError, match="not found"):
        load_environment_label(env, "CPU")


@pytest.mark.parametrize("body", ["", "no equals sign\n", 'MACHINE_TYPE=""\n', "=value\n"])
def test_malformed_environment_file_fails_loudly(tmp_path: Path, body: str) -> None:
    env = tmp_path / "infra.txt"
    env.write_text(body, encoding="utf-8")
    with pytest.raises(EnvironmentFileError):
        load_environment_label(env)


def test_missing_environment_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Cannot read"):
        load_environment_label(tmp_path / "absent.txt")


@pytest.mark.parametrize("host", ["localhost:8000", "bad host", "edge/function", "user@edge"])
def test_malformed_host_is_a_configuration_error(host: str) -> None:
    with pytest.raises(ConfigError):
        RunConfig(target=TargetConfig(host=host, path="/f"))


def test_default_scheme_port_is_accepted() -> None:
    config = RunConfig(target=TargetConfig(host="Edge.Local", path="/f", port=80))
    assert config.url == "http://Edge.Local:80/f"
