from __future__ import annotations

from pathlib import Path

from edgebench.config.models import ConfigError


class EnvironmentFileError(ConfigError):
    """The machine/environment descriptor file is missing or malformed."""


def parse_environment_file(text: str) -> dict[str, str]:
    entries: dict[str, str] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            msg = f"line {lineno}: expected KEY=VALUE, got {raw!r}"
            raise EnvironmentFileError(msg)
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip("\"'").strip()
        if not key:
            msg = f"line {lineno}: missing key"
            raise EnvironmentFileError(msg)
        if not value:
            msg = f"line {lineno}: empty value for {key}"
            raise EnvironmentFileError(msg)
        entries[key] = value
    return entries


def load_environment_label(path: Path | str, key: str | None = None) -> str:
    """Read the environment label embedded in reports.

    The file holds ``KEY="value"`` lines. When ``key`` is omitted the file
    must contain exactly one entry.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read environment file {path}: {exc}"
        raise EnvironmentFileError(msg) from exc
    try:
        entries = parse_environment_file(text)
    except EnvironmentFileError as exc:
        msg = f"{path}: {exc}"
        raise EnvironmentFileError(msg) from exc
    if not entries:
        msg = f"{path}: no KEY=VALUE entry found"
        raise EnvironmentFileError(msg)
    if key is not None:
        if key not in entries:
            msg = f"{path}: key {key!r} not found"
            raise EnvironmentFileError(msg)
        return entries[key]
    if len(entries) > 1:
        msg = f"{path}: {len(entries)} entries found, choose one with --env-key"
        raise EnvironmentFileError(msg)
    return next(iter(entries.values()))
