"""Configuration loading utilities for stopvot."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from stopvot.models import DEFAULT_SEGMENTS


@dataclass(frozen=True)
class AppConfig:
    """Application configuration resolved from profile + environment variables."""

    env: str
    log_level: str
    api_host: str
    api_port: int
    percent_voicing: float
    segments: tuple[str, ...]


def load_config(env_name: str | None = None, config_dir: Path | None = None) -> AppConfig:
    """Load configuration from `configs/<env>.toml` and environment overrides."""
    env = env_name or os.getenv("STOPVOT_ENV", "dev")
    resolved_dir = config_dir or _default_config_dir()
    profile_path = resolved_dir / f"{env}.toml"

    defaults: dict[str, object] = {
        "log_level": "INFO",
        "api_host": "127.0.0.1",
        "api_port": 8000,
        "percent_voicing": 50.0,
        "segments": DEFAULT_SEGMENTS,
    }
    defaults.update(_load_profile(profile_path))

    log_level = os.getenv("STOPVOT_LOG_LEVEL", str(defaults["log_level"]))
    api_host = os.getenv("STOPVOT_API_HOST", str(defaults["api_host"]))
    api_port = _parse_int("STOPVOT_API_PORT", os.getenv("STOPVOT_API_PORT"), defaults["api_port"])
    percent_voicing = _parse_percent(
        "STOPVOT_PERCENT_VOICING",
        os.getenv("STOPVOT_PERCENT_VOICING"),
        defaults["percent_voicing"],
    )
    raw_segments = os.getenv("STOPVOT_SEGMENTS")
    segments = (
        parse_segments(raw_segments)
        if raw_segments is not None
        else _coerce_segments("segments", defaults["segments"])
    )

    return AppConfig(
        env=env,
        log_level=log_level.upper(),
        api_host=api_host,
        api_port=api_port,
        percent_voicing=percent_voicing,
        segments=segments,
    )


def parse_segments(raw: str) -> tuple[str, ...]:
    """Split a comma- or space-separated segment list, e.g. `b,d,g`."""
    segments = tuple(part for part in raw.replace(",", " ").split() if part)
    if not segments:
        raise ValueError(f"segment list must not be empty, got {raw!r}")
    return segments


def _default_config_dir() -> Path:
    return Path(__file__).resolve().parents[2] / "configs"


def _load_profile(path: Path) -> dict[str, object]:
    if not path.exists():
        return {}

    with path.open("rb") as handle:
        payload = tomllib.load(handle)

    resolved: dict[str, object] = {}
    for key, raw in payload.items():
        if key == "api_port":
            resolved[key] = _coerce_int(key, raw)
        elif key == "percent_voicing":
            resolved[key] = _coerce_percent(key, raw)
        elif key == "segments":
            resolved[key] = _coerce_segments(key, raw)
        elif key in {"log_level", "api_host"}:
            resolved[key] = _coerce_str(key, raw)
    return resolved


def _parse_int(name: str, raw: str | None, default: object) -> int:
    if raw is None:
        return _coerce_int(name, default)
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _parse_percent(name: str, raw: str | None, default: object) -> float:
    if raw is None:
        return _coerce_percent(name, default)
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    return _coerce_percent(name, value)


def _coerce_int(name: str, value: object) -> int:
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError as exc:
            raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    raise ValueError(f"{name} must be an integer, got type {type(value).__name__}")


def _coerce_percent(name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError(f"{name} must be a number, got type {type(value).__name__}")
    if not 0.0 <= value <= 100.0:
        raise ValueError(f"{name} must be within [0, 100], got {value}")
    return float(value)


def _coerce_segments(name: str, value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return parse_segments(value)
    if isinstance(value, list | tuple) and all(isinstance(item, str) for item in value):
        if not value:
            raise ValueError(f"{name} must not be empty")
        return tuple(value)
    raise ValueError(f"{name} must be a list of strings, got type {type(value).__name__}")


def _coerce_str(name: str, value: object) -> str:
    if isinstance(value, str):
        return value
    raise ValueError(f"{name} must be a string, got type {type(value).__name__}")
