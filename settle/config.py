"""TOML-based wait timing profiles.

Loads ~/.settle/defaults.toml (global) and settle.toml (project),
merges them, and resolves named profiles into WaitTiming instances.

Example settle.toml:

    [profiles.kafka-cluster]
    poll_interval = 30
    timeout = 7200
    delay = 10
"""

from __future__ import annotations

import tomllib
from dataclasses import fields
from pathlib import Path
from typing import Any

from settle.constants import GLOBAL_CONFIG_PATH, PROJECT_CONFIG_NAME
from settle.core.exceptions import ConfigurationError
from settle.spec import WaitTiming

type RawConfig = dict[str, Any]


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    global_cfg = _read_toml(global_path or GLOBAL_CONFIG_PATH)
    project_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
    project_cfg = _read_toml(project_path)

    merged = _deep_merge(global_cfg, project_cfg)
    merged.setdefault("profiles", {})
    return merged


def _build_timing(name: str, raw: RawConfig) -> WaitTiming:
    known = {f.name for f in fields(WaitTiming)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError(
            f"Profile '{name}' has unknown keys: {', '.join(unknown)}. "
            f"Valid: {', '.join(sorted(known))}"
        )
    try:
        return WaitTiming(**raw)
    except (ConfigurationError, TypeError) as e:
        raise ConfigurationError(f"Profile '{name}' is invalid: {e}") from e


def resolve_timing(
    name: str,
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> WaitTiming:
    config = load_config(project_dir=project_dir, global_path=global_path)

    profiles = config["profiles"]
    if name not in profiles:
        raise KeyError(f"Profile '{name}' not found. Available: {', '.join(profiles) or 'none'}")

    return _build_timing(name, dict(profiles[name]))
