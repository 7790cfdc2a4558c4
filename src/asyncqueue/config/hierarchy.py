"""Configuration hierarchy — merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.asyncqueue/config.yaml)
  3. Project config   (./asyncqueue.yaml, searched upward from cwd)
  4. Environment variables (ASYNCQUEUE_*)
  5. Runtime arguments

Each layer is tagged with its source so callers can tell where a resolved
value came from.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from asyncqueue.config.defaults import get_defaults
from asyncqueue.errors.exceptions import ConfigurationError
from asyncqueue.types import RunnerConfig

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".asyncqueue" / "config.yaml"
_PROJECT_CONFIG_NAME = "asyncqueue.yaml"

# env var -> (config key, parsed type)
_ENV_SETTINGS: dict[str, tuple[str, type]] = {
    "ASYNCQUEUE_CONCURRENCY": ("concurrency", int),
    "ASYNCQUEUE_RETRY_ATTEMPTS": ("retry_attempts", int),
    "ASYNCQUEUE_BACKOFF_BASE": ("backoff_base", float),
    "ASYNCQUEUE_LOG_LEVEL": ("log_level", str),
}

ConfigLayer = tuple[str, dict[str, Any]]


def config_layers(**runtime_overrides: Any) -> list[ConfigLayer]:
    """Collect the non-empty layers, lowest precedence first.

    Each entry is ``(source, values)`` where ``source`` is ``"default"``,
    a config file path, ``"env"`` or ``"runtime"``. Runtime overrides set
    to None are left out so lower layers show through.
    """
    layers: list[ConfigLayer] = [("default", get_defaults())]

    for path in (_GLOBAL_CONFIG_PATH, _find_project_config()):
        if path is None:
            continue
        values = _load_yaml_config(path)
        if values:
            layers.append((str(path), values))

    env_values = _load_env_vars()
    if env_values:
        layers.append(("env", env_values))

    runtime = {key: value for key, value in runtime_overrides.items() if value is not None}
    if runtime:
        layers.append(("runtime", runtime))

    return layers


def resolve_config(**runtime_overrides: Any) -> tuple[dict[str, Any], dict[str, str]]:
    """Merge every layer and record which source supplied each final value."""
    values: dict[str, Any] = {}
    sources: dict[str, str] = {}
    for source, layer in config_layers(**runtime_overrides):
        values.update(layer)
        sources.update(dict.fromkeys(layer, source))
    return values, sources


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Load and merge configuration from all sources."""
    values, _ = resolve_config(**runtime_overrides)
    return values


def load_runner_config(**runtime_overrides: Any) -> RunnerConfig:
    """Resolve the hierarchy and validate the runner settings."""
    values, sources = resolve_config(**runtime_overrides)
    fields = RunnerConfig.model_fields
    try:
        return RunnerConfig(**{key: values[key] for key in fields if key in values})
    except ValidationError as e:
        blamed = sorted({sources.get(str(err["loc"][0]), "?") for err in e.errors()})
        raise ConfigurationError(
            f"Invalid runner configuration (from {', '.join(blamed)}): {e}"
        ) from e


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Read a YAML mapping, or None when the file is absent or unusable."""
    if not path.is_file():
        return None
    try:
        data = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring", path)
        return None
    return data


def _find_project_config() -> Path | None:
    """Nearest asyncqueue.yaml in cwd or one of its parents."""
    cwd = Path.cwd()
    candidates = (directory / _PROJECT_CONFIG_NAME for directory in (cwd, *cwd.parents))
    return next((path for path in candidates if path.is_file()), None)


def _load_env_vars() -> dict[str, Any]:
    """Read the ASYNCQUEUE_* variables that are set."""
    return {
        key: _coerce_env_value(key, os.environ[env_key], target)
        for env_key, (key, target) in _ENV_SETTINGS.items()
        if env_key in os.environ
    }


def _coerce_env_value(key: str, raw: str, target: type = str) -> Any:
    """Parse an env var string as ``target``; unparseable values pass through.

    A raw string left in place is rejected later by load_runner_config.
    """
    if target is str:
        return raw
    try:
        return target(raw.strip())
    except ValueError:
        logger.warning("Cannot parse %s=%r as %s", key, raw, target.__name__)
        return raw
