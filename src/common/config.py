"""Shared configuration utilities."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import yaml


@dataclass(frozen=True)
class PipelineSettings:
    """Environment-driven settings, read once at process start."""
    crawl_confidence_threshold: float = 0.30
    categorization_confidence_threshold: float = 0.25
    rejected_cache_cleanup_days: int = 15
    rolling_window_days: int = 15
    processing_limit: int | None = None
    data_dir: str = "data"
    crawl_config: str = "prod"


def _read_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _read_int(env: Mapping[str, str], name: str, default: int | None) -> int | None:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings(env: Mapping[str, str] | None = None) -> PipelineSettings:
    """Build PipelineSettings from environment variables.

    Args:
        env: Mapping to read from (defaults to os.environ)

    Returns:
        PipelineSettings with documented defaults for unset variables

    Raises:
        ValueError: If a numeric variable cannot be parsed
    """
    if env is None:
        env = os.environ

    limit = _read_int(env, "PROCESSING_LIMIT", None)
    if limit is not None and limit <= 0:
        limit = None

    return PipelineSettings(
        crawl_confidence_threshold=_read_float(env, "CRAWL_CONFIDENCE_THRESHOLD", 0.30),
        categorization_confidence_threshold=_read_float(
            env, "PROCESS_CONFIDENCE_THRESHOLD", _read_float(env, "CATEGORIZATION_CONFIDENCE_THRESHOLD", 0.25)
        ),
        rejected_cache_cleanup_days=_read_int(env, "REJECTED_CACHE_CLEANUP_DAYS", 15),
        rolling_window_days=_read_int(env, "ROLLING_WINDOW_DAYS", 15),
        processing_limit=limit,
        data_dir=env.get("DATA_DIR") or "data",
        crawl_config=env.get("CRAWL_CONFIG") or "prod",
    )


def find_config_path(
    config_name: str | None,
    config_dir: Path,
    default_name: str = "prod",
    env_var: str | None = None,
) -> Path:
    """Find config file path, checking env var and defaults.

    Args:
        config_name: Name of config (without .yaml), a path to a .yaml file, or None for default
        config_dir: Directory containing config files
        default_name: Default config name if config_name is None
        env_var: Environment variable to check for config name

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get(env_var, default_name) if env_var else default_name

    if config_name.endswith((".yaml", ".yml")):
        config_path = Path(config_name)
    else:
        config_path = config_dir / f"{config_name}.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}
