"""Configuration loading and runtime directory bootstrapping."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from tracking.models import Period


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def ensure_runtime_dirs(root: Path, config: dict[str, Any]) -> dict[str, Path]:
    """Ensure data directories exist and return resolved paths."""
    paths_cfg = config.get("paths", {})
    data_path = (root / paths_cfg.get("data_path", "workspace/performance.json")).resolve()
    db_path = (root / paths_cfg.get("db_path", "workspace/performance.db")).resolve()

    data_path.parent.mkdir(parents=True, exist_ok=True)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    return {
        "data_path": data_path,
        "db_path": db_path,
    }


def load_effective_config(root: Path) -> dict[str, Any]:
    """Load ``config/default.yaml`` overlaid with an optional ``config/local.yaml``."""
    config_dir = root / "config"
    default_cfg = load_yaml(config_dir / "default.yaml")
    local_cfg = load_yaml(config_dir / "local.yaml")
    return merge_dicts(default_cfg, local_cfg)


def default_period(config: dict[str, Any]) -> Period:
    raw = config.get("reporting", {}).get("default_period", Period.SECOND_HALF.value)
    try:
        return Period(raw)
    except ValueError:
        return Period.SECOND_HALF


def upcoming_days(config: dict[str, Any]) -> int:
    return int(config.get("reporting", {}).get("upcoming_days", 7))


def configure_logging(config: dict[str, Any]) -> None:
    level_name = str(config.get("logging", {}).get("level", "WARNING")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
