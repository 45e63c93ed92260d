"""YAML config loader and dotted-key lookup."""

import hashlib
from pathlib import Path
from typing import Any

import yaml

from floodcheck.config.schema import FloodCheckConfig


def load_config(path: str | Path) -> FloodCheckConfig:
    """Load and validate config from a YAML file.

    A missing or empty file yields the defaults.
    """
    path = Path(path)
    if not path.exists():
        return FloodCheckConfig()
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return FloodCheckConfig(**raw)


def config_hash(config: FloodCheckConfig) -> str:
    """Compute a deterministic SHA256 hash of the config, secrets excluded."""
    data = config.model_dump_json(
        indent=None, exclude={"weather": {"api_key"}}
    )
    return hashlib.sha256(data.encode()).hexdigest()[:16]


def get_config_value(config: FloodCheckConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'risk.threshold_pct'."""
    obj: Any = config
    for part in dotted_key.split("."):
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
