"""YAML config loader with snapshot persistence and runtime get/set."""

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from weathersync.config.defaults import DEFAULT_LOCATION
from weathersync.config.schema import SyncConfig


def load_config(path: str | Path) -> SyncConfig:
    """Load and validate config from a YAML file.

    If no location is specified in the YAML, injects DEFAULT_LOCATION.
    A missing file is treated like an empty one.
    """
    path = Path(path)
    raw: dict[str, Any] = {}
    if path.exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

    if not raw.get("location"):
        raw["location"] = DEFAULT_LOCATION.model_dump()

    return SyncConfig(**raw)


def config_hash(config: SyncConfig) -> str:
    """Compute a deterministic SHA256 hash of the config."""
    data = config.model_dump_json(indent=None)
    return hashlib.sha256(data.encode()).hexdigest()[:16]


def snapshot_config(config: SyncConfig, db: Any) -> str:
    """Persist a config snapshot to the database if it changed. Returns the hash."""
    h = config_hash(config)
    cursor = db.execute(
        "SELECT 1 FROM config_snapshots WHERE config_hash = ?", (h,)
    )
    if cursor.fetchone() is None:
        db.execute(
            "INSERT INTO config_snapshots (config_hash, config_json, created_at) "
            "VALUES (?, ?, CURRENT_TIMESTAMP)",
            (h, config.model_dump_json()),
        )
        db.commit()
    return h


def get_config_value(config: SyncConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'provider.timeout_seconds'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: SyncConfig, dotted_key: str, value: Any) -> SyncConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new SyncConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Config key not found: {dotted_key}")
    old_value = target[parts[-1]]
    if isinstance(old_value, bool) and isinstance(value, str):
        value = value.lower() in ("1", "true", "yes", "on")
    elif isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return SyncConfig(**data)


def save_config(config: SyncConfig, path: str | Path) -> None:
    """Write a config back to YAML."""
    data = json.loads(config.model_dump_json())
    with open(path, "w") as f:
        yaml.safe_dump(data, f, sort_keys=False)
