"""Configuration management for blogclust."""

import copy
import os
from pathlib import Path
from typing import Any

import yaml

from .errors import InvalidParameterError


DEFAULT_CONFIG = {
    "data_path": "./blogdata.txt",
    "log_level": "WARNING",
    "clustering": {
        "k": 5,
        "max_iterations": 20,
        "seed": None,
        "allow_empty_clusters": False,
    },
}


def _find_config_file() -> Path | None:
    """Look for config.yaml in standard locations."""
    candidates = [
        Path.cwd() / "config" / "config.yaml",
        Path.cwd() / "config.yaml",
        Path.home() / ".blogclust" / "config.yaml",
    ]
    for p in candidates:
        if p.exists():
            return p
    return None


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration, merging defaults with file and env vars."""
    cfg = copy.deepcopy(DEFAULT_CONFIG)

    path = Path(config_path) if config_path else _find_config_file()
    if path and path.exists():
        with open(path) as f:
            file_cfg = yaml.safe_load(f) or {}
        _deep_merge(cfg, file_cfg)

    # Env overrides
    if data_path := os.environ.get("BLOGCLUST_DATA"):
        cfg["data_path"] = data_path
    if seed := os.environ.get("BLOGCLUST_SEED"):
        try:
            cfg["clustering"]["seed"] = int(seed)
        except ValueError as e:
            raise InvalidParameterError(f"BLOGCLUST_SEED must be an integer: {seed!r}") from e

    cfg["data_path"] = str(Path(cfg["data_path"]).expanduser().resolve())

    return cfg


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place."""
    for k, v in override.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
