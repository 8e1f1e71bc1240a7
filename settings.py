"""
Configuration loading and typed config models.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import yaml

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
CONFIG_DIR = os.path.join(BASE_DIR, "config")
DEFAULT_CONFIG_PATH = os.path.join(CONFIG_DIR, "default.yaml")

CONFIG_ENV_VAR = "DAY_COUNTER_CONFIG"
STORAGE_PATH_ENV_VAR = "DAY_COUNTER_STORAGE_PATH"

STORAGE_BACKENDS = ("sqlite", "memory")
DISMISS_POLICIES = ("auto", "manual")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class StorageConfig:
    """Persistence configuration."""
    backend: str = "sqlite"
    path: str = "data/day_counter.sqlite"
    key: str = "startDate"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StorageConfig":
        return cls(
            backend=d.get("backend", "sqlite"),
            path=d.get("path", "data/day_counter.sqlite"),
            key=d.get("key", "startDate"),
        )


@dataclass
class PickerConfig:
    """Date picker behaviour. `auto` hides the picker after a pick, `manual` keeps it open."""
    dismiss_policy: str = "auto"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PickerConfig":
        return cls(dismiss_policy=d.get("dismiss_policy", "auto"))


@dataclass
class UIConfig:
    title: str = "Day Counter App"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "UIConfig":
        return cls(title=d.get("title", "Day Counter App"))


@dataclass
class AppConfig:
    """Top-level application config."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    picker: PickerConfig = field(default_factory=PickerConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_path: str = "logs/day_counter.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AppConfig":
        return cls(
            storage=StorageConfig.from_dict(d.get("storage") or {}),
            picker=PickerConfig.from_dict(d.get("picker") or {}),
            ui=UIConfig.from_dict(d.get("ui") or {}),
            log_path=d.get("log_path", "logs/day_counter.log"),
            log_level=d.get("log_level", "INFO"),
        )


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = _deep_merge(merged[k], v)
        else:
            merged[k] = v
    return merged


def _read_yaml(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - an explicit path, from the argument or `DAY_COUNTER_CONFIG`
    """
    config_path = config_path or os.environ.get(CONFIG_ENV_VAR)

    merged = _read_yaml(DEFAULT_CONFIG_PATH)
    merged = _deep_merge(merged, _read_yaml(os.path.join(CONFIG_DIR, "config.yaml")))
    if config_path:
        merged = _deep_merge(merged, _read_yaml(config_path))

    storage_path = os.environ.get(STORAGE_PATH_ENV_VAR)
    if storage_path:
        merged = _deep_merge(merged, {"storage": {"path": storage_path}})

    return merged


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration structure and values.

    Returns:
        (is_valid, error_message)
    """
    for section in ("storage", "picker", "ui"):
        value = config.get(section) or {}
        if not isinstance(value, dict):
            return False, f"Section '{section}' must be a mapping"

    storage = config.get("storage") or {}
    if storage.get("backend", "sqlite") not in STORAGE_BACKENDS:
        return False, f"storage.backend must be one of {', '.join(STORAGE_BACKENDS)}"
    if not storage.get("key", "startDate"):
        return False, "storage.key must not be empty"

    policy = (config.get("picker") or {}).get("dismiss_policy", "auto")
    if policy not in DISMISS_POLICIES:
        return False, f"picker.dismiss_policy must be one of {', '.join(DISMISS_POLICIES)}"

    if config.get("log_level", "INFO") not in LOG_LEVELS:
        return False, f"log_level must be one of {', '.join(LOG_LEVELS)}"

    return True, None


def get_settings(config_path: Optional[str] = None) -> AppConfig:
    try:
        raw = load_config(config_path)
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration: {e}")
        return AppConfig()

    is_valid, error = validate_config(raw)
    if not is_valid:
        logging.error(f"Invalid configuration, using defaults: {error}")
        return AppConfig()
    return AppConfig.from_dict(raw)
