#!/usr/bin/env python3
"""
engine_configs.py
-----------------

Tunable thresholds for the reconciliation engine.

Defaults reproduce the documented behaviour (7-day progress window,
1 day of future tolerance, 2-year staleness warning, etc.). A YAML file
may override any subset of them:

    progress_window_days: 10
    chunk_size: 1000
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from readlog.core.exceptions import ConfigError


@dataclass(frozen=True)
class EngineConfig:
    """
    Engine thresholds.

    Attributes:
        progress_window_days: Max age (days, inclusive) of a progress update
            that still counts as reading activity
        future_horizon_days: Days past today before a journal date is flagged
        stale_after_years: Age in years past which a journal date is flagged
        max_entries: Entry count above which a performance warning is raised
        max_note_length: Note length above which a performance warning is raised
        max_book_periods: Stored period count above which a warning is raised
        max_reasonable_period_days: Period length flagged as suspicious
        chunk_size: Default number of days per batch for bulk operations
    """
    progress_window_days: int = 7
    future_horizon_days: int = 1
    stale_after_years: int = 2
    max_entries: int = 10000
    max_note_length: int = 1000
    max_book_periods: int = 1000
    max_reasonable_period_days: int = 365
    chunk_size: int = 500

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ConfigError(f"{f.name} must be a non-negative integer, got {value!r}")
        if self.chunk_size < 1:
            raise ConfigError(f"chunk_size must be at least 1, got {self.chunk_size}")

    def with_overrides(self, overrides: Dict[str, Any]) -> "EngineConfig":
        """Return a copy with the given fields replaced."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return replace(self, **overrides)


DEFAULT_CONFIG = EngineConfig()


def load_engine_config(path: Optional[Union[str, Path]]) -> EngineConfig:
    """
    Load engine thresholds from a YAML file.

    Args:
        path: YAML file path; None or a missing file yields the defaults

    Returns:
        EngineConfig with file overrides applied

    Raises:
        ConfigError: If the file is unreadable, not a mapping, or has unknown keys
    """
    if path is None:
        return DEFAULT_CONFIG

    config_path = Path(path)
    if not config_path.exists():
        return DEFAULT_CONFIG

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}")

    if data is None:
        return DEFAULT_CONFIG
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    return DEFAULT_CONFIG.with_overrides(data)
