#!/usr/bin/env python3
"""
Engine configuration modules.

This package contains declarative configuration for the engine:
- engine_configs: thresholds for merge windows, integrity checks and batching
"""
from .engine_configs import DEFAULT_CONFIG, EngineConfig, load_engine_config

__all__ = ["DEFAULT_CONFIG", "EngineConfig", "load_engine_config"]
