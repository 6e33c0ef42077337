#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants for the readlog project.

The project structure:
    ROOT/
    ├── readlog/       # Engine, persistence and CLI code
    ├── data/          # User data (reading database, config)
    └── logs/          # Application logs

Every path can be overridden through CLI options; these are only defaults.
The READLOG_HOME environment variable relocates the data and log
directories, e.g. when the package is installed outside a checkout.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path


def _get_project_root() -> Path:
    """
    Determine project root directory.

    Assumes this file is at ROOT/readlog/core/paths.py and navigates up
    the directory tree to find ROOT.

    Returns:
        Path object for project root
    """
    override = os.environ.get("READLOG_HOME")
    if override:
        return Path(override).expanduser().resolve()

    # paths.py -> core/ -> readlog/ -> ROOT/
    return Path(__file__).resolve().parent.parent.parent


# ----- Project directory -----
ROOT: Path = _get_project_root()
DATA_DIR = ROOT / "data"

# --- Database ---
DB_DIR = DATA_DIR / "metadata"
DB_PATH = DB_DIR / "readlog.db"

# --- Config ---
CONFIG_PATH = DATA_DIR / "readlog.yaml"

# ---- Logs ----
LOG_DIR = ROOT / "logs"
