#!/usr/bin/env python3
"""
cli.py
------
Shared CLI utilities and statistics for readlog commands.

Functions:
    setup_logger: Initialize ReadlogLogger for CLI operations

Classes:
    OperationStats: Base class for batch operation statistics
    BulkStats: For chunked journal updates

Usage:
    from readlog.core.cli import setup_logger, BulkStats

    logger = setup_logger(log_dir, "reconcile")
    stats = BulkStats()
    stats.items_processed += 1
    print(stats.summary())
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

# --- Local imports ---
from readlog.core.logging_manager import ReadlogLogger


# ═══════════════════════════════════════════════════════════════════════════
# LOGGER SETUP
# ═══════════════════════════════════════════════════════════════════════════

def setup_logger(log_dir: Path, component_name: str, verbose: bool = False) -> ReadlogLogger:
    """
    Setup logging for CLI operations.

    Creates the operations log directory if it doesn't exist and initializes
    a ReadlogLogger instance for the specified component.

    Args:
        log_dir: Base log directory (typically from paths.LOG_DIR)
        component_name: Component identifier for logging (e.g., 'reconcile')
        verbose: Echo info-level operation records to the console as well

    Returns:
        Configured ReadlogLogger instance
    """
    operations_log_dir = Path(log_dir) / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return ReadlogLogger(
        operations_log_dir,
        component_name=component_name,
        console_level=logging.INFO if verbose else logging.WARNING,
    )


# ═══════════════════════════════════════════════════════════════════════════
# STATISTICS CLASSES
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class OperationStats:
    """
    Base class for operation statistics.

    Attributes:
        items_processed: Number of items successfully processed
        errors: Number of errors encountered
        start_time: Operation start timestamp
    """
    items_processed: int = 0
    errors: int = 0
    start_time: datetime = field(default_factory=datetime.now)
    _duration_cached: Optional[float] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate statistics on initialization."""
        if self.items_processed < 0:
            raise ValueError(f"items_processed must be non-negative, got {self.items_processed}")
        if self.errors < 0:
            raise ValueError(f"errors must be non-negative, got {self.errors}")

    def duration(self) -> float:
        """
        Get elapsed time in seconds (cached after first call).

        Returns:
            Seconds elapsed since start_time
        """
        if self._duration_cached is None:
            self._duration_cached = (datetime.now() - self.start_time).total_seconds()
        return self._duration_cached

    def summary(self) -> str:
        """Get formatted summary string."""
        return (
            f"{self.items_processed} items processed, "
            f"{self.errors} errors, "
            f"{self.duration():.2f}s"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "items_processed": self.items_processed,
            "errors": self.errors,
            "duration": self.duration(),
        }


@dataclass
class BulkStats(OperationStats):
    """
    Statistics for chunked journal updates.

    Attributes:
        entries_added: Number of days added
        entries_updated: Number of days updated in place
        entries_removed: Number of days removed
        chunks: Number of chunks applied
        validations: Number of integrity passes run between chunks
    """
    entries_added: int = 0
    entries_updated: int = 0
    entries_removed: int = 0
    chunks: int = 0
    validations: int = 0

    def summary(self) -> str:
        """Get formatted summary with per-kind counts."""
        parts = [
            f"{self.items_processed} operations",
            f"{self.entries_added} added",
            f"{self.entries_updated} updated",
            f"{self.entries_removed} removed",
            f"{self.chunks} chunks",
            f"{self.errors} errors",
            f"{self.duration():.2f}s",
        ]
        return ", ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with per-kind counts."""
        base = super().to_dict()
        base.update(
            {
                "entries_added": self.entries_added,
                "entries_updated": self.entries_updated,
                "entries_removed": self.entries_removed,
                "chunks": self.chunks,
                "validations": self.validations,
            }
        )
        return base
