#!/usr/bin/env python3
"""
journal_store.py
--------------------
Persistence for streak records, stored as YAML in ``streak_histories``.

One row holds the enhanced journal and one the legacy record. Payloads
are the records' ``to_dict()`` output written with ``yaml.safe_dump``;
structural damage in a stored journal survives the round trip so the
integrity validator can see it.

Usage:
    with db.session_scope():
        history = db.journal.load()
        db.journal.save(updated)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime
from typing import Any, Dict, Optional, Union

# --- Third party imports ---
import yaml
from sqlalchemy import select

# --- Local imports ---
from readlog.core.exceptions import SerializationError
from readlog.dataclasses.streak_history import EnhancedStreakHistory, LegacyStreakHistory
from ..decorators import handle_db_errors, log_database_operation
from ..models import StreakHistoryRecord
from .base_manager import BaseManager


def dump_history(history: Union[EnhancedStreakHistory, LegacyStreakHistory]) -> str:
    """Serialize a streak record to YAML text."""
    return yaml.safe_dump(history.to_dict(), sort_keys=False, allow_unicode=True)


def load_payload(text: str) -> Dict[str, Any]:
    """
    Parse a stored YAML payload.

    Raises:
        SerializationError: If the text is not YAML or not a mapping
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SerializationError(f"Stored streak record is not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise SerializationError("Stored streak record must be a mapping")
    return data


class JournalStore(BaseManager):
    """Loads and saves streak records."""

    def _row(self, kind: str) -> Optional[StreakHistoryRecord]:
        return self.session.scalars(
            select(StreakHistoryRecord).where(StreakHistoryRecord.kind == kind)
        ).first()

    def _write(self, kind: str, payload: str, version: Any) -> None:
        def _upsert() -> None:
            row = self._row(kind)
            if row is None:
                row = StreakHistoryRecord(kind=kind)
                self.session.add(row)
            row.payload = payload
            row.version = version if isinstance(version, int) else None
            row.updated_at = datetime.now()
            self.session.flush()

        self._execute_with_retry(_upsert)

    @handle_db_errors
    @log_database_operation("load_raw_history")
    def load_raw(self, kind: str = StreakHistoryRecord.ENHANCED) -> Optional[Dict[str, Any]]:
        """Stored mapping for a record kind, or None when nothing is stored."""
        row = self._row(kind)
        return load_payload(row.payload) if row is not None else None

    def load(self) -> Optional[EnhancedStreakHistory]:
        """
        The stored enhanced journal, or None.

        Raises:
            SerializationError: If the payload cannot be decoded
        """
        data = self.load_raw(StreakHistoryRecord.ENHANCED)
        return EnhancedStreakHistory.from_dict(data) if data is not None else None

    @handle_db_errors
    @log_database_operation("save_history")
    def save(self, history: EnhancedStreakHistory) -> None:
        self._write(StreakHistoryRecord.ENHANCED, dump_history(history), history.version)

    def load_legacy(self) -> Optional[LegacyStreakHistory]:
        data = self.load_raw(StreakHistoryRecord.LEGACY)
        return LegacyStreakHistory.from_dict(data) if data is not None else None

    @handle_db_errors
    @log_database_operation("save_legacy_history")
    def save_legacy(self, history: LegacyStreakHistory) -> None:
        self._write(StreakHistoryRecord.LEGACY, dump_history(history), None)

    def load_any(self) -> Optional[Union[EnhancedStreakHistory, LegacyStreakHistory]]:
        """The enhanced journal when stored, else the legacy record, else None."""
        enhanced = self.load()
        if enhanced is not None:
            return enhanced
        return self.load_legacy()
