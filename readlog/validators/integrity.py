#!/usr/bin/env python3
"""
integrity.py
-------------
Integrity validation and auto-healing for the enhanced reading journal.

Checks, grouped by category:
- structure: entry list and day index present with the right container
  types; version and sync stamps present and supported
- consistency: day index and entry dates match both ways; one entry per date
- format: canonical YYYY-MM-DD dates; parseable timestamps
- temporal: dates too far in the future or older than the stale horizon
- logic: entries without sources, book_completion without books,
  modified_at before created_at, repeated book ids
- performance: very many entries or periods, very long notes
- reference: book ids missing from the supplied book list

Each issue carries a machine-readable code and a severity (critical,
error, warning). The score starts at 100 and loses 25/10/2 points per
critical/error/warning, regains up to 10 points for fixable issues, and
is capped at 50 whenever a critical issue is present.

Auto-fix repairs only structural damage (day index, missing stamps,
duplicated dates, index/entry mismatches). It never raises; steps that
fail are counted and the rest still run.

Usage:
    validator = IntegrityValidator(clock=FixedClock(now))
    report = validator.validate(history, books)
    if not report.is_valid:
        result = validator.auto_fix(history)
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from readlog.configs.engine_configs import DEFAULT_CONFIG, EngineConfig
from readlog.core.clock import Clock, resolve_clock
from readlog.core.logging_manager import ReadlogLogger, safe_logger
from readlog.core.validators import DataValidator
from readlog.dataclasses.book import Book
from readlog.dataclasses.reading_day import (
    ReadingDataSource,
    ReadingDayEntry,
    ReadingDayMap,
    SourceKind,
)
from readlog.dataclasses.streak_history import (
    CURRENT_STREAK_HISTORY_VERSION,
    EnhancedStreakHistory,
)


logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Issue severity; critical and error make a journal invalid."""

    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"


class IssueCategory(str, Enum):
    """Issue family, used to derive recommendations."""

    STRUCTURE = "structure"
    CONSISTENCY = "consistency"
    FORMAT = "format"
    TEMPORAL = "temporal"
    LOGIC = "logic"
    PERFORMANCE = "performance"
    REFERENCE = "reference"


@dataclass
class IntegrityIssue:
    """Represents one integrity finding."""

    code: str
    severity: Severity
    category: IssueCategory
    message: str
    affected_items: List[str] = field(default_factory=list)
    fixable: bool = False
    recommendation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "severity": self.severity.value,
            "category": self.category.value,
            "message": self.message,
            "affected_items": list(self.affected_items),
            "fixable": self.fixable,
            "recommendation": self.recommendation,
        }


@dataclass
class IntegrityReport:
    """Complete integrity validation report."""

    score: int = 100
    issues: List[IntegrityIssue] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    total_entries: int = 0

    def add_issue(self, issue: IntegrityIssue) -> None:
        """Add an issue to the report."""
        self.issues.append(issue)

    def count(self, severity: Severity) -> int:
        return sum(1 for issue in self.issues if issue.severity is severity)

    def codes(self) -> List[str]:
        return [issue.code for issue in self.issues]

    def find(self, code: str) -> Optional[IntegrityIssue]:
        return next((issue for issue in self.issues if issue.code == code), None)

    @property
    def errors(self) -> List[IntegrityIssue]:
        """Critical and error issues."""
        return [i for i in self.issues if i.severity is not Severity.WARNING]

    @property
    def warnings(self) -> List[IntegrityIssue]:
        return [i for i in self.issues if i.severity is Severity.WARNING]

    @property
    def fixable_issues(self) -> List[IntegrityIssue]:
        return [i for i in self.issues if i.fixable]

    @property
    def has_critical(self) -> bool:
        return self.count(Severity.CRITICAL) > 0

    @property
    def is_valid(self) -> bool:
        """True when no critical or error issue was found, whatever the score."""
        return not self.errors

    @property
    def summary(self) -> Dict[str, int]:
        return {
            "total_entries": self.total_entries,
            "critical": self.count(Severity.CRITICAL),
            "errors": self.count(Severity.ERROR),
            "warnings": self.count(Severity.WARNING),
            "fixable": len(self.fixable_issues),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "score": self.score,
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
            "recommendations": list(self.recommendations),
            "summary": self.summary,
        }


@dataclass
class AutoFixResult:
    """Outcome of an auto-fix pass."""

    updated_history: EnhancedStreakHistory
    fixed: int = 0
    failed: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fixed": self.fixed,
            "failed": self.failed,
            "updated_history": self.updated_history.to_dict(),
        }


def _years_before(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return day.replace(year=day.year - years, day=28)


def _is_bad_timestamp(value: Any) -> bool:
    return value is not None and not isinstance(value, datetime)


def _richness(entry: ReadingDayEntry) -> Tuple[int, int, int]:
    return (len(entry.book_ids), 1 if entry.notes else 0, len(entry.sources))


def _modified_rank(entry: ReadingDayEntry) -> float:
    if isinstance(entry.modified_at, datetime):
        return entry.modified_at.timestamp()
    return float("-inf")


class IntegrityValidator:
    """Validates, scores and repairs enhanced reading journals."""

    _PENALTIES = {Severity.CRITICAL: 25, Severity.ERROR: 10, Severity.WARNING: 2}
    _CRITICAL_SCORE_CAP = 50

    # (predicate over the report, recommendation)
    _RECOMMENDATION_RULES: List[Tuple[Callable[[IntegrityReport], bool], str]] = [
        (lambda r: r.count(Severity.CRITICAL) > 0,
         "Address critical data structure issues immediately"),
        (lambda r: r.count(Severity.ERROR) > 0,
         "Fix data consistency errors to prevent data loss"),
        (lambda r: any(i.category is IssueCategory.PERFORMANCE for i in r.warnings),
         "Optimize data structure for better performance"),
        (lambda r: any(i.category is not IssueCategory.PERFORMANCE for i in r.warnings),
         "Review data quality issues to improve accuracy"),
    ]

    # (minimum score, overall verdict); anything lower is poor
    _SCORE_TIERS = [
        (95, "Data integrity is excellent - no action needed"),
        (85, "Data integrity is good - minor cleanup recommended"),
        (70, "Data integrity needs attention - schedule maintenance"),
    ]
    _POOR_VERDICT = "Data integrity is poor - immediate action required"

    def __init__(
        self,
        config: EngineConfig = DEFAULT_CONFIG,
        clock: Optional[Clock] = None,
        logger: Optional[ReadlogLogger] = None,
    ) -> None:
        """
        Initialize the validator.

        Args:
            config: Thresholds for temporal and performance checks
            clock: Time source for future/stale checks and auto-fix stamps
            logger: Optional logger for validation runs
        """
        self.config = config
        self.clock = resolve_clock(clock)
        self.logger = safe_logger(logger)

    # ---- Validation ----
    def validate(
        self, history: EnhancedStreakHistory, books: Optional[Iterable[Book]] = None
    ) -> IntegrityReport:
        """
        Run every check and score the journal.

        Args:
            history: Journal to validate
            books: Optional book list for referential checks

        Returns:
            IntegrityReport
        """
        report = IntegrityReport()
        entries = history.reading_day_entries
        if isinstance(entries, list):
            report.total_entries = len(entries)

        self._check_structure(history, report)
        self._check_consistency(history, report)
        self._check_formats(history, report)
        self._check_temporal(history, report)
        self._check_logic(history, report)
        self._check_performance(history, report)
        if books is not None:
            self._check_references(history, books, report)

        report.score = self._score(report)
        report.recommendations = self._recommend(report)

        self.logger.log_debug("integrity_validation", report.summary)
        return report

    def _check_structure(self, history: EnhancedStreakHistory, report: IntegrityReport) -> None:
        if not isinstance(history.reading_day_entries, list):
            report.add_issue(IntegrityIssue(
                code="invalid_reading_day_entries",
                severity=Severity.CRITICAL,
                category=IssueCategory.STRUCTURE,
                message="Missing or invalid reading_day_entries list",
                affected_items=["reading_day_entries"],
            ))

        if not isinstance(history.reading_days, (set, frozenset)):
            report.add_issue(IntegrityIssue(
                code="invalid_reading_days",
                severity=Severity.CRITICAL,
                category=IssueCategory.STRUCTURE,
                message="Missing or invalid reading_days set",
                affected_items=["reading_days"],
                fixable=True,
            ))

        version = history.version
        if not isinstance(version, int) or isinstance(version, bool) or version < 1:
            report.add_issue(IntegrityIssue(
                code="invalid_version",
                severity=Severity.ERROR,
                category=IssueCategory.STRUCTURE,
                message="Missing or invalid version number",
                affected_items=["version"],
                fixable=True,
            ))
        elif version > CURRENT_STREAK_HISTORY_VERSION:
            report.add_issue(IntegrityIssue(
                code="unsupported_version",
                severity=Severity.ERROR,
                category=IssueCategory.STRUCTURE,
                message=(
                    f"History version {version} is newer than supported "
                    f"version {CURRENT_STREAK_HISTORY_VERSION}"
                ),
                affected_items=["version"],
            ))

        for attr, label in (("last_sync_date", "last_sync_date"), ("last_calculated", "last_calculated")):
            if not isinstance(getattr(history, attr), datetime):
                report.add_issue(IntegrityIssue(
                    code=f"invalid_{attr}",
                    severity=Severity.ERROR,
                    category=IssueCategory.STRUCTURE,
                    message=f"Missing or invalid {label}",
                    affected_items=[label],
                    fixable=True,
                ))

    def _check_consistency(self, history: EnhancedStreakHistory, report: IntegrityReport) -> None:
        entries = history.reading_day_entries
        days = history.reading_days
        if not isinstance(entries, list) or not isinstance(days, (set, frozenset)):
            return

        entry_dates = [entry.date for entry in entries]
        unique_dates = set(entry_dates)
        # non-canonical values are reported by the format check
        index_keys = {d for d in days if DataValidator.is_iso_date(d)}
        entry_keys = {d for d in unique_dates if DataValidator.is_iso_date(d)}

        missing_entries = sorted(index_keys - entry_keys)
        if missing_entries:
            report.add_issue(IntegrityIssue(
                code="days_missing_entries",
                severity=Severity.ERROR,
                category=IssueCategory.CONSISTENCY,
                message=f"{len(missing_entries)} reading days missing from detailed entries",
                affected_items=missing_entries,
                fixable=True,
            ))

        missing_days = sorted(entry_keys - index_keys)
        if missing_days:
            report.add_issue(IntegrityIssue(
                code="entries_missing_days",
                severity=Severity.ERROR,
                category=IssueCategory.CONSISTENCY,
                message=f"{len(missing_days)} detailed entries missing from reading days set",
                affected_items=missing_days,
                fixable=True,
            ))

        duplicates = sorted((d for d, n in Counter(entry_dates).items() if n > 1), key=str)
        if duplicates:
            report.add_issue(IntegrityIssue(
                code="duplicate_entries",
                severity=Severity.ERROR,
                category=IssueCategory.CONSISTENCY,
                message=f"Duplicate reading day entries found for {len(duplicates)} dates",
                affected_items=duplicates,
                fixable=True,
            ))

    def _check_formats(self, history: EnhancedStreakHistory, report: IntegrityReport) -> None:
        entries = history.reading_day_entries
        bad_dates: List[str] = []
        bad_timestamps: List[str] = []

        if isinstance(entries, list):
            for entry in entries:
                if not DataValidator.is_iso_date(entry.date):
                    bad_dates.append(str(entry.date))
                if (
                    _is_bad_timestamp(entry.created_at)
                    or _is_bad_timestamp(entry.modified_at)
                    or any(_is_bad_timestamp(s.timestamp) for s in entry.sources)
                ):
                    bad_timestamps.append(str(entry.date))

        if isinstance(history.reading_days, (set, frozenset)):
            bad_dates.extend(
                str(d) for d in history.reading_days
                if not DataValidator.is_iso_date(d) and str(d) not in bad_dates
            )

        if bad_dates:
            report.add_issue(IntegrityIssue(
                code="invalid_date_format",
                severity=Severity.ERROR,
                category=IssueCategory.FORMAT,
                message=f"{len(bad_dates)} dates do not use the YYYY-MM-DD format",
                affected_items=sorted(bad_dates),
            ))
        if bad_timestamps:
            report.add_issue(IntegrityIssue(
                code="invalid_timestamps",
                severity=Severity.ERROR,
                category=IssueCategory.FORMAT,
                message=f"{len(bad_timestamps)} entries have invalid timestamps",
                affected_items=bad_timestamps,
            ))

    def _check_temporal(self, history: EnhancedStreakHistory, report: IntegrityReport) -> None:
        if not isinstance(history.reading_day_entries, list):
            return
        today = self.clock.today()
        horizon = today + timedelta(days=self.config.future_horizon_days)
        stale_before = _years_before(today, self.config.stale_after_years)

        future: List[str] = []
        stale: List[str] = []
        for entry in history.reading_day_entries:
            if not DataValidator.is_iso_date(entry.date):
                continue
            day = date.fromisoformat(entry.date)
            if day > horizon:
                future.append(entry.date)
            elif day < stale_before:
                stale.append(entry.date)

        if future:
            report.add_issue(IntegrityIssue(
                code="future_dates",
                severity=Severity.WARNING,
                category=IssueCategory.TEMPORAL,
                message=f"{len(future)} entries have future dates",
                affected_items=sorted(future),
                recommendation="Review future dates for accuracy",
            ))
        if stale:
            report.add_issue(IntegrityIssue(
                code="stale_dates",
                severity=Severity.WARNING,
                category=IssueCategory.TEMPORAL,
                message=f"{len(stale)} entries are more than {self.config.stale_after_years} years old",
                affected_items=sorted(stale),
                recommendation="Verify old dates are correct",
            ))

    def _check_logic(self, history: EnhancedStreakHistory, report: IntegrityReport) -> None:
        if not isinstance(history.reading_day_entries, list):
            return

        no_sources: List[str] = []
        no_books: List[str] = []
        reversed_stamps: List[str] = []
        repeated_books: List[str] = []

        for entry in history.reading_day_entries:
            if not entry.sources:
                no_sources.append(entry.date)
            if entry.has_source(SourceKind.BOOK_COMPLETION) and not entry.book_ids:
                no_books.append(entry.date)
            if isinstance(entry.created_at, datetime) and isinstance(entry.modified_at, datetime):
                try:
                    if entry.modified_at < entry.created_at:
                        reversed_stamps.append(entry.date)
                except TypeError:
                    reversed_stamps.append(entry.date)
            if len(set(entry.book_ids)) != len(entry.book_ids):
                repeated_books.append(entry.date)

        if no_sources:
            report.add_issue(IntegrityIssue(
                code="empty_sources",
                severity=Severity.ERROR,
                category=IssueCategory.LOGIC,
                message=f"{len(no_sources)} entries have no sources",
                affected_items=no_sources,
            ))
        if reversed_stamps:
            report.add_issue(IntegrityIssue(
                code="modified_before_created",
                severity=Severity.ERROR,
                category=IssueCategory.LOGIC,
                message=f"{len(reversed_stamps)} entries have modified_at before created_at",
                affected_items=reversed_stamps,
            ))
        if no_books:
            report.add_issue(IntegrityIssue(
                code="book_source_without_books",
                severity=Severity.WARNING,
                category=IssueCategory.LOGIC,
                message=f"{len(no_books)} entries have a book_completion source but no book ids",
                affected_items=no_books,
                recommendation="Review source classification or add book ids",
            ))
        if repeated_books:
            report.add_issue(IntegrityIssue(
                code="duplicate_book_ids",
                severity=Severity.WARNING,
                category=IssueCategory.LOGIC,
                message=f"{len(repeated_books)} entries list the same book more than once",
                affected_items=repeated_books,
            ))

    def _check_performance(self, history: EnhancedStreakHistory, report: IntegrityReport) -> None:
        entries = history.reading_day_entries
        if isinstance(entries, list):
            if len(entries) > self.config.max_entries:
                report.add_issue(IntegrityIssue(
                    code="too_many_entries",
                    severity=Severity.WARNING,
                    category=IssueCategory.PERFORMANCE,
                    message=f"Large number of reading day entries ({len(entries)})",
                    affected_items=["reading_day_entries"],
                    recommendation="Consider archiving very old entries",
                ))
            long_notes = [
                e.date for e in entries
                if e.notes and len(e.notes) > self.config.max_note_length
            ]
            if long_notes:
                report.add_issue(IntegrityIssue(
                    code="long_notes",
                    severity=Severity.WARNING,
                    category=IssueCategory.PERFORMANCE,
                    message=f"{len(long_notes)} entries have very long notes",
                    affected_items=long_notes,
                    recommendation="Consider truncating or moving long notes to separate storage",
                ))

        if len(history.book_periods) > self.config.max_book_periods:
            report.add_issue(IntegrityIssue(
                code="too_many_book_periods",
                severity=Severity.WARNING,
                category=IssueCategory.PERFORMANCE,
                message=f"Large number of book periods ({len(history.book_periods)})",
                affected_items=["book_periods"],
                recommendation="Consider periodic cleanup of old book periods",
            ))

    def _check_references(
        self, history: EnhancedStreakHistory, books: Iterable[Book], report: IntegrityReport
    ) -> None:
        if not isinstance(history.reading_day_entries, list):
            return
        known = {book.id for book in books}
        orphaned = [
            e.date for e in history.reading_day_entries
            if any(book_id not in known for book_id in e.book_ids)
        ]
        if orphaned:
            report.add_issue(IntegrityIssue(
                code="orphaned_book_references",
                severity=Severity.WARNING,
                category=IssueCategory.REFERENCE,
                message=f"{len(orphaned)} entries reference non-existent books",
                affected_items=orphaned,
                recommendation="Clean up orphaned book references",
            ))

    def _score(self, report: IntegrityReport) -> int:
        score = 100
        for issue in report.issues:
            score -= self._PENALTIES[issue.severity]
        score += min(10, 2 * len(report.fixable_issues))
        score = max(0, min(100, score))
        if report.has_critical:
            score = min(score, self._CRITICAL_SCORE_CAP)
        return score

    def _recommend(self, report: IntegrityReport) -> List[str]:
        recommendations = [text for rule, text in self._RECOMMENDATION_RULES[:2] if rule(report)]
        fixable = len(report.fixable_issues)
        if fixable:
            recommendations.append(f"Consider running auto-fix for {fixable} fixable issues")
        recommendations.extend(text for rule, text in self._RECOMMENDATION_RULES[2:] if rule(report))

        for minimum, verdict in self._SCORE_TIERS:
            if report.score >= minimum:
                recommendations.append(verdict)
                break
        else:
            recommendations.append(self._POOR_VERDICT)
        return recommendations

    # ---- Statistics ----
    def get_validation_stats(self, history: EnhancedStreakHistory) -> Dict[str, Any]:
        """
        Entry-level statistics plus consistency and quality scores.

        Returns:
            Dictionary with total_entries, valid_entries, invalid_entries,
            duplicate_entries, future_entries, consistency_score and
            data_quality_score
        """
        report = self.validate(history)
        entries = history.reading_day_entries if isinstance(history.reading_day_entries, list) else []

        invalid = sum(
            1 for e in entries if not DataValidator.is_iso_date(e.date) or not e.sources
        )
        counts = Counter(e.date for e in entries)
        future_issue = report.find("future_dates")

        return {
            "total_entries": len(entries),
            "valid_entries": len(entries) - invalid,
            "invalid_entries": invalid,
            "duplicate_entries": sum(n - 1 for n in counts.values() if n > 1),
            "future_entries": len(future_issue.affected_items) if future_issue else 0,
            "consistency_score": max(0, 100 - 10 * len(report.errors)),
            "data_quality_score": report.score,
        }

    # ---- Auto-fix ----
    def auto_fix(self, history: EnhancedStreakHistory) -> AutoFixResult:
        """
        Repair structural damage without inventing reading activity.

        Steps, each counted in ``fixed`` when it changed something:
            1. Rebuild a missing or non-set reading_days index
            2. Default a missing version, last_sync_date, last_calculated
            3. Collapse duplicated dates, keeping the latest modified_at
               (ties go to the entry with more books, then notes)
            4. Add a manual entry for each indexed day without one
            5. Add each entry date missing from the index

        Returns:
            AutoFixResult with the repaired copy and fixed/failed counts
        """
        now = self.clock.now()
        result = AutoFixResult(updated_history=history)
        working = history

        steps = (
            ("rebuild_reading_days", self._fix_reading_days),
            ("default_metadata", self._fix_metadata),
            ("collapse_duplicates", self._fix_duplicates),
            ("sync_days_to_entries", self._fix_missing_entries),
            ("sync_entries_to_days", self._fix_missing_days),
        )
        for name, step in steps:
            try:
                working, fixed = step(working, now)
                result.fixed += fixed
            except Exception as e:
                result.failed += 1
                logger.warning("Auto-fix step %s failed: %s", name, e)
                self.logger.log_error(e, {"operation": "auto_fix", "step": name})

        result.updated_history = working
        self.logger.log_operation("auto_fix", {"fixed": result.fixed, "failed": result.failed})
        return result

    @staticmethod
    def _entry_list(history: EnhancedStreakHistory) -> List[ReadingDayEntry]:
        entries = history.reading_day_entries
        return list(entries) if isinstance(entries, list) else []

    def _fix_reading_days(
        self, history: EnhancedStreakHistory, now: datetime
    ) -> Tuple[EnhancedStreakHistory, int]:
        days = history.reading_days
        if isinstance(days, (set, frozenset)):
            return history, 0

        # keep whatever dates a damaged container still holds
        from readlog.reconcile.merger import iter_day_keys

        rebuilt = set(iter_day_keys(days))
        rebuilt.update(entry.date for entry in self._entry_list(history))
        return replace(history, reading_days=rebuilt), 1

    def _fix_metadata(
        self, history: EnhancedStreakHistory, now: datetime
    ) -> Tuple[EnhancedStreakHistory, int]:
        changes: Dict[str, Any] = {}
        version = history.version
        if not isinstance(version, int) or isinstance(version, bool) or version < 1:
            changes["version"] = CURRENT_STREAK_HISTORY_VERSION
        if not isinstance(history.last_sync_date, datetime):
            changes["last_sync_date"] = now
        if not isinstance(history.last_calculated, datetime):
            changes["last_calculated"] = now
        if not changes:
            return history, 0
        return replace(history, **changes), len(changes)

    def _fix_duplicates(
        self, history: EnhancedStreakHistory, now: datetime
    ) -> Tuple[EnhancedStreakHistory, int]:
        entries = self._entry_list(history)
        keep: Dict[str, ReadingDayEntry] = {}
        for entry in entries:
            current = keep.get(entry.date)
            if current is None or (_modified_rank(entry), _richness(entry)) > (
                _modified_rank(current), _richness(current)
            ):
                keep[entry.date] = entry
        if len(keep) == len(entries):
            return history, 0
        collapsed = [keep[day] for day in sorted(keep, key=str)]
        return replace(history, reading_day_entries=collapsed), 1

    def _fix_missing_entries(
        self, history: EnhancedStreakHistory, now: datetime
    ) -> Tuple[EnhancedStreakHistory, int]:
        days = history.reading_days
        if not isinstance(days, (set, frozenset)) or not isinstance(history.reading_day_entries, list):
            return history, 0
        entries = self._entry_list(history)
        have = {entry.date for entry in entries}
        missing = sorted(d for d in days if d not in have and DataValidator.is_iso_date(d))
        if not missing:
            return history, 0
        for day in missing:
            entries.append(ReadingDayEntry(
                date=day,
                sources=[ReadingDataSource(kind=SourceKind.MANUAL, timestamp=now)],
                created_at=now,
                modified_at=now,
            ))
        entries.sort(key=lambda e: str(e.date))
        return replace(history, reading_day_entries=entries), len(missing)

    def _fix_missing_days(
        self, history: EnhancedStreakHistory, now: datetime
    ) -> Tuple[EnhancedStreakHistory, int]:
        days = history.reading_days
        if not isinstance(days, (set, frozenset)):
            return history, 0
        missing = {
            e.date for e in self._entry_list(history) if DataValidator.is_iso_date(e.date)
        } - set(days)
        if not missing:
            return history, 0
        return replace(history, reading_days=set(days) | missing), len(missing)


# ----- Module-level conveniences -----
def validate_reading_data_enhanced(
    history: EnhancedStreakHistory,
    books: Optional[Iterable[Book]] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    clock: Optional[Clock] = None,
) -> IntegrityReport:
    """Validate a journal with a one-off IntegrityValidator."""
    return IntegrityValidator(config=config, clock=clock).validate(history, books)


def auto_fix_issues(
    history: EnhancedStreakHistory,
    config: EngineConfig = DEFAULT_CONFIG,
    clock: Optional[Clock] = None,
) -> AutoFixResult:
    """Auto-fix a journal with a one-off IntegrityValidator."""
    return IntegrityValidator(config=config, clock=clock).auto_fix(history)


def get_validation_stats(
    history: EnhancedStreakHistory,
    config: EngineConfig = DEFAULT_CONFIG,
    clock: Optional[Clock] = None,
) -> Dict[str, Any]:
    return IntegrityValidator(config=config, clock=clock).get_validation_stats(history)


def validate_reading_data(day_map: ReadingDayMap, clock: Optional[Clock] = None) -> Dict[str, Any]:
    """
    Light check of a merged ReadingDayMap (not a persisted journal).

    Errors: non-canonical keys, entries without sources.
    Warnings: future dates, dates more than two years old.

    Returns:
        Dictionary with is_valid, errors and warnings (lists of strings)
    """
    today = resolve_clock(clock).today()
    stale_before = _years_before(today, DEFAULT_CONFIG.stale_after_years)
    errors: List[str] = []
    warnings: List[str] = []

    for key, entry in day_map.items():
        if not DataValidator.is_iso_date(key):
            errors.append(f"Invalid date format: {key}")
            continue
        if not entry.sources:
            errors.append(f"No sources for date: {key}")
        day = date.fromisoformat(key)
        if day > today:
            warnings.append(f"Future date detected: {key}")
        elif day < stale_before:
            warnings.append(f"Very old reading date: {key}")

    return {"is_valid": not errors, "errors": errors, "warnings": warnings}
