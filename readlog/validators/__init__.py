#!/usr/bin/env python3
"""
validators
----------
Integrity validation for stored reading journals.

- integrity: structural, consistency, format, temporal, logic,
  performance and reference checks, scoring and auto-fix

Usage:
    from readlog.validators import IntegrityValidator

    report = IntegrityValidator().validate(history, books)
    print(report.score, report.recommendations)
"""
from .integrity import (
    AutoFixResult,
    IntegrityIssue,
    IntegrityReport,
    IntegrityValidator,
    IssueCategory,
    Severity,
    auto_fix_issues,
    get_validation_stats,
    validate_reading_data,
    validate_reading_data_enhanced,
)

__all__ = [
    "AutoFixResult",
    "IntegrityIssue",
    "IntegrityReport",
    "IntegrityValidator",
    "IssueCategory",
    "Severity",
    "auto_fix_issues",
    "get_validation_stats",
    "validate_reading_data",
    "validate_reading_data_enhanced",
]
