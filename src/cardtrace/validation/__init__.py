"""Validation module - Trace consistency checks.

Provides the validator that checks trace files against the card files
they reference.
"""

from cardtrace.validation.consistency import (
    CardIdCache,
    IssueLevel,
    ValidationIssue,
    ValidationResult,
    directory_file_exists,
    directory_resolver,
    directory_trace_loader,
    validate_project_directory,
    validate_trace_consistency,
)

__all__ = [
    "CardIdCache",
    "IssueLevel",
    "ValidationIssue",
    "ValidationResult",
    "directory_file_exists",
    "directory_resolver",
    "directory_trace_loader",
    "validate_project_directory",
    "validate_trace_consistency",
]
