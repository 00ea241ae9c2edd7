"""Expected-value matching for end-to-end comparison tests."""

from .comparator import compare_audits, find_difference, matches_expectation
from .loader import load_expectations
from .models import AuditComparison, Difference, ExpectationResult, ExpectationSet

__all__ = [
    "AuditComparison",
    "Difference",
    "ExpectationResult",
    "ExpectationSet",
    "compare_audits",
    "find_difference",
    "load_expectations",
    "matches_expectation",
]
