"""Matching of serialized audit results against expected values."""

import math
import operator
import re
from collections.abc import Callable, Mapping
from typing import Any

from pageaudit.audits.models import AuditResult
from pageaudit.core.logging import get_logger

from .models import AuditComparison, Difference, ExpectationResult, ExpectationSet

logger = get_logger(__name__)

_COMPARISON_PATTERN = re.compile(r"^([<>]=?)\s*(-?\d+(?:\.\d+)?)$")

_OPERATORS: dict[str, Callable[[float, float], bool]] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
}


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def matches_expectation(actual: Any, expected: Any) -> bool:
    """
    Check a single value against its expectation.

    A numeric actual value is compared against a string expectation of the
    form ``">N"``, ``"<N"``, ``">=N"`` or ``"<=N"``. Everything else uses
    equality, without treating booleans as numbers.
    """
    if _is_number(actual) and isinstance(expected, str):
        match = _COMPARISON_PATTERN.match(expected.strip())
        if match is None:
            return False
        op, number = match.groups()
        return not math.isnan(actual) and _OPERATORS[op](actual, float(number))

    if isinstance(actual, bool) != isinstance(expected, bool):
        return False
    return actual == expected


def _child(actual: Any, key: str) -> tuple[bool, Any]:
    """Look up ``key`` on a mapping or list; ``length`` is a list's size."""
    if isinstance(actual, Mapping):
        if key in actual:
            return True, actual[key]
        return False, None
    if isinstance(actual, list):
        if key == "length":
            return True, len(actual)
        if key.isdigit() and int(key) < len(actual):
            return True, actual[int(key)]
    return False, None


def find_difference(path: str, actual: Any, expected: Any) -> Difference | None:
    """
    Find the first mismatch between an actual value and its expectation.

    Expected mappings are walked key by key; keys missing from the actual
    value are mismatches. Extra actual keys are ignored.

    Returns:
        The first Difference found, or None when everything matches.
    """
    if matches_expectation(actual, expected):
        return None

    if not isinstance(expected, Mapping) or not isinstance(actual, Mapping | list):
        return Difference(path=path, actual=actual, expected=expected)

    for key, expected_value in expected.items():
        key_path = f"{path}.{key}"
        found, actual_value = _child(actual, str(key))
        if not found:
            return Difference(path=key_path, actual=None, expected=expected_value)

        difference = find_difference(key_path, actual_value, expected_value)
        if difference is not None:
            return difference

    return None


def _as_record(result: AuditResult | Mapping[str, Any]) -> Any:
    if isinstance(result, AuditResult):
        return result.to_dict()
    return result


def compare_audits(
    results: Mapping[str, AuditResult | Mapping[str, Any]],
    expectation: ExpectationSet,
) -> ExpectationResult:
    """
    Compare produced results with the audits expected for a URL.

    Args:
        results: Results keyed by audit name, as models or serialized records.
        expectation: Expected audit fields for the URL.

    Returns:
        ExpectationResult with one comparison per expected audit.
    """
    comparisons: list[AuditComparison] = []
    for audit_name, expected in expectation.audits.items():
        path = f"audits.{audit_name}"
        if audit_name not in results:
            difference: Difference | None = Difference(
                path=path, actual=None, expected=expected
            )
        else:
            difference = find_difference(
                path, _as_record(results[audit_name]), expected
            )
        comparisons.append(AuditComparison(audit=audit_name, difference=difference))

    outcome = ExpectationResult(url=expectation.url, comparisons=comparisons)
    if not outcome.passed:
        logger.info(
            "expectations_unmet",
            url=expectation.url,
            failures=[str(c.difference) for c in outcome.failures],
        )
    return outcome
