"""Score normalization for audit outcomes.

The canonical resolution order for a result's score is:

1. ``resolve_raw_score``: the explicit score override, else the raw value.
2. ``coerce_score``: booleans become 1/0 and ``None`` becomes 0.
3. ``validate_score``: the value must be finite and not exceed 1.
4. ``clamp_score``: clamp to [0, 1] and round to two decimals.
"""

import math
from typing import NamedTuple

from pageaudit.core.exceptions import InvalidScoreError
from pageaudit.statistics import get_log_normal_distribution

from .models import AuditMeta, AuditOutcome, RawValue, ScoreDisplayMode

SCORE_PRECISION = 2


class NormalizedScore(NamedTuple):
    """Score and display mode produced by the normalizer."""

    score: float
    score_display_mode: ScoreDisplayMode


def round_score(value: float) -> float:
    """Round half up to two decimals.

    Python's round() rounds half to even, which would move scores such as
    0.125 to 0.12; report scores round 0.125 to 0.13.
    """
    factor = 10**SCORE_PRECISION
    return math.floor(value * factor + 0.5) / factor


def compute_log_normal_score(
    measured_value: float,
    diminishing_returns_value: float,
    median_value: float,
) -> float:
    """Score a continuous measurement against a log-normal distribution.

    The distribution is governed by two control points, the point of
    diminishing returns and the median. The score is the share of the
    reference population that measured higher than ``measured_value``.

    Args:
        measured_value: Measurement to score, e.g. a paint time in ms.
        diminishing_returns_value: Value past which gains become negligible.
        median_value: Value that scores 0.5.

    Returns:
        Score in [0, 1] rounded to two decimals.
    """
    distribution = get_log_normal_distribution(median_value, diminishing_returns_value)
    score = distribution.compute_complementary_percentile(measured_value)
    return clamp_score(score)


def resolve_raw_score(outcome: AuditOutcome) -> RawValue:
    """Return the explicit score override, falling back to the raw value."""
    if outcome.has_score:
        return outcome.score
    return outcome.raw_value


def coerce_score(value: RawValue) -> RawValue:
    """Map booleans to 1/0 and None to 0; numbers pass through."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return 1 if value else 0
    return value


def validate_score(audit_name: str, value: RawValue) -> float:
    """Ensure a coerced score is a finite number no greater than 1.

    Raises:
        InvalidScoreError: If the score is not finite or exceeds 1.
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise InvalidScoreError(audit_name, value)
    if not math.isfinite(value):
        raise InvalidScoreError(audit_name, value)
    if value > 1:
        raise InvalidScoreError(audit_name, value, f"Audit score {value} is > 1")
    return float(value)


def clamp_score(value: float) -> float:
    """Clamp a score to [0, 1] and round it to two decimals."""
    return round_score(min(1.0, max(0.0, value)))


def resolve_display_mode(
    meta: AuditMeta,
    default: ScoreDisplayMode | None = None,
) -> ScoreDisplayMode:
    """Return the audit's declared display mode.

    Audits that declare none get ``default``, or the configured
    ``scoring.default_display_mode`` when no default is passed.
    """
    if meta.score_display_mode is not None:
        return meta.score_display_mode
    if default is not None:
        return default
    # Import here to avoid circular imports
    from pageaudit.core.settings import get_cached_settings

    return get_cached_settings().scoring.default_display_mode


def normalize_score(
    meta: AuditMeta,
    outcome: AuditOutcome,
    default_display_mode: ScoreDisplayMode | None = None,
) -> NormalizedScore:
    """Normalize an audit outcome into a canonical score.

    Args:
        meta: Metadata of the audit that produced the outcome.
        outcome: Raw outcome to score.
        default_display_mode: Display mode when the audit declares none;
            defaults to the configured scoring.default_display_mode.

    Returns:
        NormalizedScore with a score in [0, 1] rounded to two decimals.

    Raises:
        InvalidScoreError: If the resolved score is not finite or exceeds 1.
    """
    value = coerce_score(resolve_raw_score(outcome))
    score = clamp_score(validate_score(meta.name, value))
    return NormalizedScore(score, resolve_display_mode(meta, default_display_mode))
