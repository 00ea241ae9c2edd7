"""Builders for normalized audit results and table details.

Display values resolve in a fixed order: ``default_display_value`` picks the
outcome's own display value or falls back to a truthy raw value, then
``suppress_redundant_display_value`` blanks it when it would repeat the score.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from pageaudit.core.exceptions import MissingRawValueError

from .models import (
    AuditMeta,
    AuditOutcome,
    AuditResult,
    ScoreDisplayMode,
    TableDetails,
    TableHeading,
)
from .scoring import normalize_score


def render_value(value: Any) -> str:
    """Render a scalar the way it appears in the report."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def default_display_value(outcome: AuditOutcome) -> Any:
    """Return the outcome's display value, or its raw value when truthy."""
    if outcome.display_value is not None:
        return outcome.display_value
    return outcome.raw_value if outcome.raw_value else ""


def suppress_redundant_display_value(display_value: Any, score: float) -> str:
    """Render the display value, blanking it when it equals the score."""
    rendered = render_value(display_value)
    if rendered == render_value(score):
        return ""
    return rendered


def select_description(meta: AuditMeta, score: float) -> str:
    """Use the failure description for scores below 1 when one is declared."""
    if meta.failure_description and score < 1:
        return meta.failure_description
    return meta.description


def _as_outcome(outcome: AuditOutcome | Mapping[str, Any]) -> AuditOutcome:
    if isinstance(outcome, AuditOutcome):
        return outcome
    return AuditOutcome.model_validate(dict(outcome))


def build_result(
    meta: AuditMeta,
    outcome: AuditOutcome | Mapping[str, Any],
    default_display_mode: ScoreDisplayMode | None = None,
) -> AuditResult:
    """Build the normalized result for an audit outcome.

    Args:
        meta: Metadata of the audit.
        outcome: Raw outcome, as a model or a camelCase/snake_case mapping.
        default_display_mode: Display mode when the audit declares none;
            defaults to the configured scoring.default_display_mode.

    Returns:
        Immutable AuditResult.

    Raises:
        MissingRawValueError: If the outcome has no raw_value at all.
        InvalidScoreError: If the score is not finite or exceeds 1.
    """
    outcome = _as_outcome(outcome)
    if not outcome.has_raw_value:
        raise MissingRawValueError(meta.name)

    score, score_display_mode = normalize_score(meta, outcome, default_display_mode)
    display_value = suppress_redundant_display_value(
        default_display_value(outcome), score
    )

    return AuditResult(
        score=score,
        score_display_mode=score_display_mode,
        display_value=display_value,
        raw_value=outcome.raw_value,
        error=outcome.error,
        debug_string=outcome.debug_string,
        details=outcome.details,
        extended_info=outcome.extended_info,
        informative=meta.informative,
        manual=meta.manual,
        not_applicable=outcome.not_applicable,
        name=meta.name,
        description=select_description(meta, score),
        help_text=meta.help_text,
    )


def build_error_result(
    meta: AuditMeta,
    debug_string: str,
    default_display_mode: ScoreDisplayMode | None = None,
) -> AuditResult:
    """Build a zero-scored result flagged as an error."""
    outcome = AuditOutcome(raw_value=None, error=True, debug_string=debug_string)
    return build_result(meta, outcome, default_display_mode)


def build_table_details(
    headings: Sequence[TableHeading | Mapping[str, Any]],
    rows: Sequence[Mapping[str, Any]],
    summary: Mapping[str, Any] | None = None,
) -> TableDetails:
    """Build a table details payload.

    An empty ``rows`` yields a fully empty table; the headings are dropped.
    """
    summary_dict = dict(summary) if summary is not None else None
    if not rows:
        return TableDetails(type="table", headings=[], items=[], summary=summary_dict)

    return TableDetails(
        type="table",
        headings=[
            h if isinstance(h, TableHeading) else TableHeading.model_validate(dict(h))
            for h in headings
        ],
        items=[dict(row) for row in rows],
        summary=summary_dict,
    )
