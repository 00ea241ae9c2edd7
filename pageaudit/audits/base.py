"""Base audit interface."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from pageaudit.core.exceptions import AuditError
from pageaudit.core.logging import audit_context, get_logger

from .models import (
    DEFAULT_PASS,
    AuditMeta,
    AuditOutcome,
    AuditResult,
    ScoreDisplayMode,
    TableDetails,
    TableHeading,
)
from .results import build_error_result, build_result, build_table_details
from .scoring import compute_log_normal_score

logger = get_logger(__name__)


class Audit(ABC):
    """
    Base class for audits.

    An audit reads the artifacts gathered for a page and reports a raw
    outcome. ``run`` turns that outcome into a normalized result and
    substitutes an error result when the audit misbehaves, so one broken
    audit never aborts the whole report.
    """

    DEFAULT_PASS = DEFAULT_PASS
    SCORING_MODES = ScoreDisplayMode

    @property
    @abstractmethod
    def meta(self) -> AuditMeta:
        """Return the audit's static metadata."""

    @abstractmethod
    def audit(self, artifacts: Mapping[str, Any]) -> AuditOutcome:
        """
        Compute the raw outcome from gathered artifacts.

        Args:
            artifacts: Artifacts gathered for the page, keyed by name.

        Returns:
            Raw outcome for this audit.
        """

    @property
    def name(self) -> str:
        """Return the audit name."""
        return self.meta.name

    def run(
        self,
        artifacts: Mapping[str, Any],
        default_display_mode: ScoreDisplayMode | None = None,
    ) -> AuditResult:
        """
        Run the audit and build its normalized result.

        Missing artifacts, exceptions raised by ``audit`` and invalid
        outcomes are reported as error results.

        Args:
            artifacts: Artifacts gathered for the page.
            default_display_mode: Display mode when the audit declares none;
            defaults to the configured scoring.default_display_mode.

        Returns:
            Normalized result, possibly flagged with ``error=True``.
        """
        meta = self.meta
        with audit_context(meta.name):
            missing = [a for a in meta.required_artifacts if a not in artifacts]
            if missing:
                debug_string = f"Required artifacts missing: {', '.join(missing)}"
                logger.warning("audit_artifacts_missing", missing=missing)
                return build_error_result(meta, debug_string, default_display_mode)

            try:
                outcome = self.audit(artifacts)
                return build_result(meta, outcome, default_display_mode)
            except AuditError as e:
                logger.warning("audit_result_invalid", error=str(e))
                return build_error_result(meta, str(e), default_display_mode)
            except Exception as e:
                logger.exception("audit_failed")
                return build_error_result(
                    meta, f"Audit error: {e}", default_display_mode
                )

    @staticmethod
    def compute_log_normal_score(
        measured_value: float,
        diminishing_returns_value: float,
        median_value: float,
    ) -> float:
        """Score a continuous measurement, see scoring.compute_log_normal_score."""
        return compute_log_normal_score(
            measured_value, diminishing_returns_value, median_value
        )

    @staticmethod
    def make_table_details(
        headings: Sequence[TableHeading | Mapping[str, Any]],
        rows: Sequence[Mapping[str, Any]],
        summary: Mapping[str, Any] | None = None,
    ) -> TableDetails:
        """Build a table details payload for this audit's outcome."""
        return build_table_details(headings, rows, summary)

    def generate_error_result(
        self,
        debug_string: str,
        default_display_mode: ScoreDisplayMode | None = None,
    ) -> AuditResult:
        """Build an error result for this audit, resolved like ``run`` does."""
        return build_error_result(self.meta, debug_string, default_display_mode)
