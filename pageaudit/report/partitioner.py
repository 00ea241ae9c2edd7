"""Partitioning of the performance category into report sections.

Every grouped audit lands in at most one section:

- ``perf-metric`` audits are always metrics, whatever their score.
- ``perf-hint`` and ``perf-info`` audits below a perfect score become hints
  and diagnostics respectively.
- Any other grouped audit with a perfect score is passed.
- Ungrouped audits appear in no section.

Sections keep the category's authoring order.
"""

import math
from collections.abc import Mapping
from typing import Any

from pydantic import Field

from pageaudit.audits.models import ReportRecord, TableDetails
from pageaudit.core.exceptions import ConfigurationError, MissingImpactEstimateError
from pageaudit.core.logging import get_logger
from pageaudit.core.settings import ReportSettings, get_cached_settings

from .models import Category, CategoryAudit, PerformanceGroup, Report

logger = get_logger(__name__)

DEFAULT_HINT_ERROR_TITLE = "Audit error"

# Section receiving a failing audit of each performance group; passing
# audits of every group except metrics go to the passed section.
_FAILING_SECTIONS: dict[PerformanceGroup, str] = {
    PerformanceGroup.METRIC: "metrics",
    PerformanceGroup.HINT: "hints",
    PerformanceGroup.INFO: "diagnostics",
}


class PerfHint(ReportRecord):
    """A failing performance hint with its impact estimate."""

    audit: CategoryAudit
    title: str = Field(..., description="Estimate summary or debug string")
    wasted_ms: float | None = None
    wasted_kb: float | None = None
    debug_string: str | None = None
    error: bool = False
    bar_fraction: float = Field(default=0.0, ge=0.0, le=1.0)


class PerformanceReport(ReportRecord):
    """Sections of a partitioned performance category."""

    category_id: str
    metrics: list[CategoryAudit] = Field(default_factory=list)
    hints: list[PerfHint] = Field(default_factory=list)
    diagnostics: list[CategoryAudit] = Field(default_factory=list)
    passed: list[CategoryAudit] = Field(default_factory=list)
    hint_scale_ms: int = Field(default=0, ge=0)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_milliseconds(ms: float, granularity: int = 10) -> str:
    """Format milliseconds coarsened to ``granularity``, e.g. ``3,220 ms``."""
    coarse = _round_half_up(ms / granularity) * granularity
    return f"{coarse:,} ms"


def format_number(value: float) -> str:
    """Format a number to at most one decimal with thousands separators."""
    rounded = _round_half_up(value * 10) / 10
    if rounded.is_integer():
        return f"{int(rounded):,}"
    return f"{rounded:,.1f}"


def _summary(entry: CategoryAudit) -> Mapping[str, Any] | None:
    details = entry.result.details
    if isinstance(details, TableDetails):
        return details.summary
    if isinstance(details, Mapping):
        summary = details.get("summary")
        return summary if isinstance(summary, Mapping) else None
    return None


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _bar_fraction(wasted_ms: float, scale: int) -> float:
    if not scale:
        return 0.0
    return max(0.0, min(1.0, wasted_ms / scale))


def get_wasted_ms(entry: CategoryAudit) -> float:
    """
    Return the hint's ``details.summary.wastedMs``.

    Raises:
        MissingImpactEstimateError: If the estimate is absent or not numeric.
    """
    summary = _summary(entry)
    wasted_ms = summary.get("wastedMs") if summary is not None else None
    if not _is_number(wasted_ms):
        raise MissingImpactEstimateError(entry.id)
    return float(wasted_ms)


class PerformancePartitioner:
    """
    Splits a performance category into metrics, hints, diagnostics and
    passed audits.
    """

    def __init__(
        self,
        hint_scale_step_ms: int = 1000,
        granularity: int = 10,
        category_id: str = "performance",
    ) -> None:
        """
        Initialize the partitioner.

        Args:
            hint_scale_step_ms: Hint bars are scaled against the largest
                estimate rounded up to this step.
            granularity: Millisecond granularity of hint titles.
            category_id: Id of the performance category in a report.
        """
        if hint_scale_step_ms < 1:
            raise ValueError("hint_scale_step_ms must be >= 1")
        if granularity < 1:
            raise ValueError("granularity must be >= 1")
        self.hint_scale_step_ms = hint_scale_step_ms
        self.granularity = granularity
        self.category_id = category_id

    @classmethod
    def from_settings(
        cls, settings: ReportSettings | None = None
    ) -> "PerformancePartitioner":
        """Create a partitioner from report settings, the cached ones by default."""
        if settings is None:
            settings = get_cached_settings().report
        return cls(
            hint_scale_step_ms=settings.hint_scale_step_ms,
            granularity=settings.millisecond_granularity,
            category_id=settings.performance_category_id,
        )

    def _hint_title(self, wasted_ms: float, wasted_kb: Any) -> str:
        title = format_milliseconds(wasted_ms, self.granularity)
        if _is_number(wasted_kb) and wasted_kb:
            title = f"{title}, {format_number(wasted_kb)} KB"
        return title

    def _build_hints(self, entries: list[CategoryAudit]) -> tuple[list[PerfHint], int]:
        estimates: list[tuple[CategoryAudit, float | None]] = [
            (entry, None if entry.result.error else get_wasted_ms(entry))
            for entry in entries
        ]

        known = [max(ms, 0.0) for _, ms in estimates if ms is not None]
        max_waste = max(known, default=0.0)
        step = self.hint_scale_step_ms
        scale = math.ceil(max_waste / step) * step

        hints: list[PerfHint] = []
        for entry, wasted_ms in estimates:
            result = entry.result
            if wasted_ms is None:
                hints.append(
                    PerfHint(
                        audit=entry,
                        title=result.debug_string or DEFAULT_HINT_ERROR_TITLE,
                        debug_string=result.debug_string,
                        error=True,
                    )
                )
                continue

            summary = _summary(entry) or {}
            wasted_kb = summary.get("wastedKb")
            hints.append(
                PerfHint(
                    audit=entry,
                    title=self._hint_title(wasted_ms, wasted_kb),
                    wasted_ms=wasted_ms,
                    wasted_kb=float(wasted_kb) if _is_number(wasted_kb) else None,
                    debug_string=result.debug_string,
                    bar_fraction=_bar_fraction(wasted_ms, scale),
                )
            )
        return hints, scale

    def partition(self, category: Category) -> PerformanceReport:
        """
        Partition a category into report sections.

        Args:
            category: Aggregated category to partition. It is not modified.

        Returns:
            PerformanceReport with the four sections and the hint scale.

        Raises:
            MissingImpactEstimateError: If a failing, non-error hint has no
                numeric ``details.summary.wastedMs``.
        """
        sections: dict[str, list[CategoryAudit]] = {
            "metrics": [],
            "hints": [],
            "diagnostics": [],
            "passed": [],
        }

        for entry in category.audits:
            if entry.group is None:
                continue

            try:
                group: PerformanceGroup | None = PerformanceGroup(entry.group)
            except ValueError:
                group = None

            if group is PerformanceGroup.METRIC:
                sections[_FAILING_SECTIONS[group]].append(entry)
            elif entry.result.score == 1:
                sections["passed"].append(entry)
            elif group is not None:
                sections[_FAILING_SECTIONS[group]].append(entry)

        hints, scale = self._build_hints(sections["hints"])

        logger.debug(
            "category_partitioned",
            category=category.id,
            metrics=len(sections["metrics"]),
            hints=len(hints),
            diagnostics=len(sections["diagnostics"]),
            passed=len(sections["passed"]),
        )

        return PerformanceReport(
            category_id=category.id,
            metrics=sections["metrics"],
            hints=hints,
            diagnostics=sections["diagnostics"],
            passed=sections["passed"],
            hint_scale_ms=scale,
        )

    def partition_report(self, report: Report) -> PerformanceReport:
        """
        Partition the performance category of a report.

        Raises:
            ConfigurationError: If the report has no category with the
                partitioner's ``category_id``.
            MissingImpactEstimateError: See ``partition``.
        """
        category = report.get_category(self.category_id)
        if category is None:
            raise ConfigurationError(
                f"Report has no performance category {self.category_id}",
                category_id=self.category_id,
            )
        return self.partition(category)


def partition_performance_category(
    category: Category,
    hint_scale_step_ms: int = 1000,
    granularity: int = 10,
) -> PerformanceReport:
    """Partition a performance category with the given hint formatting."""
    return PerformancePartitioner(hint_scale_step_ms, granularity).partition(category)
