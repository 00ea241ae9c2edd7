"""Shared pytest fixtures for page audit tests."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from pageaudit.audits.models import AuditMeta, AuditResult, ScoreDisplayMode
from pageaudit.core.settings import get_cached_settings
from pageaudit.report.models import Category, CategoryAudit


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def numeric_by_default(monkeypatch: pytest.MonkeyPatch):  # type: ignore[misc]
    """Configure numeric as the default display mode for the test."""
    monkeypatch.setenv("PAGEAUDIT_SCORING__DEFAULT_DISPLAY_MODE", "numeric")
    get_cached_settings.cache_clear()
    yield
    get_cached_settings.cache_clear()


@pytest.fixture
def binary_meta() -> AuditMeta:
    """Return metadata of a binary audit with a failure description."""
    return AuditMeta(
        name="is-on-https",
        description="Uses HTTPS",
        failure_description="Does not use HTTPS",
        help_text="All sites should be protected with HTTPS.",
    )


@pytest.fixture
def numeric_meta() -> AuditMeta:
    """Return metadata of a numeric timing audit."""
    return AuditMeta(
        name="first-meaningful-paint",
        description="First meaningful paint",
        help_text="Measures when the primary content is visible.",
        score_display_mode=ScoreDisplayMode.NUMERIC,
        group="perf-metric",
    )


@pytest.fixture
def make_result() -> Callable[..., AuditResult]:
    """Return a factory for audit results."""

    def _make(name: str = "audit", score: float = 1.0, **kwargs: Any) -> AuditResult:
        fields: dict[str, Any] = {
            "score": score,
            "score_display_mode": ScoreDisplayMode.BINARY,
            "raw_value": kwargs.pop("raw_value", score),
            "name": name,
            "description": kwargs.pop("description", name),
        }
        fields.update(kwargs)
        return AuditResult(**fields)

    return _make


@pytest.fixture
def make_entry(
    make_result: Callable[..., AuditResult],
) -> Callable[..., CategoryAudit]:
    """Return a factory for category entries."""

    def _make(
        name: str, group: str | None, score: float, **kwargs: Any
    ) -> CategoryAudit:
        return CategoryAudit(
            id=name, group=group, result=make_result(name, score, **kwargs)
        )

    return _make


@pytest.fixture
def performance_category(
    make_entry: Callable[..., CategoryAudit],
) -> Category:
    """Return a performance category covering every section."""
    return Category(
        id="performance",
        name="Performance",
        audits=[
            make_entry("first-meaningful-paint", "perf-metric", 0.85),
            make_entry(
                "render-blocking-resources",
                "perf-hint",
                0.32,
                details={"summary": {"wastedMs": 3223, "wastedKb": 42.37}},
            ),
            make_entry("dom-size", "perf-info", 0.0),
            make_entry(
                "uses-optimized-images",
                "perf-hint",
                1.0,
                details={"summary": {"wastedMs": 0}},
            ),
            make_entry("speed-index-metric", "perf-metric", 1.0),
            make_entry("critical-request-chains", "perf-info", 1.0),
            make_entry("screenshot-thumbnails", None, 1.0),
        ],
    )
