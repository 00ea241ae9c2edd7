"""Unit tests for score normalization."""

import pytest

from pageaudit.audits.models import AuditMeta, AuditOutcome, ScoreDisplayMode
from pageaudit.audits.scoring import (
    clamp_score,
    coerce_score,
    compute_log_normal_score,
    normalize_score,
    resolve_raw_score,
    round_score,
)
from pageaudit.core.exceptions import InvalidScoreError


class TestComputeLogNormalScore:
    """Tests for compute_log_normal_score."""

    def test_median_scores_half(self) -> None:
        """Test the median maps to the midpoint."""
        assert compute_log_normal_score(4000, 1600, 4000) == 0.5

    def test_scores_are_rounded(self) -> None:
        """Test scores carry at most two decimals."""
        for measured in (100, 1234, 2500, 5555, 9000):
            score = compute_log_normal_score(measured, 1600, 4000)
            assert score == round(score, 2)

    def test_bounds_and_monotonicity(self) -> None:
        """Test scores stay in [0, 1] and never rise with the measurement."""
        measurements = [0, 50, 800, 1600, 4000, 10000, 60000, 1e9]
        scores = [compute_log_normal_score(m, 1600, 4000) for m in measurements]
        assert scores[0] == 1.0
        assert scores[-1] == 0.0
        assert all(0.0 <= s <= 1.0 for s in scores)
        assert all(a >= b for a, b in zip(scores, scores[1:], strict=False))


class TestRounding:
    """Tests for score rounding and clamping."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.125, 0.13), (0.994, 0.99), (0.996, 1.0), (0.5, 0.5), (0.0, 0.0)],
    )
    def test_round_half_up(self, value: float, expected: float) -> None:
        """Test rounding to two decimals, half up."""
        assert round_score(value) == expected

    def test_clamp_negative(self) -> None:
        """Test negative scores clamp to 0."""
        assert clamp_score(-0.3) == 0.0


class TestResolution:
    """Tests for raw score resolution and coercion."""

    def test_score_override_wins(self) -> None:
        """Test an explicit score is preferred over the raw value."""
        outcome = AuditOutcome(raw_value=3000, score=0.4)
        assert resolve_raw_score(outcome) == 0.4

    def test_explicit_none_score_is_used(self) -> None:
        """Test an explicit None score is not treated as absent."""
        outcome = AuditOutcome(raw_value=True, score=None)
        assert resolve_raw_score(outcome) is None

    def test_falls_back_to_raw_value(self) -> None:
        """Test the raw value is used without a score override."""
        assert resolve_raw_score(AuditOutcome(raw_value=0.7)) == 0.7

    @pytest.mark.parametrize(
        ("value", "expected"), [(True, 1), (False, 0), (None, 0), (0.3, 0.3)]
    )
    def test_coerce(self, value: object, expected: float) -> None:
        """Test boolean and None coercion."""
        assert coerce_score(value) == expected  # type: ignore[arg-type]


class TestNormalizeScore:
    """Tests for normalize_score."""

    @pytest.fixture
    def meta(self) -> AuditMeta:
        return AuditMeta(name="uses-http2", description="Uses HTTP/2")

    @pytest.mark.parametrize(
        ("raw_value", "expected"), [(True, 1.0), (False, 0.0), (None, 0.0)]
    )
    def test_coercion(self, meta: AuditMeta, raw_value: object, expected: float) -> None:
        """Test booleans and None coerce before clamping."""
        outcome = AuditOutcome(raw_value=raw_value)
        assert normalize_score(meta, outcome).score == expected

    def test_default_display_mode_is_binary(self, meta: AuditMeta) -> None:
        """Test undeclared display mode defaults to binary."""
        result = normalize_score(meta, AuditOutcome(raw_value=True))
        assert result.score_display_mode == ScoreDisplayMode.BINARY

    def test_declared_display_mode(self) -> None:
        """Test a declared display mode is kept."""
        meta = AuditMeta(
            name="speed-index",
            description="Speed Index",
            score_display_mode=ScoreDisplayMode.NUMERIC,
        )
        result = normalize_score(meta, AuditOutcome(raw_value=2500, score=0.77))
        assert result == (0.77, ScoreDisplayMode.NUMERIC)

    def test_score_above_one_rejected(self, meta: AuditMeta) -> None:
        """Test scores above 1 are a hard error."""
        with pytest.raises(InvalidScoreError, match="uses-http2"):
            normalize_score(meta, AuditOutcome(raw_value=True, score=1.5))

    def test_raw_value_above_one_rejected(self, meta: AuditMeta) -> None:
        """Test a raw value above 1 without override is rejected."""
        with pytest.raises(InvalidScoreError):
            normalize_score(meta, AuditOutcome(raw_value=3000))

    @pytest.mark.parametrize("score", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_rejected(self, meta: AuditMeta, score: float) -> None:
        """Test non-finite scores are rejected."""
        with pytest.raises(InvalidScoreError):
            normalize_score(meta, AuditOutcome(raw_value=1, score=score))

    def test_negative_score_clamped(self, meta: AuditMeta) -> None:
        """Test negative scores clamp to 0."""
        assert normalize_score(meta, AuditOutcome(raw_value=-2)).score == 0.0

    def test_score_rounded(self, meta: AuditMeta) -> None:
        """Test scores are rounded to two decimals."""
        outcome = AuditOutcome(raw_value=1, score=0.98765)
        assert normalize_score(meta, outcome).score == 0.99


class TestConfiguredDisplayMode:
    """Tests for the configured default display mode."""

    def test_configured_default(self, numeric_by_default: None) -> None:
        """Test undeclared display modes follow the configured default."""
        meta = AuditMeta(name="uses-http2", description="Uses HTTP/2")
        result = normalize_score(meta, AuditOutcome(raw_value=True))
        assert result.score_display_mode == ScoreDisplayMode.NUMERIC

    def test_explicit_default_wins(self, numeric_by_default: None) -> None:
        """Test a default passed by the caller overrides the configuration."""
        meta = AuditMeta(name="uses-http2", description="Uses HTTP/2")
        result = normalize_score(
            meta, AuditOutcome(raw_value=True), ScoreDisplayMode.BINARY
        )
        assert result.score_display_mode == ScoreDisplayMode.BINARY

    def test_declared_mode_wins(self, numeric_by_default: None) -> None:
        """Test a display mode declared by the audit is kept."""
        meta = AuditMeta(
            name="doctype",
            description="Has doctype",
            score_display_mode=ScoreDisplayMode.BINARY,
        )
        result = normalize_score(meta, AuditOutcome(raw_value=True))
        assert result.score_display_mode == ScoreDisplayMode.BINARY
