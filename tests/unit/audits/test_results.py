"""Unit tests for result building."""

import pytest

from pageaudit.audits.models import (
    AuditMeta,
    AuditOutcome,
    AuditResult,
    ScoreDisplayMode,
    TableDetails,
    TableHeading,
)
from pageaudit.audits.results import (
    build_error_result,
    build_result,
    build_table_details,
    default_display_value,
    render_value,
    select_description,
    suppress_redundant_display_value,
)
from pageaudit.core.exceptions import InvalidScoreError, MissingRawValueError

HEADINGS = [
    {"key": "url", "itemType": "url", "text": "URL"},
    {"key": "wastedMs", "itemType": "ms", "text": "Potential savings"},
]


class TestBuildResult:
    """Tests for build_result."""

    def test_binary_pass(self, binary_meta: AuditMeta) -> None:
        """Test a passing binary audit."""
        result = build_result(binary_meta, AuditOutcome(raw_value=True))

        assert result.score == 1.0
        assert result.score_display_mode == ScoreDisplayMode.BINARY
        assert result.raw_value is True
        assert result.name == "is-on-https"
        assert result.description == "Uses HTTPS"
        assert result.help_text == "All sites should be protected with HTTPS."

    def test_missing_raw_value(self, binary_meta: AuditMeta) -> None:
        """Test an absent raw value is a construction error."""
        with pytest.raises(MissingRawValueError):
            build_result(binary_meta, AuditOutcome(score=1))

    def test_null_raw_value_accepted(self, binary_meta: AuditMeta) -> None:
        """Test an explicit None raw value is accepted and scores 0."""
        result = build_result(binary_meta, AuditOutcome(raw_value=None))
        assert result.raw_value is None
        assert result.score == 0.0
        assert result.display_value == ""

    def test_invalid_score(self, binary_meta: AuditMeta) -> None:
        """Test a score above 1 fails."""
        with pytest.raises(InvalidScoreError):
            build_result(binary_meta, AuditOutcome(raw_value=1, score=1.5))

    def test_accepts_camel_case_mapping(self, numeric_meta: AuditMeta) -> None:
        """Test outcomes may be passed as serialized mappings."""
        result = build_result(
            numeric_meta,
            {"rawValue": 3000, "score": 0.41, "debugString": "slow", "notApplicable": False},
        )
        assert result.raw_value == 3000
        assert result.debug_string == "slow"
        assert result.not_applicable is False

    def test_mapping_without_raw_value(self, numeric_meta: AuditMeta) -> None:
        """Test a mapping without rawValue fails like a model does."""
        with pytest.raises(MissingRawValueError):
            build_result(numeric_meta, {"score": 0.5})

    def test_display_value_suppressed_when_equal_to_score(
        self, binary_meta: AuditMeta
    ) -> None:
        """Test a display value repeating the score is blanked."""
        result = build_result(binary_meta, AuditOutcome(raw_value=1, score=1))
        assert result.display_value == ""

    def test_display_value_defaults_to_raw_value(self, numeric_meta: AuditMeta) -> None:
        """Test a truthy raw value becomes the display value."""
        result = build_result(numeric_meta, AuditOutcome(raw_value=3000, score=0.41))
        assert result.display_value == "3000"

    def test_explicit_display_value(self, numeric_meta: AuditMeta) -> None:
        """Test an explicit display value is rendered as a string."""
        result = build_result(
            numeric_meta,
            AuditOutcome(raw_value=3000.5, score=0.41, display_value="3,000 ms"),
        )
        assert result.display_value == "3,000 ms"

    def test_failure_description_below_one(self, binary_meta: AuditMeta) -> None:
        """Test the failure description is used for failing scores."""
        result = build_result(binary_meta, AuditOutcome(raw_value=1, score=0.5))
        assert result.description == "Does not use HTTPS"

    def test_base_description_at_one(self, binary_meta: AuditMeta) -> None:
        """Test the base description is used for a perfect score."""
        result = build_result(binary_meta, AuditOutcome(raw_value=1, score=1))
        assert result.description == "Uses HTTPS"

    def test_meta_flags_copied(self) -> None:
        """Test informative and manual flags come from metadata."""
        meta = AuditMeta(
            name="manual-check", description="Manual", informative=True, manual=True
        )
        result = build_result(meta, AuditOutcome(raw_value=False))
        assert result.informative is True
        assert result.manual is True

    def test_table_details_carried(self, numeric_meta: AuditMeta) -> None:
        """Test table details are kept on the result."""
        table = build_table_details(
            HEADINGS, [{"url": "https://a.test/x.css", "wastedMs": 120}]
        )
        result = build_result(
            numeric_meta, AuditOutcome(raw_value=120, score=0.9, details=table)
        )
        assert isinstance(result.details, TableDetails)
        assert result.details.items[0]["wastedMs"] == 120

    def test_result_is_immutable(self, binary_meta: AuditMeta) -> None:
        """Test results cannot be modified once built."""
        result = build_result(binary_meta, AuditOutcome(raw_value=True))
        with pytest.raises(ValueError):
            result.score = 0.0  # type: ignore[misc]


class TestBuildErrorResult:
    """Tests for build_error_result."""

    def test_error_result(self, binary_meta: AuditMeta) -> None:
        """Test error results score 0 and carry the debug string."""
        result = build_error_result(binary_meta, "Required artifact missing")

        assert result.raw_value is None
        assert result.error is True
        assert result.debug_string == "Required artifact missing"
        assert result.score == 0.0
        assert result.description == "Does not use HTTPS"
        assert result.score_display_mode == ScoreDisplayMode.BINARY


class TestBuildTableDetails:
    """Tests for build_table_details."""

    def test_empty_rows_drop_headings(self) -> None:
        """Test empty rows produce a fully empty table."""
        summary = {"wastedMs": 0}
        table = build_table_details(HEADINGS, [], summary)

        assert table.model_dump(by_alias=True) == {
            "type": "table",
            "headings": [],
            "items": [],
            "summary": {"wastedMs": 0},
        }

    def test_rows_keep_headings(self) -> None:
        """Test headings are validated and kept with rows."""
        table = build_table_details(HEADINGS, [{"url": "https://a.test/"}])

        assert table.headings[0] == TableHeading(key="url", item_type="url", text="URL")
        assert table.items == [{"url": "https://a.test/"}]
        assert table.summary is None

    def test_items_without_headings_rejected(self) -> None:
        """Test rows without headings are rejected."""
        with pytest.raises(ValueError):
            build_table_details([], [{"url": "https://a.test/"}])


class TestDisplayValueSteps:
    """Tests for the display value resolution steps."""

    @pytest.mark.parametrize(
        ("value", "rendered"),
        [(True, "true"), (False, "false"), (1.0, "1"), (0.5, "0.5"), (12, "12"), ("x", "x")],
    )
    def test_render_value(self, value: object, rendered: str) -> None:
        """Test report rendering of scalars."""
        assert render_value(value) == rendered

    def test_default_display_value_falsy_raw(self) -> None:
        """Test falsy raw values default to an empty display value."""
        assert default_display_value(AuditOutcome(raw_value=0)) == ""
        assert default_display_value(AuditOutcome(raw_value=False)) == ""

    def test_suppress_string_equal_to_score(self) -> None:
        """Test a string display value equal to the score is blanked."""
        assert suppress_redundant_display_value("0.5", 0.5) == ""
        assert suppress_redundant_display_value(True, 1.0) == "true"

    def test_select_description_without_failure_description(self) -> None:
        """Test the base description is used when no alternative exists."""
        meta = AuditMeta(name="x", description="Base")
        assert select_description(meta, 0.0) == "Base"


class TestSerialization:
    """Tests for result serialization."""

    def test_round_trip(self, numeric_meta: AuditMeta) -> None:
        """Test JSON serialization round-trips to an equal result."""
        table = build_table_details(
            HEADINGS,
            [{"url": "https://a.test/app.js", "wastedMs": 850}],
            {"wastedMs": 850},
        )
        result = build_result(
            numeric_meta,
            AuditOutcome(
                raw_value=3120.5,
                score=0.42,
                debug_string="Trace was noisy",
                details=table,
                extended_info={"value": {"timings": [1, 2]}},
            ),
        )

        restored = AuditResult.model_validate_json(result.model_dump_json(by_alias=True))
        assert restored == result

    def test_to_dict_uses_camel_case(self, binary_meta: AuditMeta) -> None:
        """Test the serialized record uses camelCase keys."""
        record = build_result(binary_meta, AuditOutcome(raw_value=True)).to_dict()

        assert record["rawValue"] is True
        assert record["scoreDisplayMode"] == "binary"
        assert record["helpText"] == "All sites should be protected with HTTPS."
        assert "raw_value" not in record


class TestConfiguredDisplayMode:
    """Tests for results built under a configured default display mode."""

    def test_build_result_from_mapping(self, numeric_by_default: None) -> None:
        """Test the configured default applies to results built from mappings."""
        meta = AuditMeta(name="x", description="d")
        result = build_result(meta, {"rawValue": 0.5})
        assert result.score_display_mode == ScoreDisplayMode.NUMERIC

    def test_error_result(self, numeric_by_default: None, binary_meta: AuditMeta) -> None:
        """Test error results follow the configured default too."""
        result = build_error_result(binary_meta, "No trace")
        assert result.score_display_mode == ScoreDisplayMode.NUMERIC
