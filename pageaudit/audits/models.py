"""Data models for audit metadata, raw outcomes and normalized results."""

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_PASS = "defaultPass"

RawValue = bool | int | float | None


class ScoreDisplayMode(StrEnum):
    """How a score is presented in the report."""

    NUMERIC = "numeric"
    BINARY = "binary"


class ReportRecord(BaseModel):
    """Base for records serialized into the report with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AuditMeta(BaseModel):
    """Static metadata authored once per audit."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique audit identifier", min_length=1)
    description: str = Field(..., description="Description shown when passing")
    failure_description: str | None = Field(
        None, description="Description shown when the audit did not fully pass"
    )
    help_text: str = Field(default="", description="Longer explanation")
    score_display_mode: ScoreDisplayMode | None = Field(
        None, description="Display mode; binary when not declared"
    )
    informative: bool | None = Field(
        None, description="Shown in the report but never fails the category"
    )
    manual: bool | None = Field(None, description="Requires human follow-up")
    group: str | None = Field(None, description="Report group id")
    required_artifacts: tuple[str, ...] = Field(
        default=(), description="Artifacts the audit reads"
    )


class TableHeading(ReportRecord):
    """Column descriptor of a table details payload."""

    key: str = Field(..., description="Row field rendered in this column")
    item_type: str = Field(..., description="Value type, e.g. url or ms")
    text: str = Field(..., description="Column label")


class TableDetails(ReportRecord):
    """Tabular details attached to a result."""

    type: Literal["table"]
    headings: list[TableHeading] = Field(default_factory=list)
    items: list[dict[str, Any]] = Field(default_factory=list)
    summary: dict[str, Any] | None = None

    @model_validator(mode="after")
    def check_headings_and_items(self) -> "TableDetails":
        """Headings and items are either both present or both empty."""
        if bool(self.headings) != bool(self.items):
            raise ValueError("Table headings and items must be empty together")
        return self


class AuditOutcome(BaseModel):
    """Raw outcome produced by an audit for a single page run.

    ``raw_value`` and ``score`` distinguish an absent value from an explicit
    ``None`` through ``model_fields_set``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    raw_value: RawValue = None
    score: RawValue = None
    display_value: str | int | float | bool | None = None
    debug_string: str | None = None
    error: bool | None = None
    details: TableDetails | dict[str, Any] | None = Field(
        None, union_mode="left_to_right"
    )
    extended_info: dict[str, Any] | None = None
    not_applicable: bool | None = None

    @property
    def has_raw_value(self) -> bool:
        """Return whether raw_value was provided, even as None."""
        return "raw_value" in self.model_fields_set

    @property
    def has_score(self) -> bool:
        """Return whether a score override was provided, even as None."""
        return "score" in self.model_fields_set


class AuditResult(ReportRecord):
    """Normalized, immutable result of an audit."""

    score: float = Field(..., description="Score from 0.0 to 1.0", ge=0.0, le=1.0)
    score_display_mode: ScoreDisplayMode
    display_value: str = ""
    raw_value: RawValue
    error: bool | None = None
    debug_string: str | None = None
    details: TableDetails | dict[str, Any] | None = Field(
        None, union_mode="left_to_right"
    )
    extended_info: dict[str, Any] | None = None
    informative: bool | None = None
    manual: bool | None = None
    not_applicable: bool | None = None
    name: str = Field(..., min_length=1)
    description: str
    help_text: str = ""

    @property
    def passed(self) -> bool:
        """Return whether the audit fully passed."""
        return self.score == 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to the flat camelCase record consumed by the report."""
        return self.model_dump(mode="json", by_alias=True)
