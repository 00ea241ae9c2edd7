"""Data models for expected audit values used by comparison tests."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ExpectationSet(BaseModel):
    """Expected audit fields for one audited URL.

    ``audits`` maps an audit name to the fields expected on its serialized
    result. A numeric field may be a literal or a comparison expression
    (``">3"``, ``"<3000"``, ``">=1"``, ``"<=0"``); a ``length`` key compares
    the length of the list it is applied to.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: str = Field(..., min_length=1)
    initial_url: str | None = None
    audits: dict[str, dict[str, Any]] = Field(default_factory=dict)


class Difference(BaseModel):
    """First mismatch found between an actual and an expected value."""

    path: str
    actual: Any = None
    expected: Any = None

    def __str__(self) -> str:
        return f"{self.path}: expected {self.expected!r}, found {self.actual!r}"


class AuditComparison(BaseModel):
    """Outcome of comparing one audit against its expectation."""

    audit: str
    difference: Difference | None = None

    @property
    def passed(self) -> bool:
        """Return whether the audit matched its expectation."""
        return self.difference is None


class ExpectationResult(BaseModel):
    """Comparison outcome for every audit expected on a URL."""

    url: str
    comparisons: list[AuditComparison] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        """Return whether every expected audit matched."""
        return all(c.passed for c in self.comparisons)

    @property
    def failures(self) -> list[AuditComparison]:
        """Return the comparisons that did not match."""
        return [c for c in self.comparisons if not c.passed]
