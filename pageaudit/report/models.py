"""Data models for report configuration and aggregated categories."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from pageaudit.audits.models import AuditResult, ReportRecord


class PerformanceGroup(StrEnum):
    """Groups with dedicated sections in the performance category."""

    METRIC = "perf-metric"
    HINT = "perf-hint"
    INFO = "perf-info"


class ReportGroup(ReportRecord):
    """Descriptor of a report section."""

    id: str = Field(..., min_length=1)
    title: str = Field(..., description="Section title")
    description: str = ""


class AuditRef(BaseModel):
    """Reference from a category definition to an audit."""

    id: str = Field(..., description="Audit name", min_length=1)
    weight: float | None = Field(None, description="Weight in the category", ge=0.0)
    group: str | None = Field(None, description="Overrides the audit's own group")


class CategoryDefinition(BaseModel):
    """Authored definition of a category."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    audits: list[AuditRef] = Field(default_factory=list)

    @field_validator("audits")
    @classmethod
    def validate_unique_audits(cls, v: list[AuditRef]) -> list[AuditRef]:
        """Ensure an audit is referenced at most once per category."""
        seen: set[str] = set()
        for ref in v:
            if ref.id in seen:
                raise ValueError(f"Duplicate audit reference: {ref.id}")
            seen.add(ref.id)
        return v


class ReportConfig(BaseModel):
    """Categories and group descriptors of a report."""

    categories: list[CategoryDefinition] = Field(default_factory=list)
    groups: dict[str, ReportGroup] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def fill_group_ids(cls, data: Any) -> Any:
        """Allow groups to be authored as ``{id: {title: ...}}``."""
        if isinstance(data, dict) and isinstance(data.get("groups"), dict):
            groups = {}
            for group_id, group in data["groups"].items():
                if isinstance(group, dict):
                    group = {"id": group_id, **group}
                groups[group_id] = group
            data = {**data, "groups": groups}
        return data

    @field_validator("categories")
    @classmethod
    def validate_unique_categories(
        cls, v: list[CategoryDefinition]
    ) -> list[CategoryDefinition]:
        """Ensure category ids are unique."""
        ids = [c.id for c in v]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate category ids: {duplicates}")
        return v

    def get_category(self, category_id: str) -> CategoryDefinition | None:
        """Return the category definition with the given id."""
        for category in self.categories:
            if category.id == category_id:
                return category
        return None


class CategoryAudit(ReportRecord):
    """An audit result placed in a category."""

    id: str = Field(..., min_length=1)
    result: AuditResult
    group: str | None = None
    weight: float | None = None


class Category(ReportRecord):
    """A category with its audits in authoring order."""

    id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    score: float | None = Field(None, description="Computed outside the engine")
    audits: list[CategoryAudit] = Field(default_factory=list)


class Report(ReportRecord):
    """Aggregated categories plus the ordered group descriptors."""

    categories: list[Category] = Field(default_factory=list)
    groups: list[ReportGroup] = Field(default_factory=list)

    def get_category(self, category_id: str) -> Category | None:
        """Return the category with the given id."""
        for category in self.categories:
            if category.id == category_id:
                return category
        return None
