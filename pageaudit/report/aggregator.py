"""Aggregation of audit results into report categories."""

from collections.abc import Mapping, Sequence

from pageaudit.audits.models import AuditMeta, AuditResult
from pageaudit.core.exceptions import ConfigurationError
from pageaudit.core.logging import get_logger

from .models import (
    AuditRef,
    Category,
    CategoryAudit,
    CategoryDefinition,
    Report,
    ReportConfig,
)

logger = get_logger(__name__)


class CategoryAggregator:
    """
    Joins category definitions with audit metadata and produced results.

    Each category keeps the authoring order of its audit references. The
    group of an entry is the reference's group when set, otherwise the
    audit's own ``AuditMeta.group``. Weights are passed through untouched;
    category scores are computed elsewhere.
    """

    def __init__(
        self,
        all_meta: Sequence[AuditMeta],
        results: Mapping[str, AuditResult],
    ) -> None:
        """
        Initialize the aggregator.

        Args:
            all_meta: Metadata of every audit that may be referenced.
            results: Produced results keyed by audit name.

        Raises:
            ConfigurationError: If two audits share a name.
        """
        self._meta: dict[str, AuditMeta] = {}
        for meta in all_meta:
            if meta.name in self._meta:
                raise ConfigurationError(
                    f"Duplicate audit metadata: {meta.name}", audit_name=meta.name
                )
            self._meta[meta.name] = meta
        self._results = results

    def _resolve_group(self, ref: AuditRef) -> str | None:
        if ref.group is not None:
            return ref.group
        meta = self._meta.get(ref.id)
        return meta.group if meta is not None else None

    def aggregate_category(self, definition: CategoryDefinition) -> Category:
        """
        Build one category from its definition.

        Raises:
            ConfigurationError: If a referenced audit produced no result.
        """
        audits: list[CategoryAudit] = []
        for ref in definition.audits:
            result = self._results.get(ref.id)
            if result is None:
                raise ConfigurationError(
                    f"Category {definition.id} references audit {ref.id}, "
                    "which produced no result",
                    category_id=definition.id,
                    audit_name=ref.id,
                )
            audits.append(
                CategoryAudit(
                    id=ref.id,
                    result=result,
                    group=self._resolve_group(ref),
                    weight=ref.weight,
                )
            )

        logger.debug(
            "category_aggregated", category=definition.id, audits=len(audits)
        )
        return Category(
            id=definition.id,
            name=definition.name,
            description=definition.description,
            audits=audits,
        )

    def aggregate(self, definitions: Sequence[CategoryDefinition]) -> list[Category]:
        """Build every category in definition order."""
        return [self.aggregate_category(d) for d in definitions]


def aggregate_categories(
    all_meta: Sequence[AuditMeta],
    results: Mapping[str, AuditResult],
    definitions: Sequence[CategoryDefinition],
) -> list[Category]:
    """
    Aggregate produced results into categories.

    Args:
        all_meta: Metadata of every audit.
        results: Produced results keyed by audit name.
        definitions: Category definitions in report order.

    Returns:
        Categories in definition order, audits in authoring order.

    Raises:
        ConfigurationError: If a referenced audit produced no result.
    """
    return CategoryAggregator(all_meta, results).aggregate(definitions)


def build_report(
    config: ReportConfig,
    all_meta: Sequence[AuditMeta],
    results: Mapping[str, AuditResult],
) -> Report:
    """
    Build the full report from a report configuration.

    Raises:
        ConfigurationError: If a referenced audit produced no result, or an
            audit is placed in a group the configuration does not declare.
    """
    categories = aggregate_categories(all_meta, results, config.categories)

    for category in categories:
        for entry in category.audits:
            if entry.group is not None and entry.group not in config.groups:
                raise ConfigurationError(
                    f"Audit {entry.id} in category {category.id} uses "
                    f"undeclared group {entry.group}",
                    category_id=category.id,
                    audit_name=entry.id,
                )

    return Report(categories=categories, groups=list(config.groups.values()))
