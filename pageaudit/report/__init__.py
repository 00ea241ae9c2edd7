"""Report aggregation and grouping."""

from .aggregator import CategoryAggregator, aggregate_categories, build_report
from .models import (
    AuditRef,
    Category,
    CategoryAudit,
    CategoryDefinition,
    PerformanceGroup,
    Report,
    ReportConfig,
    ReportGroup,
)
from .partitioner import (
    PerfHint,
    PerformancePartitioner,
    PerformanceReport,
    format_milliseconds,
    get_wasted_ms,
    partition_performance_category,
)

__all__ = [
    "AuditRef",
    "Category",
    "CategoryAggregator",
    "CategoryAudit",
    "CategoryDefinition",
    "PerfHint",
    "PerformanceGroup",
    "PerformancePartitioner",
    "PerformanceReport",
    "Report",
    "ReportConfig",
    "ReportGroup",
    "aggregate_categories",
    "build_report",
    "format_milliseconds",
    "get_wasted_ms",
    "partition_performance_category",
]
