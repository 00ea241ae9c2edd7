"""Audits: metadata, score normalization and result building."""

from .base import Audit
from .models import (
    DEFAULT_PASS,
    AuditMeta,
    AuditOutcome,
    AuditResult,
    ScoreDisplayMode,
    TableDetails,
    TableHeading,
)
from .registry import AuditNotFoundError, AuditRegistry, get_registry
from .results import build_error_result, build_result, build_table_details
from .scoring import NormalizedScore, compute_log_normal_score, normalize_score

__all__ = [
    "DEFAULT_PASS",
    "Audit",
    "AuditMeta",
    "AuditNotFoundError",
    "AuditOutcome",
    "AuditRegistry",
    "AuditResult",
    "NormalizedScore",
    "ScoreDisplayMode",
    "TableDetails",
    "TableHeading",
    "build_error_result",
    "build_result",
    "build_table_details",
    "compute_log_normal_score",
    "get_registry",
    "normalize_score",
]
