"""Statistical models used to score continuous measurements."""

from .distribution import LogNormalDistribution, get_log_normal_distribution

__all__ = [
    "LogNormalDistribution",
    "get_log_normal_distribution",
]
