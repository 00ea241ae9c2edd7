"""Loading of report configurations and fixture files."""

from .loader import ReportConfigLoader, validate_model
from .parser import YAMLParser

__all__ = [
    "ReportConfigLoader",
    "YAMLParser",
    "validate_model",
]
