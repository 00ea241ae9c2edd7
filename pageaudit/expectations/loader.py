"""Loader for expectation fixture files."""

from pathlib import Path

from pageaudit.core.exceptions import ValidationError
from pageaudit.loader import YAMLParser, validate_model

from .models import ExpectationSet


def load_expectations(file_path: str | Path) -> list[ExpectationSet]:
    """
    Load expectation sets from a YAML or JSON file.

    The file holds a list of expectation sets, one per audited URL.

    Raises:
        ParseError: If parsing fails
        ValidationError: If an entry is not a valid expectation set
    """
    data = YAMLParser().parse_file(file_path)
    if not isinstance(data, list):
        raise ValidationError(
            "Expectation file must contain a list of expectation sets",
            file_path=str(file_path),
        )
    return [validate_model(ExpectationSet, entry, str(file_path)) for entry in data]
