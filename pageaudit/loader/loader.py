"""Loader for report configuration files."""

from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from pageaudit.core.exceptions import ValidationError
from pageaudit.report.models import ReportConfig

from .parser import YAMLParser

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_model(
    model: type[ModelT], data: Any, file_path: str | None = None
) -> ModelT:
    """Build a pydantic model, converting its errors to ValidationError.

    Raises:
        ValidationError: If the data does not match the model.
    """
    if not isinstance(data, dict):
        raise ValidationError(
            f"Expected a mapping at the top level, got {type(data).__name__}",
            file_path=file_path,
        )
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"{loc}: {error['msg']}")
        error_msg = "Model validation failed:\n  " + "\n  ".join(errors)
        raise ValidationError(error_msg, file_path=file_path) from e


class ReportConfigLoader:
    """Load and validate report configurations from YAML files."""

    def __init__(self):
        self.parser = YAMLParser()

    def load_file(self, file_path: str | Path) -> ReportConfig:
        """Load a report configuration from a YAML file.

        Raises:
            ParseError: If YAML parsing fails
            ValidationError: If validation fails
        """
        data = self.parser.parse_file(file_path)
        return validate_model(ReportConfig, data, str(file_path))

    def load_string(self, content: str) -> ReportConfig:
        """Load a report configuration from a YAML string.

        Raises:
            ParseError: If YAML parsing fails
            ValidationError: If validation fails
        """
        data = self.parser.parse_string(content)
        return validate_model(ReportConfig, data)
