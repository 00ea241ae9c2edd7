"""YAML parser with ruamel.yaml for line number tracking."""

from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError

from pageaudit.core.exceptions import ParseError


class YAMLParser:
    """YAML parser reporting syntax errors with line and column."""

    def __init__(self):
        self.yaml = YAML(typ="safe", pure=True)

    def parse_file(self, file_path: str | Path) -> Any:
        """Parse a YAML (or JSON) file.

        Raises:
            ParseError: If the file is missing, empty or malformed.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with file_path.open("r", encoding="utf-8") as f:
                data = self.yaml.load(f)
        except MarkedYAMLError as e:
            raise self._marked_error(e, str(file_path)) from e
        except OSError as e:
            raise ParseError(f"Failed to read YAML file {file_path}: {e}") from e

        if data is None:
            raise ParseError(f"Empty YAML file: {file_path}")
        return data

    def parse_string(self, content: str) -> Any:
        """Parse YAML from a string.

        Raises:
            ParseError: If the content is empty or malformed.
        """
        try:
            data = self.yaml.load(content)
        except MarkedYAMLError as e:
            raise self._marked_error(e) from e

        if data is None:
            raise ParseError("Empty YAML content")
        return data

    @staticmethod
    def _marked_error(
        e: MarkedYAMLError, file_path: str | None = None
    ) -> ParseError:
        mark = e.problem_mark
        return ParseError(
            f"YAML parsing error: {e.problem}",
            line=mark.line + 1 if mark else None,
            column=mark.column + 1 if mark else None,
            file_path=file_path,
        )
