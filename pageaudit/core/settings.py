"""Page audit configuration management.

Configuration is loaded from multiple sources with the following
priority (highest to lowest):
1. Explicit overrides passed to get_settings()
2. Environment variables (with PAGEAUDIT_ prefix)
3. Configuration files (pageaudit.config.yaml)
4. Default values

Example usage:
    from pageaudit.core.settings import get_settings

    settings = get_settings()
    print(settings.report.hint_scale_step_ms)

Environment variable support:
    PAGEAUDIT_LOGGING__LEVEL=DEBUG
    PAGEAUDIT_SCORING__DEFAULT_DISPLAY_MODE=numeric
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pageaudit.audits.models import ScoreDisplayMode

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ["pageaudit.config.yaml", "pageaudit.config.yml"]

_SECTIONS = ("logging", "scoring", "report")


def _find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file by searching current directory and parents.

    Args:
        start_dir: Directory to start search from.
            Defaults to current working directory.

    Returns:
        Path to config file if found, None otherwise.
    """
    search_dir = start_dir or Path.cwd()

    # Limit search depth to prevent infinite loops
    for _ in range(10):
        for filename in CONFIG_FILE_NAMES:
            config_path = search_dir / filename
            if config_path.exists():
                return config_path

        parent = search_dir.parent
        if parent == search_dir:
            break
        search_dir = parent

    return None


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Unreadable or malformed files are logged and treated as empty.
    """
    try:
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
            return config if isinstance(config, dict) else {}
    except yaml.YAMLError as e:
        logger.warning("Failed to parse config file %s: %s", config_path, e)
        return {}
    except OSError as e:
        logger.warning("Failed to read config file %s: %s", config_path, e)
        return {}


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_output: bool = Field(
        default=False,
        description="Output logs in JSON format",
    )
    file: str | None = Field(
        default=None,
        description="Log file path (optional)",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v


class ScoringSettings(BaseSettings):
    """Score normalization settings."""

    default_display_mode: ScoreDisplayMode = Field(
        default=ScoreDisplayMode.BINARY,
        description="Display mode used when an audit does not declare one",
    )


class ReportSettings(BaseSettings):
    """Report grouping settings."""

    performance_category_id: str = Field(
        default="performance",
        min_length=1,
        description="Category partitioned into metrics/hints/diagnostics",
    )
    hint_scale_step_ms: int = Field(
        default=1000,
        ge=1,
        description="Hint bar scale is the largest estimate rounded up to this step",
    )
    millisecond_granularity: int = Field(
        default=10,
        ge=1,
        description="Granularity used when formatting hint estimates",
    )


class PageAuditSettings(BaseSettings):
    """Main page audit configuration settings.

    Example:
        settings = PageAuditSettings(_skip_file_loading=True)
        print(settings.scoring.default_display_mode)
    """

    model_config = SettingsConfigDict(
        env_prefix="PAGEAUDIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    report: ReportSettings = Field(default_factory=ReportSettings)

    @model_validator(mode="before")
    @classmethod
    def load_from_config_file(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Merge the discovered YAML config file under explicit values."""
        if data.get("_skip_file_loading"):
            data.pop("_skip_file_loading", None)
            return data

        config_path = _find_config_file()
        if not config_path:
            return data

        file_config = _load_yaml_config(config_path)
        if not file_config:
            return data

        logger.debug("Loaded configuration from %s", config_path)
        merged = {**file_config, **data}
        for section in _SECTIONS:
            if isinstance(file_config.get(section), dict):
                explicit = data.get(section)
                merged[section] = {
                    **file_config[section],
                    **(explicit if isinstance(explicit, dict) else {}),
                }
        return merged

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to a plain dictionary."""
        return self.model_dump(mode="json")


def get_settings(
    config_file: Path | None = None,
    **overrides: Any,
) -> PageAuditSettings:
    """Get a settings instance.

    Args:
        config_file: Optional explicit path to configuration file.
        **overrides: Explicit configuration overrides.

    Returns:
        Configured PageAuditSettings instance.
    """
    if config_file and config_file.exists():
        file_config = _load_yaml_config(config_file)
        merged = {**file_config, **overrides, "_skip_file_loading": True}
        return PageAuditSettings(**merged)

    return PageAuditSettings(**overrides)


@lru_cache
def get_cached_settings() -> PageAuditSettings:
    """Get cached settings instance.

    The cache can be cleared with get_cached_settings.cache_clear().
    """
    return get_settings()


def generate_example_config(output_path: Path | None = None) -> str:
    """Generate an example configuration file.

    Args:
        output_path: Optional path to write example config file.

    Returns:
        Example configuration as YAML string.
    """
    example = """\
# Page audit configuration
# Environment variables override these values with the PAGEAUDIT_ prefix
# Example: PAGEAUDIT_LOGGING__LEVEL=DEBUG

logging:
  level: INFO              # DEBUG, INFO, WARNING, ERROR, CRITICAL
  json_output: false
  file: null               # Optional log file path

scoring:
  default_display_mode: binary   # numeric or binary

report:
  performance_category_id: performance
  hint_scale_step_ms: 1000
  millisecond_granularity: 10
"""

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            f.write(example)
        logger.info("Generated example config at %s", output_path)

    return example
