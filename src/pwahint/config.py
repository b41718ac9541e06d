"""Configuration management for pwahint using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILE_NAME = ".pwahint.json"


class OutputFormat(str, Enum):
    """Output format types."""
    TABLE = "table"
    JSON = "json"
    MARKDOWN = "markdown"


class RuleSeverity(str, Enum):
    """Severity attached to findings of a rule."""
    ERROR = "error"
    WARNING = "warning"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class FetchConfig(BaseModel):
    """Content fetching configuration section."""
    timeout: float = 10.0
    user_agent: str = Field(alias="userAgent", default="pwahint/0.1.0")
    follow_redirects: bool = Field(alias="followRedirects", default=True)

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeout must be > 0")
        return v

    model_config = ConfigDict(populate_by_name=True)


class RuleConfig(BaseModel):
    """Per-rule configuration."""
    enabled: bool = True
    severity: RuleSeverity = RuleSeverity.ERROR

    model_config = ConfigDict(use_enum_values=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True)


class PwahintConfig(BaseModel):
    """Complete pwahint configuration model."""
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    rules: dict[str, RuleConfig] = Field(default_factory=dict)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")

    def rule_config(self, name: str) -> RuleConfig:
        """Configuration for a rule, falling back to defaults."""
        return self.rules.get(name) or RuleConfig()


def load_config(config_path: str | Path | None = None) -> PwahintConfig:
    """Load a PwahintConfig.

    An explicit ``config_path`` must exist. Without one, the nearest
    .pwahint.json above the working directory is used, and when there is
    none the built-in defaults apply.

    Raises:
        FileNotFoundError: If ``config_path`` is given but does not exist
        ValueError: If the file is not valid JSON or not a valid configuration
    """
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        config_path = find_config_file()
        if config_path is None:
            return PwahintConfig()

    try:
        config_data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {config_path}: {e}")

    try:
        return PwahintConfig(**config_data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}")


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Nearest .pwahint.json in ``start_dir`` (default: cwd) or any parent."""
    start = Path(start_dir or Path.cwd()).resolve()

    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate

    return None
