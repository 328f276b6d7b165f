"""Scan configuration."""

import re
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ValidationError, field_validator

from .catalog import DEFAULT_DESCRIPTIONS_DIR
from .errors import ConfigError

REPORT_FORMATS = ("markdown", "json")


class ScanConfig(BaseModel):
    """Validated settings for one scan run."""
    project_path: Path = Path(".")
    output_file: Optional[Path] = None
    format: str = "markdown"
    descriptions_dir: Path = DEFAULT_DESCRIPTIONS_DIR
    ignore_patterns: List[str] = []
    verbose: bool = False

    @field_validator("project_path")
    @classmethod
    def _path_exists(cls, value: Path) -> Path:
        if not value.exists():
            raise ValueError(f"Path does not exist: {value}")
        return value

    @field_validator("format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        value = value.lower()
        if value == "md":
            value = "markdown"
        if value not in REPORT_FORMATS:
            raise ValueError(f"Unknown report format '{value}', expected one of {', '.join(REPORT_FORMATS)}")
        return value

    @field_validator("ignore_patterns")
    @classmethod
    def _valid_patterns(cls, value: List[str]) -> List[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid ignore pattern '{pattern}': {e}")
        return value

    @classmethod
    def build(cls, **kwargs: Any) -> "ScanConfig":
        """
        Create a configuration, dropping unset (None) options.

        Raises:
            ConfigError: If validation fails
        """
        values = {k: v for k, v in kwargs.items() if v is not None}
        try:
            return cls(**values)
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise ConfigError(messages) from e
