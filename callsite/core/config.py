"""
callsite Configuration

Handles configuration from environment variables, JSON files, and CLI arguments.
"""

import json
import os
from dataclasses import dataclass, field
from typing import List, Optional

from ..sources.discovery import DEFAULT_EXCLUDE_DIRS, DEFAULT_EXTENSIONS


VALID_OUTPUT_FORMATS = ["text", "json"]
VALID_LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class Config:
    """callsite configuration"""

    # Discovery
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude_dirs: List[str] = field(default_factory=lambda: sorted(DEFAULT_EXCLUDE_DIRS))

    # Reader
    collapse_duplicates: bool = True  # False = one span per occurrence

    # Search
    workers: int = 1  # Thread pool size (1 = sequential)

    # Output
    output_format: str = "text"  # text | json

    # Logging
    log_level: str = "WARNING"
    log_dir: Optional[str] = None  # Write run logs here when set

    @classmethod
    def from_json(cls, json_path: str) -> "Config":
        """Load configuration from JSON file"""
        with open(json_path, "r") as f:
            data = json.load(f)

        defaults = cls()
        return cls(
            extensions=data.get("extensions", defaults.extensions),
            exclude_dirs=data.get("exclude_dirs", defaults.exclude_dirs),
            collapse_duplicates=data.get("collapse_duplicates", True),
            workers=data.get("workers", 1),
            output_format=data.get("output_format", "text"),
            log_level=data.get("log_level", "WARNING").upper(),
            log_dir=data.get("log_dir"),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables"""
        defaults = cls()
        extensions = os.environ.get("CALLSITE_EXTENSIONS")
        exclude_dirs = os.environ.get("CALLSITE_EXCLUDE_DIRS")

        return cls(
            extensions=extensions.split(",") if extensions else defaults.extensions,
            exclude_dirs=exclude_dirs.split(",") if exclude_dirs else defaults.exclude_dirs,
            collapse_duplicates=os.environ.get("CALLSITE_BY_POSITION", "").lower() != "true",
            workers=int(os.environ.get("CALLSITE_WORKERS", "1")),
            output_format=os.environ.get("CALLSITE_OUTPUT", "text"),
            log_level=os.environ.get("CALLSITE_LOG_LEVEL", "WARNING").upper(),
            log_dir=os.environ.get("CALLSITE_LOG_DIR"),
        )

    def merge(self, other: "Config") -> "Config":
        """Merge another config into this one (other takes precedence for non-default values)"""
        defaults = Config()
        for field_name in self.__dataclass_fields__:
            other_val = getattr(other, field_name)
            if other_val is not None and other_val != getattr(defaults, field_name):
                setattr(self, field_name, other_val)
        return self

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors"""
        errors = []

        if not self.extensions:
            errors.append("At least one file extension is required")
        for ext in self.extensions:
            if not ext.startswith("."):
                errors.append(f"Invalid extension (must start with '.'): {ext}")

        if self.workers < 1:
            errors.append(f"workers must be >= 1: {self.workers}")

        if self.output_format not in VALID_OUTPUT_FORMATS:
            errors.append(f"Invalid output_format: {self.output_format}")

        if self.log_level not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log_level: {self.log_level}")

        return errors

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            "extensions": self.extensions,
            "exclude_dirs": self.exclude_dirs,
            "collapse_duplicates": self.collapse_duplicates,
            "workers": self.workers,
            "output_format": self.output_format,
            "log_level": self.log_level,
            "log_dir": self.log_dir,
        }
