"""
Pydantic settings models for domlens.

All configuration is defined here with defaults matching the
behaviour of the document parser when no file is supplied.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_MAX_DEPTH = 100
DEFAULT_MAX_TEXT_LENGTH = 10000


class ParserSettings(BaseModel):
    """Tree and region extraction configuration."""

    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        le=10000,
        description="Maximum element depth the tree extractor descends to",
    )
    include_images: bool = Field(
        default=True,
        description="Collect ImageInfo entries for img elements",
    )
    include_scripts: bool = Field(
        default=False,
        description="Keep script elements in the node tree",
    )
    include_styles: bool = Field(
        default=False,
        description="Keep style elements in the node tree",
    )
    text_only: bool = Field(
        default=False,
        description="Replace the node tree by the body's text content",
    )
    preserve_whitespace: bool = Field(
        default=False,
        description="Keep raw text for non-blank text nodes instead of trimming",
    )
    strict_mode: bool = Field(
        default=False,
        description="Turn an invalid validation report into a failed result",
    )
    validate_result: bool = Field(
        default=True,
        alias="validate",
        description="Attach a validation report to successful results",
    )
    extract_navigation: bool = Field(
        default=True,
        description="Locate the navigation region",
    )
    extract_headers: bool = Field(
        default=True,
        description="Locate the header region",
    )
    extract_footers: bool = Field(
        default=True,
        description="Locate the footer region",
    )
    extract_sidebars: bool = Field(
        default=True,
        description="Locate the sidebar region",
    )
    extract_articles: bool = Field(
        default=True,
        description="Collect article regions",
    )

    model_config = {
        "populate_by_name": True,
    }


class ValidatorSettings(BaseModel):
    """Structural validation configuration."""

    strict: bool = Field(
        default=False,
        description="Report a missing structure root as a warning",
    )
    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        le=10000,
        description="Node depth beyond which validation reports an error",
    )
    max_text_length: int = Field(
        default=DEFAULT_MAX_TEXT_LENGTH,
        ge=1,
        description="Text length beyond which validation reports a warning",
    )


class FormatterSettings(BaseModel):
    """Output rendering configuration."""

    default_format: Literal["json", "text", "html", "xml"] = Field(
        default="json",
        description="Format used when the caller does not name one",
    )
    indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="JSON indentation width",
    )
    sort_keys: bool = Field(
        default=False,
        description="Sort JSON object keys",
    )
    exclude_empty: bool = Field(
        default=False,
        description="Drop null, empty string, empty list and empty object values from JSON",
    )


class CacheSettings(BaseModel):
    """Fingerprint cache configuration."""

    enabled: bool = Field(
        default=True,
        description="Whether parse results are cached",
    )
    ttl_seconds: float = Field(
        default=3600,
        ge=0,
        description="Default entry lifetime in seconds. 0 means entries never expire.",
    )
    max_size: int = Field(
        default=100,
        ge=1,
        le=100000,
        description="Maximum number of cached results",
    )
    hash_algorithm: Literal["sha256", "md5", "simple"] = Field(
        default="sha256",
        description="Fingerprint hash. 'simple' is a weak 32-bit rolling hash.",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Minimum logging level",
    )
    format: str = Field(
        default="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        description="Log message format string",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Date format for log timestamps",
    )
    file_path: Path | None = Field(
        default=None,
        description="Path to log file. None means console only.",
    )
    max_file_size_mb: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum log file size before rotation",
    )
    backup_count: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Number of backup log files to keep",
    )
    log_to_console: bool = Field(
        default=True,
        description="Whether to output logs to console",
    )

    @field_validator("file_path", mode="before")
    @classmethod
    def convert_file_path(cls, v: str | Path | None) -> Path | None:
        """Convert string paths to Path objects."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v


class Settings(BaseModel):
    """
    Root configuration model containing all subsystem settings.

    Settings are loaded from YAML with environment variable overrides.
    """

    parser: ParserSettings = Field(
        default_factory=ParserSettings,
        description="Extraction settings",
    )
    validator: ValidatorSettings = Field(
        default_factory=ValidatorSettings,
        description="Validation settings",
    )
    formatter: FormatterSettings = Field(
        default_factory=FormatterSettings,
        description="Rendering settings",
    )
    cache: CacheSettings = Field(
        default_factory=CacheSettings,
        description="Fingerprint cache settings",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    model_config = {
        "extra": "forbid",
        "validate_default": True,
    }
