"""
Pydantic model for application configuration.
Provides validation for all run options.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MAX_REDIRECTS = 20
DEFAULT_TIMEOUT = 90


class DownloadConfig(BaseModel):
    """A validated configuration model for a download run."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Output
    directory_prefix: str = "."
    output_document: Optional[str] = None
    overwrite: bool = False
    mtimes: bool = False

    # Behaviour
    quiet: bool = False
    verbose: bool = False
    continue_on_errors: bool = False

    # Transport
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    timeout: int = DEFAULT_TIMEOUT

    # Internal fields not loaded from INI file
    source_urls: list[str] = Field(default_factory=list, repr=False)

    @field_validator("directory_prefix")
    @classmethod
    def validate_directory_prefix(cls, v: str) -> str:
        """An empty prefix means the current directory."""
        return v or "."

    @field_validator("output_document")
    @classmethod
    def validate_output_document(cls, v: Optional[str]) -> Optional[str]:
        """Treats an empty output document as not given."""
        return v or None

    @field_validator("max_redirects")
    @classmethod
    def validate_max_redirects(cls, v: int) -> int:
        """Ensures a sane redirect hop limit."""
        if v < 1 or v > 100:
            raise ValueError("Max redirects must be between 1 and 100.")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Timeout must be at least 1 second.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that may appear in the INI file."""
        internal_fields = {"source_urls", "output_document"}
        return {key for key in cls.model_fields if key not in internal_fields}
