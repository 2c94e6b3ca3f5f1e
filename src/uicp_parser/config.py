"""Runtime configuration for the UICP parser.

Settings are read from environment variables; every value has a default so
that the parser works without any configuration.
"""

import os
from collections.abc import Mapping
from typing import Optional

from pydantic import Field, field_validator

from uicp_parser.models.base import ModelBase


DEFAULT_CATALOG_TTL_SECONDS = 300.0
DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ParserSettings(ModelBase):
    """Validated parser settings.

    Attributes:
        catalog_source: Default catalog location (file path or URL).
        catalog_ttl_seconds: How long a loaded catalog stays cached.
        components_package: Base package for dynamically imported components.
        fetch_timeout_seconds: Timeout for remote catalog fetches.
        log_level: Level used by setup_logging when none is passed.
    """

    catalog_source: Optional[str] = Field(
        default=None, description="Default catalog location (file path or URL)."
    )
    catalog_ttl_seconds: float = Field(
        default=DEFAULT_CATALOG_TTL_SECONDS,
        ge=0,
        description="How long a loaded catalog stays cached.",
    )
    components_package: Optional[str] = Field(
        default=None,
        description="Base package for dynamically imported components.",
    )
    fetch_timeout_seconds: float = Field(
        default=DEFAULT_FETCH_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout for remote catalog fetches.",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Level used by setup_logging when none is passed.",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return value

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "ParserSettings":
        """Builds settings from UICP_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ.

        Raises:
            pydantic.ValidationError: If a value is malformed or out of range.
        """
        source = os.environ if environ is None else environ

        values = {}
        catalog_source = source.get("UICP_CATALOG_SOURCE", "").strip()
        if catalog_source:
            values["catalog_source"] = catalog_source
        components_package = source.get("UICP_COMPONENTS_PACKAGE", "").strip()
        if components_package:
            values["components_package"] = components_package
        ttl = source.get("UICP_CATALOG_TTL_SECONDS", "").strip()
        if ttl:
            values["catalog_ttl_seconds"] = ttl
        timeout = source.get("UICP_FETCH_TIMEOUT_SECONDS", "").strip()
        if timeout:
            values["fetch_timeout_seconds"] = timeout
        log_level = source.get("UICP_LOG_LEVEL", "").strip()
        if log_level:
            values["log_level"] = log_level

        return cls(**values)
