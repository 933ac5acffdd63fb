"""Core module exports."""

from declorder.core.errors import (
    ArtifactError,
    ConfigError,
    DeclOrderError,
    ErrorCode,
    FacilityError,
)
from declorder.core.logging import configure_logging, get_logger

__all__ = [
    # Errors
    "ArtifactError",
    "ConfigError",
    "DeclOrderError",
    "ErrorCode",
    "FacilityError",
    # Logging
    "configure_logging",
    "get_logger",
]
