"""Config module exports."""

from declorder.config.loader import load_config
from declorder.config.models import (
    ClasspathConfig,
    DeclOrderConfig,
    LineTableConfig,
    LoggingConfig,
    OrderConfig,
)

__all__ = [
    "load_config",
    "ClasspathConfig",
    "DeclOrderConfig",
    "LineTableConfig",
    "LoggingConfig",
    "OrderConfig",
]
