"""Tests for config/models.py module.

Covers:
- LogOutputConfig model
- LoggingConfig model
- LineTableConfig model
- ClasspathConfig model
- OrderConfig model
- DeclOrderConfig root model
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from declorder.config.models import (
    ClasspathConfig,
    DeclOrderConfig,
    LineTableConfig,
    LoggingConfig,
    LogOutputConfig,
    OrderConfig,
)


class TestLogOutputConfig:
    """Tests for LogOutputConfig model."""

    def test_defaults(self) -> None:
        """Default values."""
        config = LogOutputConfig()
        assert config.format == "console"
        assert config.destination == "stderr"
        assert config.level is None

    def test_absolute_path_destination(self) -> None:
        """Absolute path is valid destination."""
        config = LogOutputConfig(destination="/var/log/declorder.log")
        assert config.destination == "/var/log/declorder.log"

    def test_relative_path_fails(self) -> None:
        """Relative path is rejected."""
        with pytest.raises(ValidationError, match="absolute path"):
            LogOutputConfig(destination="logs/app.log")


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_defaults(self) -> None:
        """Only warnings and above by default."""
        config = LoggingConfig()
        assert config.level == "WARNING"
        assert len(config.outputs) == 1

    def test_invalid_level(self) -> None:
        """Invalid level is rejected."""
        with pytest.raises(ValidationError):
            LoggingConfig(level="TRACE")  # type: ignore[arg-type]


class TestLineTableConfig:
    """Tests for LineTableConfig model."""

    def test_defaults(self) -> None:
        """Default values."""
        config = LineTableConfig()
        assert config.mode == "auto"
        assert config.javap_path == "javap"
        assert config.timeout_sec == 30.0

    @pytest.mark.parametrize("mode", ["auto", "javap", "classfile", "off"])
    def test_modes(self, mode: str) -> None:
        """All facility modes are accepted."""
        assert LineTableConfig(mode=mode).mode == mode  # type: ignore[arg-type]

    def test_false_means_off(self) -> None:
        """YAML's boolean reading of `off` still selects the off mode."""
        assert LineTableConfig(mode=False).mode == "off"  # type: ignore[arg-type]

    def test_unknown_mode(self) -> None:
        """Unknown mode is rejected."""
        with pytest.raises(ValidationError):
            LineTableConfig(mode="asm")  # type: ignore[arg-type]

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_non_positive_timeout(self, timeout: float) -> None:
        """Timeout must be positive."""
        with pytest.raises(ValidationError, match="positive"):
            LineTableConfig(timeout_sec=timeout)


class TestClasspathConfig:
    """Tests for ClasspathConfig model."""

    def test_defaults(self) -> None:
        """No boot class path by default."""
        assert ClasspathConfig().boot == []

    def test_expands_user(self) -> None:
        """Entries starting with ~ are expanded."""
        config = ClasspathConfig(boot=["~/lib/rt.jar", "/opt/classes"])
        assert config.boot == [str(Path("~/lib/rt.jar").expanduser()), "/opt/classes"]


class TestOrderConfig:
    """Tests for OrderConfig model."""

    def test_defaults(self) -> None:
        """Ancestors first and warnings on."""
        config = OrderConfig()
        assert config.super_first is True
        assert config.warn_unresolved is True


class TestDeclOrderConfig:
    """Tests for DeclOrderConfig root model."""

    def test_defaults(self) -> None:
        """All sections are populated."""
        config = DeclOrderConfig()
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.line_table, LineTableConfig)
        assert isinstance(config.classpath, ClasspathConfig)
        assert isinstance(config.order, OrderConfig)

    def test_from_dict(self) -> None:
        """Nested dicts validate into sections."""
        config = DeclOrderConfig.model_validate(
            {"line_table": {"mode": "classfile"}, "order": {"super_first": False}}
        )
        assert config.line_table.mode == "classfile"
        assert config.order.super_first is False
