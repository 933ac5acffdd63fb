"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DECLORDER__SECTION__KEY)
3. Project YAML (.declorder/config.yaml)
4. Global YAML (~/.config/declorder/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    DECLORDER__<SECTION>__<KEY>=<VALUE>

Examples:
    DECLORDER__LOGGING__LEVEL=DEBUG
    DECLORDER__LINE_TABLE__MODE=classfile
    DECLORDER__ORDER__SUPER_FIRST=false
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LineTableMode = Literal["auto", "javap", "classfile", "off"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        DECLORDER__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Unresolved-member warnings are emitted at WARNING.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class LineTableConfig(BaseModel):
    """Line-number inspection facility selection.

    Env vars:
        DECLORDER__LINE_TABLE__MODE: auto, javap, classfile or off
        DECLORDER__LINE_TABLE__JAVAP_PATH: javap executable name or path
        DECLORDER__LINE_TABLE__TIMEOUT_SEC: Per-class javap timeout
    """

    mode: LineTableMode = Field(
        default="auto",
        description="auto probes PATH for javap once and otherwise reads class files "
        "directly. off skips straight to the byte scan.",
    )
    javap_path: str = Field(
        default="javap",
        description="javap executable, resolved against PATH.",
    )
    timeout_sec: float = Field(
        default=30.0,
        description="Timeout for a single javap invocation. A timeout counts as "
        "a facility failure for that class.",
    )

    @field_validator("mode", mode="before")
    @classmethod
    def accept_yaml_off(cls, v: object) -> object:
        # YAML 1.1 loads a bare `off` as False
        return "off" if v is False else v

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_sec must be positive, got {v}")
        return v


class ClasspathConfig(BaseModel):
    """Class path used for classes that carry no defining class path.

    Env vars:
        DECLORDER__CLASSPATH__BOOT: JSON list of directories or jars
    """

    boot: list[str] = Field(
        default_factory=list,
        description="Directories and jar/zip archives searched for loader-less classes.",
    )

    @field_validator("boot")
    @classmethod
    def expand_entries(cls, v: list[str]) -> list[str]:
        return [str(Path(entry).expanduser()) for entry in v]


class OrderConfig(BaseModel):
    """Order recovery behaviour.

    Env vars:
        DECLORDER__ORDER__SUPER_FIRST: Place ancestor methods before descendants
        DECLORDER__ORDER__WARN_UNRESOLVED: Log a warning per unresolved method
    """

    super_first: bool = Field(
        default=True,
        description="Ancestor-declared methods precede descendant-declared ones. "
        "false puts the most derived class first.",
    )
    warn_unresolved: bool = Field(
        default=True,
        description="Emit one warning per unresolved method signature.",
    )


class DeclOrderConfig(BaseModel):
    """Root configuration for declorder.

    All settings can be configured via:
    1. Environment variables: DECLORDER__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    line_table: LineTableConfig = Field(default_factory=LineTableConfig)
    classpath: ClasspathConfig = Field(default_factory=ClasspathConfig)
    order: OrderConfig = Field(default_factory=OrderConfig)
