"""declorder error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Artifact (class file bytes)
- 4xxx: Inspection facility
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Artifact (3xxx)
    ARTIFACT_UNREADABLE = 3001
    ARTIFACT_MALFORMED = 3002

    # Facility (4xxx)
    FACILITY_UNAVAILABLE = 4001
    FACILITY_CLASS_NOT_FOUND = 4002
    FACILITY_FAILED = 4003


@dataclass(frozen=True, slots=True)
class DeclOrderError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'ARTIFACT_UNREADABLE')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(DeclOrderError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ArtifactError(DeclOrderError):
    """Class file could not be read or decoded.

    ``unreadable`` is an environment problem (I/O, corrupt archive) and is
    never swallowed by the order recovery code. ``malformed`` is raised by the
    class file reader and treated as an ordinary inspection failure.
    """

    @classmethod
    def unreadable(cls, location: str, reason: str) -> "ArtifactError":
        return cls(
            code=ErrorCode.ARTIFACT_UNREADABLE,
            message=f"Failed to read class file artifact {location}: {reason}",
            retryable=True,
            details={"location": location, "reason": reason},
        )

    @classmethod
    def malformed(cls, offset: int, reason: str) -> "ArtifactError":
        return cls(
            code=ErrorCode.ARTIFACT_MALFORMED,
            message=f"Malformed class file at byte {offset}: {reason}",
            details={"offset": offset, "reason": reason},
        )


class FacilityError(DeclOrderError):
    """The line-number inspection facility could not describe a class."""

    @classmethod
    def unavailable(cls, facility: str) -> "FacilityError":
        return cls(
            code=ErrorCode.FACILITY_UNAVAILABLE,
            message=f"Inspection facility '{facility}' is not available",
            details={"facility": facility},
        )

    @classmethod
    def class_not_found(cls, facility: str, class_name: str) -> "FacilityError":
        return cls(
            code=ErrorCode.FACILITY_CLASS_NOT_FOUND,
            message=f"{facility} cannot locate class {class_name}",
            details={"facility": facility, "class": class_name},
        )

    @classmethod
    def failed(cls, facility: str, class_name: str, reason: str) -> "FacilityError":
        return cls(
            code=ErrorCode.FACILITY_FAILED,
            message=f"{facility} failed for {class_name}: {reason}",
            details={"facility": facility, "class": class_name, "reason": reason},
        )

