"""opsprune error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Project (tsconfig, file discovery)
- 4xxx: Usage map
- 5xxx: Schema (resource file structure)
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003
    CONFIG_FILE_NOT_FOUND = 2004

    # Project (3xxx)
    TSCONFIG_NOT_FOUND = 3001
    TSCONFIG_PARSE_ERROR = 3002

    # Usage map (4xxx)
    USAGE_MAP_NOT_FOUND = 4001
    USAGE_MAP_PARSE_ERROR = 4002
    USAGE_MAP_INVALID_SHAPE = 4003
    USAGE_MAP_UNREADABLE = 4004

    # Schema (5xxx)
    SCHEMA_NOT_FOUND = 5001
    SCHEMA_ARG_NOT_OBJECT = 5002
    RESOURCE_NOT_FOUND = 5003

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class OpsPruneError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'SCHEMA_NOT_FOUND')."""
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


class ConfigError(OpsPruneError):
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
    def missing_required(cls, field: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=f"Missing required config field: {field}",
            details={"field": field},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ProjectError(OpsPruneError):
    """tsconfig loading errors."""

    @classmethod
    def tsconfig_not_found(cls, path: str) -> "ProjectError":
        return cls(
            code=ErrorCode.TSCONFIG_NOT_FOUND,
            message=f"tsconfig not found: {path}",
            details={"path": path},
        )

    @classmethod
    def tsconfig_parse_error(cls, path: str, reason: str) -> "ProjectError":
        return cls(
            code=ErrorCode.TSCONFIG_PARSE_ERROR,
            message=f"Failed to parse tsconfig at {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class UsageMapError(OpsPruneError):
    """Usage-map file errors."""

    @classmethod
    def file_not_found(cls, path: str) -> "UsageMapError":
        return cls(
            code=ErrorCode.USAGE_MAP_NOT_FOUND,
            message=f"Usage map not found: {path}",
            details={"path": path},
        )

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "UsageMapError":
        return cls(
            code=ErrorCode.USAGE_MAP_PARSE_ERROR,
            message=f"Failed to parse usage map at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_shape(cls, path: str, reason: str) -> "UsageMapError":
        return cls(
            code=ErrorCode.USAGE_MAP_INVALID_SHAPE,
            message=f"Usage map at {path} is not an object of string arrays: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "UsageMapError":
        return cls(
            code=ErrorCode.USAGE_MAP_UNREADABLE,
            message=f"Cannot read usage map at {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class SchemaError(OpsPruneError):
    """Structural errors in the schema resource file. Always fatal."""

    @classmethod
    def schema_not_found(cls, path: str) -> "SchemaError":
        return cls(
            code=ErrorCode.SCHEMA_NOT_FOUND,
            message="schema() not found",
            details={"path": path},
        )

    @classmethod
    def schema_arg_not_object(cls, path: str) -> "SchemaError":
        return cls(
            code=ErrorCode.SCHEMA_ARG_NOT_OBJECT,
            message="schema() arg is not object",
            details={"path": path},
        )

    @classmethod
    def resource_not_found(cls, path: str) -> "SchemaError":
        return cls(
            code=ErrorCode.RESOURCE_NOT_FOUND,
            message=f"Resource file not found: {path}",
            details={"path": path},
        )


class InternalError(OpsPruneError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
