"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config() (CLI flags)
2. Environment variables (OPSPRUNE__SECTION__KEY)
3. Project YAML (<project root>/.opsprune.yaml)
4. Global YAML (~/.config/opsprune/config.yaml)
5. Built-in defaults (this file)

Examples:
    OPSPRUNE__LOGGING__LEVEL=DEBUG
    OPSPRUNE__APPLY__ON_EXISTING=merge
    OPSPRUNE__SCAN__CLIENT_FACTORIES='["generateClient", "generateServerClient"]'
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
OnExisting = Literal["skip", "overwrite", "merge"]

DEFAULT_INCLUDE_GLOBS: tuple[str, ...] = ("**/*.ts", "**/*.tsx")


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

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
        OPSPRUNE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO reports every model decision, DEBUG every file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


class ScanConfig(BaseModel):
    """Usage scanner configuration.

    Env vars:
        OPSPRUNE__SCAN__CLIENT_FACTORIES: JSON list of factory function names
        OPSPRUNE__SCAN__CLIENT_TYPE_NAMES: JSON list of typed-client type names
        OPSPRUNE__SCAN__INCLUDE: JSON list of file globs to analyse
    """

    client_factories: list[str] = Field(
        default_factory=lambda: ["generateClient"],
        description="Callee names whose direct call produces a data client.",
    )
    client_type_names: list[str] = Field(
        default_factory=list,
        description="Type names (e.g. V6Client) whose annotated variables and parameters "
        "are treated as clients. Empty keeps type annotations out of the analysis.",
    )
    include: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INCLUDE_GLOBS),
        description="Globs restricting which project files are scanned for calls.",
    )

    @field_validator("client_factories")
    @classmethod
    def validate_factories(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one client factory name is required")
        return v


class ApplyConfig(BaseModel):
    """Schema patcher configuration.

    Env vars:
        OPSPRUNE__APPLY__ON_EXISTING: skip | overwrite | merge
        OPSPRUNE__APPLY__BACKUP: Write a backup copy before patching
        OPSPRUNE__APPLY__BACKUP_SUFFIX: Suffix appended to the backup path
    """

    on_existing: OnExisting = "skip"
    backup: bool = True
    backup_suffix: str = Field(default=".bak", min_length=1)


class OpsPruneConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    apply: ApplyConfig = Field(default_factory=ApplyConfig)
