# jsonrescue/core/config.py
"""
Configuration for JSON processing.
Centralizes processor settings, per-request context and environment variables.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import os


class OutputFormat(Enum):
    """Shape of response the caller asked the generator for."""
    JSON = "json"
    TEXT = "text"


DEFAULT_INSIGNIFICANT_STEPS = frozenset({"trim_whitespace", "remove_code_fences"})


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ProcessingContext:
    """Per-request context: who is asking and what shape is expected."""
    resource_name: str = "response"
    output_format: OutputFormat = OutputFormat.JSON
    schema: Any = None  # pydantic model class or type annotation

    @property
    def expects_text(self) -> bool:
        return self.output_format is OutputFormat.TEXT

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        schema_name = None
        if self.schema is not None:
            schema_name = getattr(self.schema, "__name__", repr(self.schema))
        return {
            "resource_name": self.resource_name,
            "output_format": self.output_format.value,
            "schema": schema_name,
        }


@dataclass
class ProcessorConfig:
    """Processor behaviour settings."""
    log_repairs: bool = True
    runlog_path: str | None = None
    insignificant_steps: frozenset = field(
        default_factory=lambda: DEFAULT_INSIGNIFICANT_STEPS
    )

    @classmethod
    def from_env(cls) -> "ProcessorConfig":
        """Load processor configuration from environment variables."""
        return cls(
            log_repairs=_env_flag("JSONRESCUE_LOG_REPAIRS", True),
            runlog_path=os.getenv("JSONRESCUE_RUNLOG") or None,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "log_repairs": self.log_repairs,
            "runlog_path": self.runlog_path,
            "insignificant_steps": sorted(self.insignificant_steps),
        }
