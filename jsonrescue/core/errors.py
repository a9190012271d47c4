# jsonrescue/core/errors.py
"""
Terminal error types raised by the JSON processor.
"""
from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .results import ValidationIssue


class JsonProcessingErrorType(Enum):
    """Kind of terminal processing failure."""
    PARSE = "parse"
    VALIDATION = "validation"


class JsonProcessingError(Exception):
    """
    Content could not be turned into valid, schema-conformant JSON.

    Carries everything needed to reproduce the failure without calling the
    generation backend again: the original input, the best-effort sanitized
    text, the ordered list of applied steps and the low-level cause.
    """

    def __init__(
        self,
        error_type: JsonProcessingErrorType,
        resource_name: str,
        reason: str,
        original_content: str,
        sanitized_content: str | None = None,
        applied_sanitizers: List[str] | None = None,
        underlying_error: BaseException | None = None,
        issues: List["ValidationIssue"] | None = None,
    ):
        self.type = error_type
        self.resource_name = resource_name
        self.reason = reason
        self.original_content = original_content
        self.sanitized_content = (
            sanitized_content if sanitized_content is not None else original_content
        )
        self.applied_sanitizers = list(applied_sanitizers or [])
        self.underlying_error = underlying_error
        self.issues = list(issues or [])
        super().__init__(f"{resource_name}: {reason}")

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> Dict[str, Any]:
        """Summary for logs; raw content is reported by length only."""
        return {
            "type": self.type.value,
            "message": self.message,
            "original_length": len(self.original_content),
            "sanitized_length": len(self.sanitized_content),
            "applied_sanitizers": self.applied_sanitizers,
            "underlying_error": str(self.underlying_error) if self.underlying_error else None,
            "issues": [issue.to_dict() for issue in self.issues],
        }


class BadResponseContentError(Exception):
    """The payload is the wrong host type; no repair can fix it."""

    def __init__(self, resource_name: str, content: Any, reason: str | None = None):
        self.resource_name = resource_name
        self.content_type = type(content).__name__
        reason = reason or f"expected text content but got {self.content_type}"
        super().__init__(f"{resource_name}: {reason}")
