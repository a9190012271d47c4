# jsonrescue/core/results.py
"""
Result records produced by sanitizers, the pipeline, the validator and the
processor.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class SanitizationStep:
    """Record of one pipeline stage run against one input."""
    name: str
    changed: bool
    description: str | None = None
    diagnostics: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "changed": self.changed,
            "description": self.description,
            "diagnostics": list(self.diagnostics),
        }


@dataclass
class PipelineResult:
    """Output of a full pipeline run."""
    content: str
    steps: List[SanitizationStep] = field(default_factory=list)

    @property
    def applied(self) -> List[str]:
        """Names of the steps that changed the text, in run order."""
        return [step.name for step in self.steps if step.changed]

    @property
    def changed(self) -> bool:
        return any(step.changed for step in self.steps)

    @property
    def diagnostics(self) -> List[str]:
        return [d for step in self.steps if step.changed for d in step.diagnostics]


@dataclass
class ParsingOutcome:
    """Successful parse artifact of one processor tier."""
    parsed: Any
    steps: List[str] = field(default_factory=list)
    resilient_diagnostics: str | None = None
    content: str | None = None  # the text that parsed


@dataclass(frozen=True)
class ValidationIssue:
    """One schema violation: where it happened and why."""
    path: Tuple[Any, ...]
    message: str

    @property
    def location(self) -> str:
        return ".".join(str(part) for part in self.path) or "<root>"

    def to_dict(self) -> Dict[str, Any]:
        return {"path": list(self.path), "message": self.message}

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


@dataclass
class ValidationResult:
    """Either the validated value or the list of issues, never both."""
    success: bool
    data: Any = None
    issues: List[ValidationIssue] = field(default_factory=list)
    transforms: List[str] = field(default_factory=list)  # repairs needed to pass

    @classmethod
    def ok(cls, data: Any, transforms: List[str] | None = None) -> "ValidationResult":
        return cls(success=True, data=data, transforms=list(transforms or []))

    @classmethod
    def failed(cls, issues: List[ValidationIssue]) -> "ValidationResult":
        return cls(success=False, issues=list(issues))

    def summary(self) -> str:
        return "; ".join(str(issue) for issue in self.issues)


@dataclass
class ProcessingResult:
    """Validated value plus the repair history that produced it."""
    data: Any
    tier: str
    steps: List[str] = field(default_factory=list)
    diagnostics: str | None = None
    transforms: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tier": self.tier,
            "steps": self.steps,
            "diagnostics": self.diagnostics,
            "transforms": self.transforms,
        }
