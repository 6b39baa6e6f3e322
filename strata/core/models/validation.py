"""Validation result models shared by catalog and spec checks."""

from enum import Enum

from pydantic import BaseModel, Field


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationIssue(BaseModel):
    """A single problem found while validating a catalog or spec."""

    severity: Severity
    category: str
    location: str = Field(description="Layer/trait path the issue refers to")
    message: str

    def __str__(self) -> str:
        return f"[{self.category}] {self.location}: {self.message}"


class ValidationResult(BaseModel):
    """Outcome of a validation run."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def valid(self) -> bool:
        return not self.errors
