"""
Validation Result Models

Validation never raises on its own. It returns a tagged result, and the
caller decides what to do with it before anything is persisted.
"""

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        pattern="^(missing|invalid_value|invalid_format)$",
        description="Kind of issue"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """Outcome of validating one request body."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def first_message(self) -> str:
        """Message reported to the client when validation fails."""
        return self.issues[0].message if self.issues else ""

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls()
