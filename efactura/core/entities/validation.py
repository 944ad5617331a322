"""Validation outcome entities."""

from typing import Any

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single blocking violation."""

    field: str  # Dot path like "items.0.subtotal" or "customer.address.county"
    message: str
    code: str  # Machine-readable code like "CALC_ERROR", "INVALID_CIF"


class ValidationWarning(BaseModel):
    """Informational finding that never affects validity."""

    field: str
    message: str


class ValidationResult(BaseModel):
    """
    Outcome of invoice validation.

    ``valid`` is true iff ``errors`` is empty; warnings are advisory.
    """

    valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationWarning] = Field(default_factory=list)

    @classmethod
    def from_findings(
        cls,
        errors: list[ValidationIssue],
        warnings: list[ValidationWarning] | None = None,
    ) -> "ValidationResult":
        return cls(valid=not errors, errors=errors, warnings=warnings or [])

    @property
    def error_codes(self) -> list[str]:
        return [e.code for e in self.errors]

    @property
    def errors_count(self) -> int:
        return len(self.errors)

    @property
    def warnings_count(self) -> int:
        return len(self.warnings)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return self.model_dump(mode="json")
