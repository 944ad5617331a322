"""
Domain exceptions for the e-Factura core.

Validators report problems as ValidationResult values; the exceptions here
cover the few places that fail outright.
"""

from typing import Any

from efactura.core.entities.validation import ValidationIssue


class EFacturaError(Exception):
    """Base exception for all e-Factura errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvoiceNumberParseError(EFacturaError, ValueError):
    """Invoice number string does not match the series + number pattern."""

    def __init__(self, value: str):
        super().__init__(
            f"Format număr factură invalid: {value!r}",
            code="INVOICE_NUMBER_PARSE_ERROR",
            details={"value": str(value)[:100]},
        )


class InvoiceValidationError(EFacturaError):
    """Invoice failed validation and cannot be issued."""

    def __init__(self, errors: list[ValidationIssue], invoice_number: str | None = None):
        messages = ", ".join(e.message for e in errors)
        super().__init__(
            f"Invoice validation failed: {messages}",
            code="INVOICE_VALIDATION_FAILED",
            details={
                "invoice_number": invoice_number,
                "errors": [e.model_dump() for e in errors],
            },
        )
        self.errors = errors


class ConfigurationError(EFacturaError):
    """Configuration error."""

    pass
