"""
Invoice validation pipeline.

Schema rules run first; business rules run only on schema-valid invoices,
since the arithmetic checks assume well-formed data.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from efactura.config import get_logger, get_settings
from efactura.core.entities.invoice import Invoice
from efactura.core.entities.validation import ValidationIssue, ValidationResult
from efactura.core.services.business_rules import BusinessRuleValidator
from efactura.core.services.schema_validator import SchemaValidator

logger = get_logger(__name__)


def _parse_issues(exc: ValidationError) -> list[ValidationIssue]:
    """Turn pydantic parse failures into schema issues."""
    issues = []
    for error in exc.errors():
        issues.append(
            ValidationIssue(
                field=".".join(str(part) for part in error["loc"]) or "invoice",
                message=error["msg"],
                code="INVALID_TYPE",
            )
        )
    return issues


class InvoiceValidatorService:
    """Runs schema validation, then business-rule validation."""

    def __init__(
        self,
        schema_validator: SchemaValidator | None = None,
        business_rules: BusinessRuleValidator | None = None,
    ):
        self._schema = schema_validator or SchemaValidator()
        self._rules = business_rules or BusinessRuleValidator()

    def validate(self, invoice: Invoice | Mapping[str, Any]) -> ValidationResult:
        """
        Validate an invoice.

        Never raises for bad input: mappings that cannot be parsed into an
        Invoice are reported as INVALID_TYPE issues.

        Args:
            invoice: Invoice entity or raw mapping

        Returns:
            ValidationResult; valid iff there are no errors
        """
        if not isinstance(invoice, (Invoice, Mapping)):
            logger.info("invoice_parse_failed", input_type=type(invoice).__name__)
            return ValidationResult.from_findings(
                [
                    ValidationIssue(
                        field="invoice",
                        message=f"Factura trebuie să fie un obiect, nu {type(invoice).__name__}",
                        code="INVALID_TYPE",
                    )
                ]
            )
        if not isinstance(invoice, Invoice):
            try:
                invoice = Invoice.model_validate(dict(invoice))
            except ValidationError as e:
                issues = _parse_issues(e)
                logger.info("invoice_parse_failed", errors_count=len(issues))
                return ValidationResult.from_findings(issues)

        schema_issues = self._schema.validate(invoice)
        if schema_issues:
            result = ValidationResult.from_findings(schema_issues)
        else:
            result = self._rules.validate(invoice)

        logger.info(
            "invoice_validated",
            series=invoice.series,
            number=invoice.number,
            valid=result.valid,
            errors_count=result.errors_count,
            warnings_count=result.warnings_count,
            stage="schema" if schema_issues else "business_rules",
        )
        return result


def validate_invoice(invoice: Invoice | Mapping[str, Any]) -> ValidationResult:
    """Validate an invoice with warning thresholds taken from settings."""
    settings = get_settings().validation
    rules = BusinessRuleValidator(
        large_person_total=settings.large_person_invoice_total,
        max_payment_term_days=settings.max_payment_term_days,
    )
    return InvoiceValidatorService(business_rules=rules).validate(invoice)
