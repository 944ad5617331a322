"""Configuration module."""

from efactura.config.logging import (
    configure_logging,
    get_logger,
    invoice_log_context,
    mask_identifier,
)
from efactura.config.settings import (
    InvoiceSettings,
    PdfSettings,
    Settings,
    ValidationSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "ValidationSettings",
    "PdfSettings",
    "InvoiceSettings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
    "invoice_log_context",
    "mask_identifier",
]
