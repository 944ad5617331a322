"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

RGB = tuple[int, int, int]


class ValidationSettings(BaseSettings):
    """Business-rule warning thresholds."""

    model_config = SettingsConfigDict(env_prefix="VALIDATION_")

    # Person customers above this total are flagged for manual review
    large_person_invoice_total: float = 10000.0
    # Due dates further out than this are flagged
    max_payment_term_days: int = 90

    @field_validator("large_person_invoice_total", "max_payment_term_days")
    @classmethod
    def non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("threshold must be non-negative")
        return v


class PdfSettings(BaseSettings):
    """Invoice document rendering configuration."""

    model_config = SettingsConfigDict(env_prefix="PDF_")

    footer_text: str = ""
    # TTF font with Romanian diacritics (e.g. DejaVuSans.ttf); core fonts otherwise
    font_path: Path | None = None
    bold_font_path: Path | None = None

    header_color: RGB = (31, 78, 121)
    header_text_color: RGB = (255, 255, 255)
    page_margin: float = 15.0

    @field_validator("header_color", "header_text_color")
    @classmethod
    def check_rgb(cls, v: RGB) -> RGB:
        if any(c < 0 or c > 255 for c in v):
            raise ValueError("RGB components must be between 0 and 255")
        return v


class InvoiceSettings(BaseSettings):
    """Defaults used when assembling invoices from orders."""

    model_config = SettingsConfigDict(env_prefix="INVOICE_")

    default_series: str = "PMT"
    default_vat_rate: float = 19
    default_unit: str = "buc"
    default_currency: str = "RON"
    payment_term_days: int = 30


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Tiles e-Factura"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    pdf: PdfSettings = Field(default_factory=PdfSettings)
    invoice: InvoiceSettings = Field(default_factory=InvoiceSettings)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
