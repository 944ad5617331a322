"""
Structured logging for the e-Factura core using structlog.

Every event passes through a redaction step so that personal and banking
identifiers (CNP, IBAN) never reach log sinks in clear. Invoice-scoped
context is carried in structlog contextvars.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from efactura.config.settings import get_settings

# Event keys whose values are personal or banking identifiers
SENSITIVE_KEYS = frozenset({"cnp", "iban", "customer_cnp", "payee_iban"})
VISIBLE_SUFFIX = 4


def mask_identifier(value: Any) -> str:
    """Keep only the last few characters, e.g. "*********3456"."""
    text = str(value)
    if len(text) <= VISIBLE_SUFFIX:
        return "*" * len(text)
    return "*" * (len(text) - VISIBLE_SUFFIX) + text[-VISIBLE_SUFFIX:]


def redact_identifiers(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    for key in SENSITIVE_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = mask_identifier(event_dict[key])
    return event_dict


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    settings = get_settings()
    event_dict.setdefault("app", settings.app_name)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def build_processors(json_output: bool) -> list[Processor]:
    """Processor chain: context, level, timestamp, redaction, then rendering."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        redact_identifiers,
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def configure_logging(json_output: bool | None = None) -> None:
    """
    Configure structlog and stdlib logging for the host application.

    Args:
        json_output: Force JSON (True) or console (False) rendering; by
            default JSON is used outside development.
    """
    settings = get_settings()
    if json_output is None:
        json_output = settings.environment != "development"

    structlog.configure(
        processors=build_processors(json_output),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )

    # fpdf2 and fontTools are chatty at INFO when subsetting fonts
    logging.getLogger("fpdf").setLevel(logging.WARNING)
    logging.getLogger("fontTools").setLevel(logging.WARNING)


@contextmanager
def invoice_log_context(invoice_number: str, **extra: Any) -> Iterator[None]:
    """Attach the invoice number to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(invoice_number=invoice_number, **extra):
        yield


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
