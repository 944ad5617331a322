"""Invoice number formatting: series letters followed by a zero-padded sequence."""

import re
from typing import NamedTuple

from efactura.core.exceptions import InvoiceNumberParseError

NUMBER_WIDTH = 6

_INVOICE_NUMBER_RE = re.compile(r"([A-Z]+)([0-9]+)")


class InvoiceNumber(NamedTuple):
    series: str
    number: int


def format_invoice_number(series: str, number: int) -> str:
    """Format e.g. ("PMT", 42) as "PMT000042"."""
    return f"{series}{number:0{NUMBER_WIDTH}d}"


def parse_invoice_number(value: str) -> InvoiceNumber:
    """Split "PMT000042" into ("PMT", 42).

    Raises:
        InvoiceNumberParseError: If the value is not uppercase letters
            followed by digits.
    """
    match = _INVOICE_NUMBER_RE.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise InvoiceNumberParseError(value)
    return InvoiceNumber(series=match.group(1), number=int(match.group(2)))
