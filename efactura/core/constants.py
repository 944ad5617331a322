"""
Romanian e-Factura reference data.

Fixed enumerations used by the schema validator, the XML builder and the
document renderer.
"""

from enum import Enum


class InvoiceType(str, Enum):
    """Fiscal document type."""

    FACTURA = "FACTURA"
    PROFORMA = "PROFORMA"
    STORNO = "STORNO"
    AVIZ = "AVIZ"


class PaymentMethod(str, Enum):
    """Accepted payment methods."""

    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    CARD = "CARD"
    OP = "OP"


class PaymentStatus(str, Enum):
    PAID = "PAID"
    UNPAID = "UNPAID"
    PARTIAL = "PARTIAL"


class AnafStatus(str, Enum):
    """Submission state reported by ANAF."""

    DRAFT = "DRAFT"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    ERROR = "ERROR"


# VAT rates in percent
VAT_STANDARD = 19
VAT_REDUCED_FOOD = 9
VAT_REDUCED_SERVICES = 5
VAT_ZERO = 0
VAT_RATES: tuple[float, ...] = (VAT_STANDARD, VAT_REDUCED_FOOD, VAT_REDUCED_SERVICES, VAT_ZERO)

CURRENCIES: tuple[str, ...] = ("RON", "EUR", "USD")
DOMESTIC_CURRENCY = "RON"

INVOICE_UNITS: tuple[str, ...] = (
    "buc",  # bucată
    "mp",  # metru pătrat
    "ml",  # metru liniar
    "kg",
    "l",  # litru
    "ore",
    "zi",
    "luna",
    "set",
    "pereche",
)

COUNTY_CODES: dict[str, str] = {
    "AB": "Alba",
    "AR": "Arad",
    "AG": "Argeș",
    "BC": "Bacău",
    "BH": "Bihor",
    "BN": "Bistrița-Năsăud",
    "BT": "Botoșani",
    "BV": "Brașov",
    "BR": "Brăila",
    "B": "București",
    "BZ": "Buzău",
    "CS": "Caraș-Severin",
    "CL": "Călărași",
    "CJ": "Cluj",
    "CT": "Constanța",
    "CV": "Covasna",
    "DB": "Dâmbovița",
    "DJ": "Dolj",
    "GL": "Galați",
    "GR": "Giurgiu",
    "GJ": "Gorj",
    "HR": "Harghita",
    "HD": "Hunedoara",
    "IL": "Ialomița",
    "IS": "Iași",
    "IF": "Ilfov",
    "MM": "Maramureș",
    "MH": "Mehedinți",
    "MS": "Mureș",
    "NT": "Neamț",
    "OT": "Olt",
    "PH": "Prahova",
    "SM": "Satu Mare",
    "SJ": "Sălaj",
    "SB": "Sibiu",
    "SV": "Suceava",
    "TR": "Teleorman",
    "TM": "Timiș",
    "TL": "Tulcea",
    "VS": "Vaslui",
    "VL": "Vâlcea",
    "VN": "Vrancea",
}
COUNTY_NAMES: tuple[str, ...] = tuple(COUNTY_CODES.values())

DOCUMENT_TITLES: dict[str, str] = {
    InvoiceType.FACTURA.value: "FACTURĂ",
    InvoiceType.PROFORMA.value: "FACTURĂ PROFORMĂ",
    InvoiceType.STORNO.value: "FACTURĂ STORNO",
    InvoiceType.AVIZ.value: "AVIZ DE ÎNSOȚIRE",
}

PAYMENT_METHOD_LABELS: dict[str, str] = {
    PaymentMethod.CASH.value: "Numerar",
    PaymentMethod.BANK_TRANSFER.value: "Transfer bancar",
    PaymentMethod.CARD.value: "Card bancar",
    PaymentMethod.OP.value: "Ordin de plată",
}

# ---------------------------------------------------------------------------
# UBL 2.1 code lists
# ---------------------------------------------------------------------------

# UNCL1001
INVOICE_TYPE_CODES: dict[str, str] = {
    InvoiceType.FACTURA.value: "380",  # commercial invoice
    InvoiceType.PROFORMA.value: "325",
    InvoiceType.STORNO.value: "381",  # credit note
    InvoiceType.AVIZ.value: "230",
}

# UNCL4461
PAYMENT_MEANS_CODES: dict[str, str] = {
    PaymentMethod.CASH.value: "10",
    PaymentMethod.BANK_TRANSFER.value: "30",
    PaymentMethod.CARD.value: "48",
    PaymentMethod.OP.value: "42",
}
PAYMENT_MEANS_UNSPECIFIED = "1"

# UNCL5305
TAX_CATEGORY_STANDARD = "S"
TAX_CATEGORY_REDUCED = "AA"
TAX_CATEGORY_ZERO = "Z"

# UN/ECE Recommendation 20
UNIT_CODES: dict[str, str] = {
    "buc": "H87",
    "mp": "MTK",
    "ml": "MTR",
    "kg": "KGM",
    "l": "LTR",
    "ore": "HUR",
    "zi": "DAY",
    "luna": "MON",
    "set": "SET",
    "pereche": "PR",
}
DEFAULT_UNIT_CODE = "H87"


def tax_category_code(rate: float) -> str:
    """Map a VAT rate to its UNCL5305 tax category."""
    if rate == VAT_ZERO:
        return TAX_CATEGORY_ZERO
    if rate in (VAT_REDUCED_FOOD, VAT_REDUCED_SERVICES):
        return TAX_CATEGORY_REDUCED
    return TAX_CATEGORY_STANDARD
