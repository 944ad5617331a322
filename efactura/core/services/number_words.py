"""
Romanian amount-in-words converter.

Used for the "Suma în litere" line of invoices, e.g.
1234.56 -> "o mie două sute treizeci și patru lei și 56 bani".
"""

from decimal import Decimal

ONES = ("", "unu", "doi", "trei", "patru", "cinci", "șase", "șapte", "opt", "nouă")
# Forms used when counting feminine/neuter nouns (mii, milioane, miliarde)
ONES_FEMININE = ("", "una", "două", "trei", "patru", "cinci", "șase", "șapte", "opt", "nouă")
TEENS = (
    "zece",
    "unsprezece",
    "doisprezece",
    "treisprezece",
    "paisprezece",
    "cincisprezece",
    "șaisprezece",
    "șaptesprezece",
    "optsprezece",
    "nouăsprezece",
)
TENS = (
    "",
    "",
    "douăzeci",
    "treizeci",
    "patruzeci",
    "cincizeci",
    "șaizeci",
    "șaptezeci",
    "optzeci",
    "nouăzeci",
)
HUNDREDS = (
    "",
    "o sută",
    "două sute",
    "trei sute",
    "patru sute",
    "cinci sute",
    "șase sute",
    "șapte sute",
    "opt sute",
    "nouă sute",
)

# (group size, word for exactly one, plural noun)
SCALES = (
    (1_000_000_000, "un miliard", "miliarde"),
    (1_000_000, "un milion", "milioane"),
    (1_000, "o mie", "mii"),
)
MAX_AMOUNT = 1_000_000_000_000

CURRENCY = "lei"
SUBUNIT = "bani"


def _below_hundred(n: int, feminine: bool = False) -> str:
    ones = ONES_FEMININE if feminine else ONES
    if n < 10:
        return ones[n]
    if n < 20:
        if feminine and n == 12:
            return "douăsprezece"
        return TEENS[n - 10]
    tens, unit = divmod(n, 10)
    if unit == 0:
        return TENS[tens]
    return f"{TENS[tens]} și {ones[unit]}"


def _below_thousand(n: int, feminine: bool = False) -> str:
    hundreds, rest = divmod(n, 100)
    parts = [HUNDREDS[hundreds], _below_hundred(rest, feminine)]
    return " ".join(p for p in parts if p)


def _scale_group(count: int, one: str, plural: str) -> str:
    if count == 1:
        return one
    words = _below_thousand(count, feminine=True)
    # Romanian inserts "de" before the noun once the last two digits reach 20
    last_two = count % 100
    if last_two == 0 or last_two >= 20:
        words += " de"
    return f"{words} {plural}"


def number_to_words(amount: float | int | Decimal) -> str:
    """Spell a non-negative RON amount in Romanian words.

    Cents are rounded to the nearest ban; a zero amount renders as "zero".

    Raises:
        ValueError: For negative amounts or amounts of a trillion lei or more.
    """
    if amount < 0:
        raise ValueError(f"Amount must be non-negative, got {amount}")

    total_cents = int(round(amount * 100))
    if total_cents == 0:
        return "zero"

    integer, cents = divmod(total_cents, 100)
    if integer >= MAX_AMOUNT:
        raise ValueError(f"Amount too large to spell: {amount}")

    parts: list[str] = []
    remainder = integer
    for size, one, plural in SCALES:
        count, remainder = divmod(remainder, size)
        if count:
            parts.append(_scale_group(count, one, plural))
    if remainder:
        parts.append(_below_thousand(remainder))

    words = " ".join(parts) if parts else "zero"
    words = f"{words} {CURRENCY}"
    if cents:
        words += f" și {cents} {SUBUNIT}"
    return words
