"""
Romanian fiscal identifier checksums.

Pure predicates for CIF (company tax id), CNP (personal numeric code) and
Romanian IBANs. Each returns a plain bool.
"""

import re

CIF_CONTROL_KEY = "753217532"
CNP_CONTROL_KEY = "279146358279"

_CIF_PREFIX_RE = re.compile(r"^RO", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s")
_CIF_RE = re.compile(r"[0-9]{2,10}")
_CNP_RE = re.compile(r"[0-9]{13}")
# RO + 2 check digits + 4 letter bank code + 16 alphanumeric account
_RO_IBAN_RE = re.compile(r"RO[0-9]{2}[A-Z]{4}[A-Z0-9]{16}")


def validate_cif(value: str) -> bool:
    """Validate a CIF/CUI, with or without the "RO" prefix.

    The payload digits are aligned to the right of the control key, so a
    short CIF uses the key's trailing digits.
    """
    if not isinstance(value, str):
        return False
    cif = _WHITESPACE_RE.sub("", _CIF_PREFIX_RE.sub("", value.strip()))
    if not _CIF_RE.fullmatch(cif):
        return False

    payload, check_digit = cif[:-1], int(cif[-1])
    key = CIF_CONTROL_KEY[-len(payload):]
    total = sum(int(d) * int(k) for d, k in zip(payload, key))

    expected = (total * 10) % 11
    if expected == 10:
        expected = 0
    return expected == check_digit


def validate_cnp(value: str) -> bool:
    """Validate a 13-digit CNP against its control digit."""
    if not isinstance(value, str) or not _CNP_RE.fullmatch(value):
        return False

    total = sum(int(d) * int(k) for d, k in zip(value[:12], CNP_CONTROL_KEY))
    expected = total % 11
    if expected == 10:
        expected = 1
    return expected == int(value[12])


def validate_iban(value: str) -> bool:
    """Validate a Romanian IBAN (case-insensitive, spaces allowed).

    Uses the ISO 13616 mod-97 check over the full numeral; Python ints are
    arbitrary precision so no chunking is needed.
    """
    if not isinstance(value, str):
        return False
    iban = _WHITESPACE_RE.sub("", value).upper()
    if not _RO_IBAN_RE.fullmatch(iban):
        return False

    rearranged = iban[4:] + iban[:4]
    numeral = "".join(str(ord(c) - 55) if c.isalpha() else c for c in rearranged)
    return int(numeral) % 97 == 1
