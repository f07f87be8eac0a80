"""HS tariff code normalization, shared by the line-item schema and enrichment."""

import re

MIN_HS_DIGITS = 6
MAX_HS_DIGITS = 10

_NON_DIGITS = re.compile(r"\D")


def normalize_hs_code(raw: object) -> str:
    """Reduce a code to 6-10 digits, or "" if it cannot be.

    Non-digits are stripped; 4-5 digit headings are right-padded with zeros
    to 10 digits; anything longer than 10 digits is truncated.
    """
    if raw is None:
        return ""
    digits = _NON_DIGITS.sub("", str(raw))
    if 4 <= len(digits) < MIN_HS_DIGITS:
        digits = digits.ljust(MAX_HS_DIGITS, "0")
    digits = digits[:MAX_HS_DIGITS]
    if MIN_HS_DIGITS <= len(digits) <= MAX_HS_DIGITS:
        return digits
    return ""


def has_usable_hs_code(code: str | None) -> bool:
    return bool(code) and len(code) >= MIN_HS_DIGITS
