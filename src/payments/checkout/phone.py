"""Ghana mobile-money phone number normalization."""

import re

COUNTRY_CODE = "233"

_NON_DIGITS = re.compile(r"\D")
_WHITESPACE = re.compile(r"\s+")


def normalize_ghana_phone(raw: str | None) -> str:
    """Return the phone number in +233XXXXXXXXX form.

    Recognised shapes, in order: +233/233 followed by the subscriber number,
    a local number with the trunk 0, and any bare run of 9 or more digits.
    Anything else is passed through with whitespace removed.
    """
    raw = raw or ""
    digits = _NON_DIGITS.sub("", raw)

    if digits.startswith(COUNTRY_CODE) and len(digits) >= 12:
        return f"+{COUNTRY_CODE}{digits[-9:]}"
    if digits.startswith("0") and len(digits) >= 10:
        return f"+{COUNTRY_CODE}{digits[1:10]}"
    if len(digits) >= 9:
        return f"+{COUNTRY_CODE}{digits[-9:]}"
    return _WHITESPACE.sub("", raw)
