"""Input validation and normalization helpers."""

import re

from vendorvault_api.constants.validation import (
    AADHAAR_LENGTH,
    FSSAI_PATTERN,
    GST_PATTERN,
    IFSC_PATTERN,
    MIN_PASSWORD_LENGTH,
    PAN_PATTERN,
    PHONE_PATTERN,
    PINCODE_PATTERN,
    STATION_CODE_PATTERN,
)

MAX_SEARCH_LENGTH = 200

_WHITESPACE = re.compile(r"\s+")


def sanitize_search(search: str | None, max_length: int = MAX_SEARCH_LENGTH) -> str | None:
    """Sanitize search input.

    Args:
        search: Raw search string
        max_length: Maximum allowed length

    Returns:
        Sanitized search string or None
    """
    if search is None:
        return None
    search = search[:max_length]
    # Strip statement separators and LIKE wildcards
    search = search.replace(";", "").replace("--", "").replace("%", "").replace("_", " ")
    return search.strip() or None


def normalize_aadhaar(aadhaar: str) -> str:
    """Strip whitespace from an Aadhaar number."""
    return _WHITESPACE.sub("", aadhaar)


def is_valid_aadhaar(aadhaar: str) -> bool:
    """Check an Aadhaar number is exactly 12 digits, ignoring spaces."""
    cleaned = normalize_aadhaar(aadhaar)
    return len(cleaned) == AADHAAR_LENGTH and cleaned.isdigit()


def normalize_pan(pan: str) -> str:
    """Uppercase a PAN and strip whitespace."""
    return _WHITESPACE.sub("", pan).upper()


def is_valid_pan(pan: str) -> bool:
    """Check a PAN matches the AAAAA9999A format."""
    return bool(PAN_PATTERN.match(normalize_pan(pan)))


def normalize_phone(phone: str) -> str:
    """Keep only the digits of a phone number."""
    return re.sub(r"\D", "", phone)


def is_valid_mobile(phone: str) -> bool:
    """Check an Indian mobile number (10 digits starting with 6-9)."""
    return bool(PHONE_PATTERN.match(normalize_phone(phone)))


def is_valid_pincode(pincode: str) -> bool:
    """Check a 6-digit postal code."""
    return bool(PINCODE_PATTERN.match(pincode.strip()))


def is_valid_ifsc(ifsc: str) -> bool:
    """Check a bank IFSC code."""
    return bool(IFSC_PATTERN.match(_WHITESPACE.sub("", ifsc).upper()))


def is_valid_gst(gst: str) -> bool:
    """Check a 15-character GSTIN."""
    return bool(GST_PATTERN.match(_WHITESPACE.sub("", gst).upper()))


def is_valid_fssai(fssai: str) -> bool:
    """Check a 14-digit FSSAI license number."""
    return bool(FSSAI_PATTERN.match(_WHITESPACE.sub("", fssai)))


def normalize_station_code(code: str) -> str:
    """Uppercase and trim a station code."""
    return code.strip().upper()


def is_valid_station_code(code: str) -> bool:
    """Check a station code is 2-5 letters."""
    return bool(STATION_CODE_PATTERN.match(normalize_station_code(code)))


def password_strength_errors(password: str) -> list[str]:
    """List the strength rules a station manager password violates.

    Args:
        password: Plain text password

    Returns:
        Human readable rule violations, empty when the password is strong
    """
    errors: list[str] = []
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain an uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain a lowercase letter")
    if not re.search(r"\d", password):
        errors.append("Password must contain a digit")
    return errors


def capitalize_name(name: str) -> str:
    """Capitalize each word of a person's name."""
    return " ".join(word.capitalize() for word in name.split())


def format_address(line: str | None, state: str | None, pincode: str | None) -> str | None:
    """Format an address as "{line}, {state} - {pin}".

    Missing parts are dropped; returns None when nothing is given.
    """
    line = (line or "").strip()
    state = (state or "").strip()
    pincode = (pincode or "").strip()
    if not (line or state or pincode):
        return None
    head = ", ".join(part for part in (line, state) if part)
    if pincode:
        return f"{head} - {pincode}" if head else pincode
    return head
