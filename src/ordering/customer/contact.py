"""Contact detail checks shared by customers and orders."""

import re

_PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$")
_FORBIDDEN_EMAIL_CHARS = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def normalize_phone(phone: str | None) -> str:
    """Strip spaces and hyphens; a leading +91 country code is dropped."""
    digits = re.sub(r"[\s-]", "", phone or "")
    if digits.startswith("+91") and len(digits) == 13:
        digits = digits[3:]
    return digits


def is_valid_phone(phone: str | None) -> bool:
    """Indian mobile number: ten digits starting with 6-9."""
    return bool(_PHONE_PATTERN.match(normalize_phone(phone)))


def is_valid_email(email: str | None) -> bool:
    """Basic structural check: one @, non-empty parts, dotted domain."""
    email = normalize_email(email)
    if not email or any(ch.isspace() for ch in email):
        return False
    if email.count("@") != 1:
        return False

    local_part, domain_part = email.split("@", 1)
    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        return False
    if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
        return False
    if "." not in domain_part or ".." in email:
        return False
    if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
        return False
    return not any(ch in email for ch in _FORBIDDEN_EMAIL_CHARS)


def contact_errors(name: str | None, phone: str | None, email: str | None) -> dict[str, list[str]]:
    """Field errors for a delivery contact, empty when everything checks out."""
    errors: dict[str, list[str]] = {}
    if not (name or "").strip():
        errors["name"] = ["Name is required"]
    if not is_valid_phone(phone):
        errors["phone"] = ["Please enter a valid 10-digit phone number"]
    if not is_valid_email(email):
        errors["email"] = ["Please enter a valid email address"]
    return errors
