"""
Input validation for login, leave requests and password changes.
Each validator returns (is_valid, error_message_or_None).
"""

import re

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_RE = re.compile(r"^[0-9]{10,15}$")
_PHONE_STRIP_RE = re.compile(r"[\s\-()]")


def email(value):
    if not value or not value.strip():
        return False, "Email is required"
    if not _EMAIL_RE.match(value):
        return False, "Please enter a valid email address"
    return True, None


def password(value):
    if not value or not value.strip():
        return False, "Password is required"
    if len(value) < 6:
        return False, "Password must be at least 6 characters long"
    return True, None


def phone(value):
    if not value or not value.strip():
        return False, "Phone number is required"
    if not _PHONE_RE.match(_PHONE_STRIP_RE.sub("", value)):
        return False, "Please enter a valid phone number"
    return True, None


def required(value, field_name="This field"):
    if not value or not str(value).strip():
        return False, f"{field_name} is required"
    return True, None


def date_range(start, end):
    if start > end:
        return False, "End date must be after start date"
    return True, None


def number_range(value, low, high, field_name="Value"):
    if value < low or value > high:
        return False, f"{field_name} must be between {low} and {high}"
    return True, None


def sanitize(value):
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
        .replace("/", "&#x2F;")
    )


def validate_form(fields):
    """fields: iterable of (value, validator). Returns (is_valid, [errors])."""
    errors = []
    for value, validator in fields:
        ok, error = validator(value)
        if not ok and error:
            errors.append(error)
    return not errors, errors
