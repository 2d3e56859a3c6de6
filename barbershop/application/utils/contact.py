from __future__ import annotations

import re

from barbershop.application.exceptions import ValidationError

_WHITESPACE = re.compile(r"\s+")


def normalize_phone(phone: str | None) -> str:
    """Strip all whitespace so "600 123 456" and "600123456" match."""
    return _WHITESPACE.sub("", phone or "")


def validate_contact(
    name: str | None,
    email: str | None,
    phone: str | None,
    require_phone: bool = True,
) -> tuple[str, str, str]:
    """Return trimmed (name, email, phone) or raise ValidationError naming the empty fields.

    Only non-emptiness is enforced; format checks are left to the client.
    """
    cleaned_name = (name or "").strip()
    cleaned_email = (email or "").strip()
    cleaned_phone = normalize_phone(phone)

    missing = []
    if not cleaned_name:
        missing.append("name")
    if not cleaned_email:
        missing.append("email")
    if require_phone and not cleaned_phone:
        missing.append("phone")
    if missing:
        raise ValidationError("Please fill in all fields", fields=tuple(missing))
    return cleaned_name, cleaned_email, cleaned_phone
