"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

import re
from typing import Iterable

from flask import Request

from utils.errors import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_MISSING = object()


def parse_json_request(
    req: Request,
    *,
    required_keys: Iterable[str] | None = None,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise ValidationError("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise ValidationError("Request JSON body is required.")

    if not isinstance(data, dict):
        raise ValidationError("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise ValidationError("Request JSON body must not be empty.")

    if required_keys:
        missing = [key for key in required_keys if not data.get(key)]
        if missing:
            raise ValidationError(
                "Missing required fields: {}.".format(
                    ", ".join(sorted(missing))
                )
            )

    return data


def clean_email(raw_email: object) -> str:
    """Strip surrounding whitespace and check the address looks like an email.

    Case is preserved: addresses are unique exactly as stored.
    """

    if not isinstance(raw_email, str):
        raise ValidationError("Email must be a string.")
    email = raw_email.strip()
    if not _EMAIL_RE.match(email) or len(email) > 255:
        raise ValidationError("A valid email address is required.")
    return email


def clean_password(raw_password: object, min_length: int) -> str:
    if not isinstance(raw_password, str) or not raw_password:
        raise ValidationError("Password is required.")
    if len(raw_password) < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters.")
    return raw_password


def optional_string(payload: dict, key: str, *, max_length: int = 255):
    """Return the stripped string at ``key``, ``None`` for blank, or a sentinel when absent."""

    if key not in payload:
        return _MISSING
    value = payload[key]
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string.")
    value = value.strip()
    if len(value) > max_length:
        raise ValidationError(f"{key} must be at most {max_length} characters.")
    return value or None


def optional_bool(payload: dict, key: str):
    if key not in payload:
        return _MISSING
    value = payload[key]
    if not isinstance(value, bool):
        raise ValidationError(f"{key} must be a boolean.")
    return value


def is_missing(value: object) -> bool:
    return value is _MISSING
