from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if is_blank(value):
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "Email")
    if not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")
    return email.lower()
