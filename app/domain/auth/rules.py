from __future__ import annotations

import re
from typing import Any

from app.constants import MIN_PASSWORD_LEN
from app.domain.common.errors import ValidationError

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_.\-]{3,50}$")


def validate_username(username: Any) -> str:
    if not isinstance(username, str) or not username.strip():
        raise ValidationError("Username is required.")
    username = username.strip()
    if not _USERNAME_RE.match(username):
        raise ValidationError("Username must be 3-50 letters, digits, '_', '.' or '-'.")
    return username


def validate_password(password: Any) -> str:
    if not isinstance(password, str) or not password:
        raise ValidationError("Password is required.")
    if len(password) < MIN_PASSWORD_LEN:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LEN} characters.")
    return password
