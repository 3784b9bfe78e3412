from __future__ import annotations

import secrets
from datetime import datetime, timezone


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def generate_uid() -> str:
    return secrets.token_urlsafe(21)


def display_name(first_name: str | None, last_name: str | None, email: str | None) -> str:
    if first_name and last_name:
        return f"{first_name} {last_name}"
    if first_name:
        return first_name
    if email:
        return email.split("@")[0]
    return "Admin"


LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """Lower-cased ``LIKE`` pattern matching ``term`` literally anywhere in a value."""

    escaped = term.lower()
    for char in (LIKE_ESCAPE, "%", "_"):
        escaped = escaped.replace(char, LIKE_ESCAPE + char)
    return f"%{escaped}%"
