"""Input validation rules for quote requests and searches."""

from __future__ import annotations

import math
from datetime import date
from decimal import Decimal, InvalidOperation


def validate_required_text(value: str | None, field_name: str) -> str:
    """Validate non-empty text fields."""
    normalized = (value or "").strip()
    if not normalized:
        raise ValueError(f"{field_name} is required.")
    return normalized


def validate_date_of_birth(value: date | str | None) -> date:
    """Accept a date or an ISO string like 1983-08-04."""
    if isinstance(value, date):
        return value
    normalized = validate_required_text(value, "date_of_birth")
    try:
        return date.fromisoformat(normalized)
    except ValueError as error:
        raise ValueError("date_of_birth must be an ISO date (YYYY-MM-DD).") from error


def validate_non_negative(value: float | int, field_name: str) -> float | int:
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"{field_name} must be a finite number.")
    if value < 0:
        raise ValueError(f"{field_name} must not be negative.")
    return value


def validate_amount(value: Decimal | float | str | None, field_name: str) -> Decimal | None:
    """Parse an optional money amount; empty input means no bound."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as error:
        raise ValueError(f"{field_name} must be a number.") from error
    if not amount.is_finite():
        raise ValueError(f"{field_name} must be a number.")
    return amount
