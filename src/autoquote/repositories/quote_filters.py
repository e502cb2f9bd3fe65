"""Allow-listed equality filters for quote searches."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from autoquote.core.pricing import to_cents
from autoquote.core.validation import validate_amount, validate_date_of_birth


def _coerce_id(value: str) -> int:
    try:
        return int(str(value).strip())
    except ValueError as error:
        raise ValueError("id must be an integer.") from error


def _coerce_text(value: str) -> str:
    return str(value).strip()


def _coerce_date(value: str) -> str:
    return validate_date_of_birth(str(value)).isoformat()


def _coerce_premium(value: str) -> str:
    amount = validate_amount(value, "monthly_premium")
    if amount is None:
        raise ValueError("monthly_premium must be a number.")
    try:
        return str(to_cents(amount))
    except ArithmeticError as error:
        raise ValueError("monthly_premium is out of range.") from error


FILTERABLE_FIELDS: dict[str, Callable[[str], Any]] = {
    "id": _coerce_id,
    "name": _coerce_text,
    "zip_code": _coerce_text,
    "date_of_birth": _coerce_date,
    "monthly_premium": _coerce_premium,
    "created_at": _coerce_text,
}


@dataclass(frozen=True)
class QuoteFilter:
    """Equality predicates over known quote columns."""

    predicates: tuple[tuple[str, Any], ...] = field(default_factory=tuple)

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "QuoteFilter":
        """Build a filter from caller-supplied key/value pairs.

        Keys must name a quote column; values are converted to the stored form.
        """
        predicates: list[tuple[str, Any]] = []
        for key, value in params.items():
            coerce = FILTERABLE_FIELDS.get(key)
            if coerce is None:
                raise ValueError(f"Unsupported quote search field: {key}")
            predicates.append((key, coerce(value)))
        return cls(predicates=tuple(predicates))

    def to_sql(self) -> tuple[str, tuple[Any, ...]]:
        """Return a WHERE clause with placeholders and its parameters."""
        if not self.predicates:
            return "", ()
        # Column names come from FILTERABLE_FIELDS only.
        clauses = [f"{column} = ?" for column, _ in self.predicates]
        return "WHERE " + " AND ".join(clauses), tuple(value for _, value in self.predicates)
