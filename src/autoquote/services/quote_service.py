"""Quote service."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Mapping

from autoquote.core.pricing import age_in_years, calculate_monthly_premium, to_cents, utc_now, window_start
from autoquote.core.validation import (
    validate_amount,
    validate_date_of_birth,
    validate_non_negative,
    validate_required_text,
)
from autoquote.models.quote import QuoteCreate, QuoteCreated, QuoteView
from autoquote.repositories.audit_repository import AuditRepository
from autoquote.repositories.quote_filters import QuoteFilter
from autoquote.repositories.quote_repository import QuoteRepository

logger = logging.getLogger(__name__)

SIX_MONTHS = 6


class QuoteNotFoundError(LookupError):
    """Raised when no quote has the requested id."""


class QuoteService:
    """Coordinates quote use cases."""

    def __init__(
        self,
        quote_repo: QuoteRepository,
        audit_repo: AuditRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._quote_repo = quote_repo
        self._audit_repo = audit_repo
        self._clock = clock

    @staticmethod
    def _validate(payload: QuoteCreate) -> QuoteCreate:
        return QuoteCreate(
            name=validate_required_text(payload.name, "name"),
            zip_code=validate_required_text(payload.zip_code, "zip_code"),
            date_of_birth=validate_date_of_birth(payload.date_of_birth),
        )

    @staticmethod
    def _to_view(row: dict) -> QuoteView:
        return QuoteView(
            id=row["id"],
            name=row["name"],
            zip_code=row["zip_code"],
            date_of_birth=row["date_of_birth"],
            monthly_premium=Decimal(row["monthly_premium"]),
            created_at=row["created_at"],
        )

    def add_quote(self, payload: QuoteCreate) -> QuoteCreated:
        """Price a quote from the holder's age, persist it, and audit it."""
        validated = self._validate(payload)
        age = age_in_years(validated.date_of_birth, self._clock())
        monthly_premium = calculate_monthly_premium(age)
        quote_id = self._quote_repo.create_quote(validated, monthly_premium)
        six_month_premium = to_cents(monthly_premium * SIX_MONTHS)

        self._audit_repo.add_log(
            "CREATE",
            "quote",
            quote_id,
            json.dumps(
                {
                    "event": "quote created",
                    "age": age,
                    "monthly_premium": str(monthly_premium),
                    "zip_code": validated.zip_code,
                },
                ensure_ascii=False,
            ),
        )
        logger.info("Created quote %s (age %s, monthly premium %s)", quote_id, age, monthly_premium)
        return QuoteCreated(six_month_premium=f"{six_month_premium:.2f}", quote_id=quote_id)

    def get_quote(self, quote_id: int) -> QuoteView:
        """Fetch one quote by id."""
        row = self._quote_repo.get_quote(quote_id)
        if not row:
            raise QuoteNotFoundError(f"Quote {quote_id} not found.")
        return self._to_view(row)

    def find_quotes(self, filters: Mapping[str, str], most_recent_only: bool = False) -> list[QuoteView]:
        """Return quotes equal on every given field, optionally only the newest."""
        quote_filter = QuoteFilter.from_params(filters)
        rows = self._quote_repo.find_quotes(quote_filter, most_recent_only=most_recent_only)
        self._audit_repo.add_log(
            "READ",
            "quote",
            None,
            f"quote search filters={sorted(filters)} most_recent_only={most_recent_only}",
        )
        return [self._to_view(row) for row in rows]

    @staticmethod
    def _monthly_bound(six_month_amount: Decimal | str | None, field_name: str) -> Decimal | None:
        amount = validate_amount(six_month_amount, field_name)
        if amount is None:
            return None
        try:
            return amount / SIX_MONTHS
        except ArithmeticError as error:
            raise ValueError(f"{field_name} is out of range.") from error

    def search_quotes_in_past_hours(
        self,
        hours_ago: float,
        zip_code: str | None = None,
        greater_than: Decimal | str | None = None,
        less_than: Decimal | str | None = None,
    ) -> list[QuoteView]:
        """Quotes created in the last ``hours_ago`` hours.

        ``greater_than`` and ``less_than`` bound the six-month cost, so they are
        compared against the monthly premium after dividing by six.
        """
        validate_non_negative(hours_ago, "hours")
        lower = self._monthly_bound(greater_than, "greater_than")
        upper = self._monthly_bound(less_than, "less_than")
        since = window_start(self._clock(), hours=hours_ago)

        rows = self._quote_repo.search_created_since(
            since,
            zip_code=(zip_code or "").strip() or None,
            min_monthly_premium=lower,
            max_monthly_premium=upper,
        )
        self._audit_repo.add_log(
            "READ",
            "quote",
            None,
            f"quote search hours={hours_ago} zip_code={zip_code} "
            f"greater_than={greater_than} less_than={less_than}",
        )
        return [self._to_view(row) for row in rows]
