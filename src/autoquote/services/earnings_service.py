"""Month-to-date earnings across sold policies."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable

from autoquote.core.pricing import policy_earnings_between_days_in_month, utc_now, window_start
from autoquote.core.validation import validate_non_negative
from autoquote.repositories.quote_repository import QuoteRepository

logger = logging.getLogger(__name__)


class EarningsService:
    """Sums prorated premiums for policies sold in a rolling window.

    Every stored quote counts as an active policy that started at its
    ``created_at`` timestamp.
    """

    def __init__(self, quote_repo: QuoteRepository, clock: Callable[[], datetime] = utc_now):
        self._quote_repo = quote_repo
        self._clock = clock

    def premiums_this_month_so_far(self) -> Decimal:
        """Earnings from policies sold since the start of the current month."""
        now = self._clock()
        return self.search_premiums_for_current_month(now.day - 1)

    def search_premiums_for_current_month(self, days_into_current_month: int) -> Decimal:
        """Sum each policy's earnings for policies created in the last N days.

        The total is the plain sum of already-rounded per-policy amounts.
        """
        validate_non_negative(days_into_current_month, "days_into_current_month")
        now = self._clock()
        policies = self._quote_repo.search_created_since(window_start(now, days=days_into_current_month))

        total = Decimal("0")
        for policy in policies:
            total += policy_earnings_between_days_in_month(
                now,
                datetime.fromisoformat(policy["created_at"]),
                Decimal(policy["monthly_premium"]),
            )

        logger.debug("Summed %d policies sold in the last %d days: %s", len(policies), days_into_current_month, total)
        return total
