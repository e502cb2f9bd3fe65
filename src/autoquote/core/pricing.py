"""Premium and earnings calculations for auto policies."""

from __future__ import annotations

import calendar
import math
from datetime import date, datetime, time, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

BASE_MONTHLY_PREMIUM = Decimal("600")
AGE_RISK_FACTOR = Decimal("0.3")
LOWEST_RISK_AGE = 50
DAYS_PER_YEAR = 365
SECONDS_PER_DAY = 86400
CENTS = Decimal("0.01")


def utc_now() -> datetime:
    """Naive UTC timestamp, comparable with SQLite's CURRENT_TIMESTAMP."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def window_start(now: datetime, days: float = 0, hours: float = 0) -> datetime | None:
    """Start of a look-back window; None when it reaches before year 1."""
    try:
        return now - timedelta(days=days, hours=hours)
    except OverflowError:
        return None


def to_cents(amount: Decimal) -> Decimal:
    """Round a money amount half-up to two decimal places."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_monthly_premium(age: int) -> Decimal:
    """Return the monthly premium for a policy holder of the given age.

    The premium is lowest at age 50 and grows with ``|age - 50| ** 1.5`` in
    both directions. Any integer is accepted, including non-physical ages.
    """
    distance = Decimal(abs(int(age) - LOWEST_RISK_AGE))
    return to_cents(BASE_MONTHLY_PREMIUM + AGE_RISK_FACTOR * distance * distance.sqrt())


def age_in_years(date_of_birth: date, now: datetime) -> int:
    """Whole years between birth and now, counting every year as 365 days."""
    born = datetime.combine(date_of_birth, time.min)
    elapsed = now.replace(tzinfo=None) - born
    return math.floor(elapsed.total_seconds() / SECONDS_PER_DAY / DAYS_PER_YEAR)


def days_in_month(value: date) -> int:
    return calendar.monthrange(value.year, value.month)[1]


def policy_earnings_between_days_in_month(
    measurement_date: date,
    policy_start_date: date,
    monthly_premium: Decimal,
) -> Decimal:
    """Earnings of one policy between two days of the same month.

    Only the day-of-month of each date is read, so both dates must lie in the
    month of ``measurement_date``. A start day after the measurement day gives
    a negative amount.
    """
    cost_per_day = Decimal(str(monthly_premium)) / days_in_month(measurement_date)
    active_days = measurement_date.day - policy_start_date.day
    return to_cents(cost_per_day * active_days)
