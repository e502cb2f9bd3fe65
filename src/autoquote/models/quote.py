"""Quote domain models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass
class QuoteCreate:
    """Input model for requesting a quote."""

    name: str
    zip_code: str
    date_of_birth: date


@dataclass
class QuoteView:
    """Output model for quote retrieval."""

    id: int
    name: str
    zip_code: str
    date_of_birth: str
    monthly_premium: Decimal
    created_at: str


@dataclass
class QuoteCreated:
    """Result of creating a quote: six-month price and the stored id."""

    six_month_premium: str
    quote_id: int
