"""
Pydantic schemas for API responses.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from autoquote.models.quote import QuoteView


class QuoteResponse(BaseModel):
    """A stored quote (policy)."""
    id: int = Field(..., examples=[1])
    name: str = Field(..., examples=["Ada Lovelace"])
    zip_code: str = Field(..., examples=["12561"])
    date_of_birth: str = Field(..., examples=["1983-08-04"])
    monthly_premium: float = Field(..., examples=[617.43])
    created_at: str = Field(..., examples=["2022-06-12 20:11:22"])

    @classmethod
    def from_view(cls, view: QuoteView) -> "QuoteResponse":
        return cls(
            id=view.id,
            name=view.name,
            zip_code=view.zip_code,
            date_of_birth=view.date_of_birth,
            monthly_premium=float(view.monthly_premium),
            created_at=view.created_at,
        )

    @classmethod
    def from_views(cls, views: List[QuoteView]) -> List["QuoteResponse"]:
        return [cls.from_view(view) for view in views]


class QuoteCreatedResponse(BaseModel):
    """Price of the policy for six months and its id."""
    six_month_premium: str = Field(..., examples=["3704.58"])
    quote_id: int = Field(..., examples=[23])


class PremiumsResponse(BaseModel):
    """Earnings so far this month from policies started this month."""
    model_config = ConfigDict(populate_by_name=True)

    premiums_this_month_so_far: float = Field(
        ...,
        alias="premiums this month so far",
        examples=[1620.43],
    )


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    database_connected: bool
    quote_count: int = 0
    timestamp: datetime
