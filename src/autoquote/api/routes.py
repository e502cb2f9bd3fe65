"""
API routes for quotes and premiums.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Form, Request

from autoquote.core.container import ServiceContainer
from autoquote.core.pricing import utc_now
from autoquote.models.quote import QuoteCreate
from autoquote.repositories.db_pool import StorageUnavailableError
from autoquote.api.schemas import (
    HealthResponse,
    PremiumsResponse,
    QuoteCreatedResponse,
    QuoteResponse,
)


logger = logging.getLogger(__name__)
router = APIRouter()

API_VERSION = "1.0.0"
MOST_RECENT_PARAM = "most_recent"


def get_container(request: Request) -> ServiceContainer:
    """Return the container opened by the application lifespan."""
    return request.app.state.container


@router.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check(container: ServiceContainer = Depends(get_container)):
    """
    Check that the quote database answers.
    """
    database_connected = False
    quote_count = 0
    try:
        quote_count = container.quote_repo.count_quotes()
        database_connected = True
    except StorageUnavailableError as e:
        logger.warning(f"Database check failed: {e}")

    return HealthResponse(
        status="ok" if database_connected else "degraded",
        version=API_VERSION,
        database_connected=database_connected,
        quote_count=quote_count,
        timestamp=utc_now(),
    )


@router.post(
    "/quote",
    response_model=QuoteCreatedResponse,
    tags=["Quotes"],
    summary="Get a quote for 6 months of auto insurance.",
    description="Calculates a six-month quote from the user's age. The quote is saved as a policy.",
)
def add_quote(
    name: str = Form(..., examples=["Ada Lovelace"]),
    zip_code: str = Form(..., examples=["12561"]),
    date_of_birth: str = Form(..., examples=["1983-08-04"]),
    container: ServiceContainer = Depends(get_container),
):
    created = container.quote_service.add_quote(
        QuoteCreate(name=name, zip_code=zip_code, date_of_birth=date_of_birth)
    )
    return QuoteCreatedResponse(six_month_premium=created.six_month_premium, quote_id=created.quote_id)


@router.get(
    "/quote/search/{hours}",
    response_model=List[QuoteResponse],
    tags=["Quotes"],
    summary="Retrieve quotes created within a number of hours.",
    description="greater_than and less_than bound the six-month cost of the policy.",
)
def search_quotes_in_past_hours(
    hours: float,
    zip_code: Optional[str] = None,
    greater_than: Optional[str] = None,
    less_than: Optional[str] = None,
    container: ServiceContainer = Depends(get_container),
):
    quotes = container.quote_service.search_quotes_in_past_hours(
        hours,
        zip_code=zip_code,
        greater_than=greater_than,
        less_than=less_than,
    )
    return QuoteResponse.from_views(quotes)


@router.get(
    "/quote/search",
    response_model=List[QuoteResponse],
    tags=["Quotes"],
    summary="Retrieve a filtered list of quotes.",
    description=(
        "Every query parameter is an equality filter on id, name, zip_code, "
        "date_of_birth, monthly_premium or created_at. most_recent=true returns "
        "only the newest match."
    ),
)
def search_quotes(request: Request, container: ServiceContainer = Depends(get_container)):
    filters = dict(request.query_params)
    most_recent_only = filters.pop(MOST_RECENT_PARAM, "").lower() in {"1", "true", "yes"}
    quotes = container.quote_service.find_quotes(filters, most_recent_only=most_recent_only)
    return QuoteResponse.from_views(quotes)


# Registered after the search routes so "/quote/search" is not read as an id.
@router.get("/quote/{quote_id}", response_model=QuoteResponse, tags=["Quotes"], summary="Retrieve one quote by id.")
def get_quote(quote_id: int, container: ServiceContainer = Depends(get_container)):
    return QuoteResponse.from_view(container.quote_service.get_quote(quote_id))


@router.get(
    "/premiums",
    response_model=PremiumsResponse,
    tags=["Premiums"],
    summary="Premiums earned this month so far from new policies.",
    description="Assumes every quote became a policy and none were cancelled.",
)
def premiums_this_month(container: ServiceContainer = Depends(get_container)):
    total = container.earnings_service.premiums_this_month_so_far()
    return PremiumsResponse(premiums_this_month_so_far=float(total))
