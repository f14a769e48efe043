"""
Price Calculation Routes
========================

Endpoints:
----------
- POST /api/menu/calculate-price: Price one configured menu item

The route is a thin shell around PricingEngine: it hands the parsed body to
the engine and translates PricingError subclasses into HTTP errors. Errors the
register operator cannot fix (catalog outages, internal defects) carry a
generic message; details stay in the server log.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..pricing import PricingEngine
from ..pricing.errors import (
    AccessDenied,
    AssemblyInvariantViolation,
    CatalogUnavailable,
    PricingError,
    PricingRuleNotFound,
    SelectionInvalid,
    ValidationError,
)
from ..schemas.pricing import PriceCalculationRequest, PriceCalculationResponse, PricingErrorOut
from ..services.pricing_service import get_pricing_engine

logger = logging.getLogger(__name__)

pricing_router = APIRouter(prefix="/api/menu", tags=["Pricing"])

GENERIC_ERROR_MESSAGE = "Pricing unavailable, please retry"

ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    SelectionInvalid: status.HTTP_400_BAD_REQUEST,
    AccessDenied: status.HTTP_403_FORBIDDEN,
    PricingRuleNotFound: status.HTTP_404_NOT_FOUND,
    AssemblyInvariantViolation: status.HTTP_500_INTERNAL_SERVER_ERROR,
    CatalogUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_to_http(exc: PricingError) -> HTTPException:
    """Translate a pricing failure into an HTTPException with a structured detail."""
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if exc.user_correctable or status_code < 500:
        message = exc.message
    else:
        message = GENERIC_ERROR_MESSAGE
    body = PricingErrorOut(
        code=exc.code,
        message=message,
        field=getattr(exc, "field", None),
        selection_index=getattr(exc, "index", None),
    )
    return HTTPException(status_code=status_code, detail=body.model_dump(exclude_none=True))


@pricing_router.post("/calculate-price", response_model=PriceCalculationResponse)
def calculate_price(
    payload: PriceCalculationRequest,
    engine: PricingEngine = Depends(get_pricing_engine),
) -> PriceCalculationResponse:
    """
    Price one configured menu item.

    Returns the final price with a line-item breakdown whose prices sum to it.
    """
    try:
        breakdown = engine.calculate_price(payload.to_engine_dict())
    except PricingError as exc:
        raise error_to_http(exc) from exc
    return PriceCalculationResponse.from_breakdown(breakdown)
