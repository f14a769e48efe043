"""
Schemas Package for the POS Pricing Service
===========================================

Pydantic models for API request validation and response serialization.

Schema Organization:
--------------------
- **pricing.py**: Price calculation request/response and error bodies

Naming Conventions:
-------------------
- *Request: Request bodies (e.g., PriceCalculationRequest)
- *Response: Response bodies (e.g., PriceCalculationResponse)
- *Out: Nested response parts (e.g., LineItemOut)
"""

from .pricing import (
    SelectionIn,
    PriceCalculationRequest,
    LineItemOut,
    TemplateInfoOut,
    VariantInfoOut,
    PriceCalculationResponse,
    PricingErrorOut,
    CacheInvalidationResponse,
)

__all__ = [
    "SelectionIn",
    "PriceCalculationRequest",
    "LineItemOut",
    "TemplateInfoOut",
    "VariantInfoOut",
    "PriceCalculationResponse",
    "PricingErrorOut",
    "CacheInvalidationResponse",
]
