"""
Services Package for the POS Pricing Service
============================================

Service modules that wire the pricing engine to its infrastructure.

Available Services:
-------------------
- **pricing_service**: The shared catalog (SQL + TTL cache) and PricingEngine
  used by the HTTP routes, exposed as FastAPI dependencies

Usage:
------
    from pos_pricing.services.pricing_service import get_pricing_engine
"""

from . import pricing_service

__all__ = ["pricing_service"]
