"""Pricing catalog module.

This module serves the subscription tiers:
- Static paid tier catalog and free tier
- Time-boxed promotional overlay
- Billing price reference lookups
"""

from autodevelop_api.pricing.catalog import (
    FREE_TIER,
    build_early_bird_overlay,
    build_paid_tiers,
)
from autodevelop_api.pricing.models import (
    UNLIMITED,
    BillingCycle,
    BillingPriceIds,
    PricingTier,
    PromotionalOverlay,
    PromotionalPrice,
    TierLimits,
    YearlySavings,
)
from autodevelop_api.pricing.router import router as pricing_router
from autodevelop_api.pricing.service import (
    PricingResolver,
    calculate_yearly_savings,
    get_pricing_resolver,
)

__all__ = [
    # Catalog
    "FREE_TIER",
    "build_early_bird_overlay",
    "build_paid_tiers",
    # Models
    "UNLIMITED",
    "BillingCycle",
    "BillingPriceIds",
    "PricingTier",
    "PromotionalOverlay",
    "PromotionalPrice",
    "TierLimits",
    "YearlySavings",
    # Service
    "PricingResolver",
    "calculate_yearly_savings",
    "get_pricing_resolver",
    # Router
    "pricing_router",
]
