"""FastAPI router for the pricing catalog."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from autodevelop_api.pricing.service import PricingResolver, get_pricing_resolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pricing", tags=["Pricing"])


def _wants_promo(promo: str | None) -> bool:
    return (promo or "").lower() == "true"


def _failure() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Failed to fetch pricing tiers"},
    )


@router.get("/tiers", response_model=None)
async def list_pricing_tiers(
    resolver: Annotated[PricingResolver, Depends(get_pricing_resolver)],
    promo: str | None = None,
) -> JSONResponse | dict[str, Any]:
    """List the paid tiers together with the free tier.

    Args:
        resolver: Pricing resolver.
        promo: ``true`` to apply active promotional pricing.

    Returns:
        Catalog payload.
    """
    try:
        tiers = resolver.list_tiers(include_promo=_wants_promo(promo))
        return {
            "success": True,
            "data": {
                "tiers": {tier_id: tier.to_dict() for tier_id, tier in tiers.items()},
                "freeTier": resolver.free_tier.to_dict(),
                "hasActivePromotion": resolver.is_promotion_active(),
            },
        }
    except Exception as e:
        logger.exception("Error in pricing API: %s", e)
        return _failure()


@router.get("/tiers/{tier_id}", response_model=None)
async def get_pricing_tier(
    tier_id: str,
    resolver: Annotated[PricingResolver, Depends(get_pricing_resolver)],
    promo: str | None = None,
) -> JSONResponse | dict[str, Any]:
    """Get a single paid tier.

    Args:
        tier_id: Tier ID (case-insensitive).
        resolver: Pricing resolver.
        promo: ``true`` to apply active promotional pricing.

    Returns:
        Tier payload, or 404 if the tier does not exist.
    """
    try:
        tier = resolver.get_tier(tier_id, include_promo=_wants_promo(promo))
    except Exception as e:
        logger.exception("Error in pricing API: %s", e)
        return _failure()

    if tier is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "error": "Pricing tier not found"},
        )

    return {"success": True, "data": tier.to_dict()}
