"""Pricing resolution with promotional overlay support."""

import logging
from datetime import datetime, timezone
from typing import Any

from autodevelop_api.config import Settings, get_settings
from autodevelop_api.pricing.catalog import (
    FREE_TIER,
    build_early_bird_overlay,
    build_paid_tiers,
)
from autodevelop_api.pricing.models import (
    BillingCycle,
    PricingTier,
    PromotionalOverlay,
    YearlySavings,
)

logger = logging.getLogger(__name__)


def _as_utc(moment: datetime | None) -> datetime:
    if moment is None:
        return datetime.now(timezone.utc)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class PricingResolver:
    """Resolves the effective price list of the tier catalog.

    The base catalog is built once and never mutated. When the promotion is
    requested and active, every tier covered by the overlay is returned as a
    derived copy with discounted prices and ``is_promotional`` set.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        tiers: dict[str, PricingTier] | None = None,
        overlay: PromotionalOverlay | None = None,
    ):
        """Initialize the resolver.

        Args:
            settings: Application settings.
            tiers: Paid tier catalog (built from settings if not provided).
            overlay: Promotional overlay (built from settings if not provided).
        """
        self._settings = settings or get_settings()
        self._tiers = dict(tiers) if tiers is not None else build_paid_tiers(self._settings)
        self._overlay = overlay or build_early_bird_overlay(self._settings)

    @property
    def free_tier(self) -> PricingTier:
        return FREE_TIER

    @property
    def overlay(self) -> PromotionalOverlay:
        return self._overlay

    def is_promotion_active(self, now: datetime | None = None) -> bool:
        """Check whether the promotion applies at ``now``.

        Args:
            now: Reference time (current UTC time when omitted).

        Returns:
            True if the promotion is enabled and has not expired.
        """
        if not self._overlay.enabled:
            return False
        return _as_utc(now) < _as_utc(self._overlay.expiry)

    def _apply_overlay(self, tiers: dict[str, PricingTier]) -> dict[str, PricingTier]:
        promo = self._overlay
        for tier_id, price in promo.tiers.items():
            tier = tiers.get(tier_id)
            if tier is None:
                continue
            tiers[tier_id] = tier.model_copy(
                update={
                    "original_price_monthly": tier.price_monthly,
                    "original_price_yearly": tier.price_yearly,
                    "price_monthly": price.price_monthly,
                    "price_yearly": price.price_yearly,
                    "is_promotional": True,
                    "promotion_expiry": promo.expiry,
                }
            )
        return tiers

    def list_tiers(
        self,
        include_promo: bool = False,
        now: datetime | None = None,
    ) -> dict[str, PricingTier]:
        """Get every paid tier.

        Args:
            include_promo: Apply the promotional overlay when it is active.
            now: Reference time (current UTC time when omitted).

        Returns:
            A new mapping of tier ID to tier.
        """
        tiers = dict(self._tiers)
        if include_promo and self.is_promotion_active(now):
            return self._apply_overlay(tiers)
        return tiers

    def get_tier(
        self,
        identifier: Any,
        include_promo: bool = False,
        now: datetime | None = None,
    ) -> PricingTier | None:
        """Look up a paid tier by ID, ignoring case.

        Args:
            identifier: Tier ID.
            include_promo: Apply the promotional overlay when it is active.
            now: Reference time (current UTC time when omitted).

        Returns:
            The tier, or None if the ID is unknown, empty or not a string.
        """
        if not identifier or not isinstance(identifier, str):
            return None
        return self.list_tiers(include_promo, now).get(identifier.lower())

    def get_price_id(self, tier_id: Any, cycle: str = "monthly") -> str | None:
        """Get the billing provider price reference for a tier.

        Args:
            tier_id: Tier ID.
            cycle: ``monthly`` or ``yearly``.

        Returns:
            Price reference, or None if the tier or cycle is unknown.
        """
        try:
            billing_cycle = BillingCycle(cycle)
        except ValueError:
            return None

        tier = self.get_tier(tier_id)
        if tier is None or tier.price_ids is None:
            return None
        return getattr(tier.price_ids, billing_cycle.value)

    def get_tier_by_price_id(
        self,
        price_id: str,
    ) -> tuple[PricingTier, BillingCycle] | None:
        """Find the tier and billing cycle a price reference belongs to.

        Args:
            price_id: Billing provider price reference.

        Returns:
            Tuple of (tier, cycle), or None if no tier uses the reference.
        """
        for tier in self.list_tiers(include_promo=True).values():
            if tier.price_ids is None:
                continue
            for cycle in BillingCycle:
                if getattr(tier.price_ids, cycle.value) == price_id:
                    return tier, cycle
        return None


def calculate_yearly_savings(tier: PricingTier) -> YearlySavings | None:
    """Calculate what yearly billing saves compared to paying monthly.

    Args:
        tier: Pricing tier.

    Returns:
        Savings, or None for tiers without a yearly price.
    """
    if tier.price_yearly is None or tier.price_monthly <= 0:
        return None

    monthly_total = tier.price_monthly * 12
    savings = monthly_total - tier.price_yearly
    return YearlySavings(
        savings_amount=round(savings, 2),
        savings_percentage=round(savings / monthly_total * 100),
        monthly_equivalent=round(tier.price_yearly / 12, 2),
    )


# Global resolver instance
_resolver: PricingResolver | None = None


def get_pricing_resolver() -> PricingResolver:
    """Get the global pricing resolver instance.

    Returns:
        PricingResolver instance.
    """
    global _resolver
    if _resolver is None:
        _resolver = PricingResolver()
    return _resolver
