"""Pricing tier data models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

UNLIMITED = -1


class BillingCycle(str, Enum):
    """Billing cycles with a billing provider price reference."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


class TierLimits(BaseModel):
    """Usage limits for a tier. ``-1`` means unlimited."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    messages_per_month: int = Field(..., alias="messagesPerMonth")
    messages_per_day: int = Field(..., alias="messagesPerDay")
    projects_count: int = Field(..., alias="projectsCount")


class BillingPriceIds(BaseModel):
    """Billing provider price references for a tier."""

    model_config = ConfigDict(frozen=True)

    monthly: str
    yearly: str


class PricingTier(BaseModel):
    """A subscription tier of the pricing catalog.

    Tiers are immutable; the promotional overlay produces derived copies
    carrying the original prices alongside the discounted ones.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Lower-case tier identifier")
    name: str = Field(..., description="Display name")
    description: str = Field(..., description="Short marketing description")
    price_monthly: float = Field(..., alias="priceMonthly")
    price_yearly: float | None = Field(None, alias="priceYearly")
    currency: str = Field(default="USD")
    features: tuple[str, ...] = Field(default=())
    limits: TierLimits
    price_ids: BillingPriceIds | None = Field(
        None,
        alias="stripeIds",
        description="Billing provider price references",
    )
    recommended: bool | None = None
    popular: bool | None = None

    # Promotional overlay annotations
    original_price_monthly: float | None = Field(None, alias="originalPriceMonthly")
    original_price_yearly: float | None = Field(None, alias="originalPriceYearly")
    is_promotional: bool = Field(False, alias="isPromotional")
    promotion_expiry: datetime | None = Field(None, alias="promotionExpiry")

    def to_dict(self) -> dict:
        """Serialize with wire names, omitting unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PromotionalPrice(BaseModel):
    """Discounted prices for one tier."""

    model_config = ConfigDict(frozen=True)

    price_monthly: float
    price_yearly: float


class PromotionalOverlay(BaseModel):
    """A time-boxed set of discounted prices keyed by tier ID."""

    model_config = ConfigDict(frozen=True)

    name: str
    enabled: bool = True
    expiry: datetime
    tiers: dict[str, PromotionalPrice]


class YearlySavings(BaseModel):
    """Savings of yearly billing over twelve monthly payments."""

    model_config = ConfigDict(populate_by_name=True)

    savings_amount: float = Field(..., alias="savingsAmount")
    savings_percentage: int = Field(..., alias="savingsPercentage")
    monthly_equivalent: float = Field(..., alias="monthlyEquivalent")
