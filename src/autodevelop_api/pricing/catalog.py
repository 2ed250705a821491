"""Static pricing catalog."""

from autodevelop_api.config import Settings
from autodevelop_api.pricing.models import (
    UNLIMITED,
    BillingPriceIds,
    PricingTier,
    PromotionalOverlay,
    PromotionalPrice,
    TierLimits,
)

FREE_TIER = PricingTier(
    id="free",
    name="Free",
    description="Get started with AutoDevelop.ai at no cost",
    price_monthly=0,
    currency="USD",
    features=(
        "Up to 5 AI messages per day",
        "Up to 150 messages per month",
        "Community support",
        "Basic templates",
    ),
    limits=TierLimits(messages_per_month=150, messages_per_day=5, projects_count=1),
)


def build_paid_tiers(settings: Settings) -> dict[str, PricingTier]:
    """Build the paid tiers, resolving price references from settings.

    Args:
        settings: Application settings.

    Returns:
        Paid tiers keyed by tier ID.
    """
    starter = PricingTier(
        id="starter",
        name="Starter",
        description="Perfect for individual developers and small projects",
        price_monthly=9.99,
        price_yearly=99.99,
        currency="USD",
        features=(
            "Up to 500 AI messages per month",
            "Standard response time",
            "Community support",
            "Basic project templates",
            "Code generation assistance",
        ),
        limits=TierLimits(messages_per_month=500, messages_per_day=50, projects_count=3),
        price_ids=BillingPriceIds(
            monthly=settings.stripe_starter_price_id,
            yearly=settings.stripe_starter_yearly_price_id,
        ),
        recommended=False,
        popular=False,
    )

    pro = PricingTier(
        id="pro",
        name="Pro",
        description="Ideal for professional developers and growing teams",
        price_monthly=19.99,
        price_yearly=199.99,
        currency="USD",
        features=(
            "Unlimited AI messages",
            "Priority response time",
            "Email support",
            "Advanced project templates",
            "Code generation & refactoring",
            "API access",
            "Custom integrations",
            "Early feature access",
        ),
        limits=TierLimits(
            messages_per_month=UNLIMITED,
            messages_per_day=UNLIMITED,
            projects_count=25,
        ),
        price_ids=BillingPriceIds(
            monthly=settings.stripe_pro_price_id,
            yearly=settings.stripe_pro_yearly_price_id,
        ),
        recommended=True,
        popular=True,
    )

    enterprise = PricingTier(
        id="enterprise",
        name="Enterprise",
        description="For large teams and organizations with advanced needs",
        price_monthly=49.99,
        price_yearly=499.99,
        currency="USD",
        features=(
            "Everything in Pro",
            "Priority dedicated support",
            "Custom model fine-tuning",
            "Advanced analytics & reporting",
            "SSO integration",
            "Custom deployment options",
            "SLA guarantees",
            "Training & onboarding",
            "Custom contract terms",
        ),
        limits=TierLimits(
            messages_per_month=UNLIMITED,
            messages_per_day=UNLIMITED,
            projects_count=UNLIMITED,
        ),
        price_ids=BillingPriceIds(
            monthly=settings.stripe_enterprise_price_id,
            yearly=settings.stripe_enterprise_yearly_price_id,
        ),
        recommended=False,
        popular=False,
    )

    return {tier.id: tier for tier in (starter, pro, enterprise)}


def build_early_bird_overlay(settings: Settings) -> PromotionalOverlay:
    """Build the early bird promotion.

    Args:
        settings: Application settings.

    Returns:
        Promotional overlay.
    """
    return PromotionalOverlay(
        name="earlyBird",
        enabled=settings.promo_enabled,
        expiry=settings.promo_expiry,
        tiers={
            "starter": PromotionalPrice(price_monthly=7.99, price_yearly=79.99),
            "pro": PromotionalPrice(price_monthly=14.99, price_yearly=149.99),
            "enterprise": PromotionalPrice(price_monthly=39.99, price_yearly=399.99),
        },
    )
