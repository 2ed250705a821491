"""Tests for the pricing catalog."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from autodevelop_api.api.app import create_app
from autodevelop_api.pricing import (
    FREE_TIER,
    UNLIMITED,
    BillingCycle,
    PricingResolver,
    PromotionalOverlay,
    PromotionalPrice,
    calculate_yearly_savings,
    get_pricing_resolver,
)

PROMO_EXPIRY = datetime(2025, 12, 31, 23, 59, 59, tzinfo=timezone.utc)
BEFORE_EXPIRY = datetime(2025, 6, 1, tzinfo=timezone.utc)
AFTER_EXPIRY = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def resolver(test_settings):
    """Provide a resolver with the default early bird promotion."""
    return PricingResolver(settings=test_settings)


class TestCatalog:
    """Tests for the static tier catalog."""

    def test_paid_tiers(self, resolver):
        """Test that the catalog holds exactly the three paid tiers."""
        tiers = resolver.list_tiers(now=BEFORE_EXPIRY)

        assert list(tiers) == ["starter", "pro", "enterprise"]
        for tier_id, tier in tiers.items():
            assert tier.id == tier_id
            assert tier.currency == "USD"
            assert tier.features
            assert tier.price_ids is not None

    def test_base_prices(self, resolver):
        """Test the published base prices."""
        tiers = resolver.list_tiers()

        assert tiers["starter"].price_monthly == 9.99
        assert tiers["pro"].price_monthly == 19.99
        assert tiers["pro"].price_yearly == 199.99
        assert tiers["enterprise"].price_monthly == 49.99

    def test_unlimited_limits(self, resolver):
        """Test that unlimited limits are encoded as -1."""
        pro = resolver.get_tier("pro")

        assert pro.limits.messages_per_month == UNLIMITED
        assert pro.limits.messages_per_day == UNLIMITED
        assert pro.limits.projects_count == 25

    def test_flags(self, resolver):
        """Test recommended and popular flags."""
        tiers = resolver.list_tiers()

        assert tiers["pro"].recommended and tiers["pro"].popular
        assert not tiers["starter"].recommended
        assert not tiers["enterprise"].popular

    def test_free_tier(self, resolver):
        """Test the free tier has no billing references."""
        assert resolver.free_tier is FREE_TIER
        assert FREE_TIER.price_monthly == 0
        assert FREE_TIER.price_ids is None
        assert FREE_TIER.limits.messages_per_day == 5

        data = FREE_TIER.to_dict()
        assert "stripeIds" not in data
        assert "priceYearly" not in data

    def test_price_ids_from_settings(self, test_settings):
        """Test that billing references can be configured."""
        settings = test_settings.model_copy(update={"stripe_pro_price_id": "price_123"})
        resolver = PricingResolver(settings=settings)

        assert resolver.get_tier("pro").price_ids.monthly == "price_123"

    def test_wire_names(self, resolver):
        """Test camelCase serialization."""
        data = resolver.get_tier("starter").to_dict()

        assert data["priceMonthly"] == 9.99
        assert data["stripeIds"] == {
            "monthly": "price_starter_monthly",
            "yearly": "price_starter_yearly",
        }
        assert data["limits"] == {
            "messagesPerMonth": 500,
            "messagesPerDay": 50,
            "projectsCount": 3,
        }
        assert data["isPromotional"] is False
        assert "originalPriceMonthly" not in data


class TestPromotion:
    """Tests for the promotional overlay."""

    def test_promotion_active_before_expiry(self, resolver):
        """Test the promotion window."""
        assert resolver.is_promotion_active(BEFORE_EXPIRY)
        assert not resolver.is_promotion_active(AFTER_EXPIRY)

    def test_promotion_inactive_at_expiry(self, resolver):
        """Test that the expiry instant itself is outside the promotion."""
        assert not resolver.is_promotion_active(PROMO_EXPIRY)
        assert resolver.is_promotion_active(PROMO_EXPIRY - timedelta(seconds=1))

    def test_naive_now_treated_as_utc(self, resolver):
        """Test that naive timestamps are compared as UTC."""
        assert resolver.is_promotion_active(datetime(2025, 6, 1))

    def test_disabled_promotion(self, test_settings):
        """Test that a disabled promotion is never active."""
        settings = test_settings.model_copy(update={"promo_enabled": False})
        resolver = PricingResolver(settings=settings)

        assert not resolver.is_promotion_active(BEFORE_EXPIRY)
        assert resolver.list_tiers(True, BEFORE_EXPIRY)["pro"].price_monthly == 19.99

    def test_without_promo_flag(self, resolver):
        """Test that base prices are returned unless promo is requested."""
        pro = resolver.list_tiers(include_promo=False, now=BEFORE_EXPIRY)["pro"]

        assert pro.price_monthly == 19.99
        assert not pro.is_promotional

    def test_with_promo_before_expiry(self, resolver):
        """Test discounted prices while the promotion runs."""
        tiers = resolver.list_tiers(include_promo=True, now=BEFORE_EXPIRY)
        pro = tiers["pro"]

        assert pro.price_monthly == 14.99
        assert pro.price_yearly == 149.99
        assert pro.is_promotional
        assert pro.original_price_monthly == 19.99
        assert pro.original_price_yearly == 199.99
        assert pro.promotion_expiry == PROMO_EXPIRY
        assert tiers["starter"].price_monthly == 7.99
        assert tiers["enterprise"].price_monthly == 39.99

    def test_with_promo_after_expiry(self, resolver):
        """Test base prices once the promotion has expired."""
        pro = resolver.list_tiers(include_promo=True, now=AFTER_EXPIRY)["pro"]

        assert pro.price_monthly == 19.99
        assert not pro.is_promotional
        assert pro.original_price_monthly is None

    def test_overlay_does_not_mutate_catalog(self, resolver):
        """Test that applying the overlay leaves the base catalog intact."""
        promo = resolver.list_tiers(include_promo=True, now=BEFORE_EXPIRY)
        base = resolver.list_tiers(include_promo=False, now=BEFORE_EXPIRY)

        assert promo["pro"] is not base["pro"]
        assert base["pro"].price_monthly == 19.99
        assert not base["pro"].is_promotional

    def test_list_tiers_returns_new_mapping(self, resolver):
        """Test that callers cannot alter the catalog through the result."""
        tiers = resolver.list_tiers()
        del tiers["pro"]

        assert "pro" in resolver.list_tiers()

    def test_partial_overlay(self, test_settings):
        """Test that tiers outside the overlay are unchanged."""
        overlay = PromotionalOverlay(
            name="proOnly",
            expiry=PROMO_EXPIRY,
            tiers={"pro": PromotionalPrice(price_monthly=9.99, price_yearly=99.99)},
        )
        resolver = PricingResolver(settings=test_settings, overlay=overlay)

        tiers = resolver.list_tiers(include_promo=True, now=BEFORE_EXPIRY)

        assert tiers["pro"].price_monthly == 9.99
        assert tiers["starter"].price_monthly == 9.99
        assert not tiers["starter"].is_promotional


class TestTierLookup:
    """Tests for single tier lookup."""

    def test_case_insensitive(self, resolver):
        """Test that tier IDs ignore case."""
        assert resolver.get_tier("PRO") == resolver.get_tier("pro")
        assert resolver.get_tier("Enterprise").id == "enterprise"

    def test_case_insensitive_with_promo(self, resolver):
        """Test lookup with promotional pricing."""
        tier = resolver.get_tier("PRO", include_promo=True, now=BEFORE_EXPIRY)

        assert tier.price_monthly == 14.99

    @pytest.mark.parametrize("identifier", ["nonexistent", "", None, 42, "free"])
    def test_not_found(self, resolver, identifier):
        """Test that unknown or invalid IDs return None."""
        assert resolver.get_tier(identifier) is None


class TestBillingLookups:
    """Tests for billing price reference helpers."""

    def test_get_price_id(self, resolver):
        """Test price reference lookup by cycle."""
        assert resolver.get_price_id("pro") == "price_pro_monthly"
        assert resolver.get_price_id("PRO", "yearly") == "price_pro_yearly"

    def test_get_price_id_invalid(self, resolver):
        """Test invalid tier or cycle."""
        assert resolver.get_price_id("pro", "weekly") is None
        assert resolver.get_price_id("missing") is None
        assert resolver.get_price_id(None) is None

    def test_get_tier_by_price_id(self, resolver):
        """Test reverse lookup from a price reference."""
        tier, cycle = resolver.get_tier_by_price_id("price_enterprise_yearly")

        assert tier.id == "enterprise"
        assert cycle == BillingCycle.YEARLY

    def test_get_tier_by_unknown_price_id(self, resolver):
        """Test reverse lookup of an unknown reference."""
        assert resolver.get_tier_by_price_id("price_unknown") is None


class TestYearlySavings:
    """Tests for yearly savings calculation."""

    def test_pro_savings(self, resolver):
        """Test savings for the pro tier."""
        savings = calculate_yearly_savings(resolver.get_tier("pro"))

        assert savings.savings_amount == 39.89
        assert savings.savings_percentage == 17
        assert savings.monthly_equivalent == 16.67

    def test_free_tier_has_no_savings(self):
        """Test that tiers without yearly pricing have no savings."""
        assert calculate_yearly_savings(FREE_TIER) is None


class TestPricingEndpoints:
    """Tests for the pricing HTTP endpoints."""

    @pytest.fixture
    def client(self, test_settings):
        """Create test client with a promotion that has not expired."""
        settings = test_settings.model_copy(
            update={"promo_expiry": datetime(2100, 1, 1, tzinfo=timezone.utc)}
        )
        resolver = PricingResolver(settings=settings)
        app = create_app()
        app.dependency_overrides[get_pricing_resolver] = lambda: resolver
        return TestClient(app)

    def test_list_tiers(self, client):
        """Test the catalog payload."""
        response = client.get("/api/pricing/tiers")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert set(body["data"]["tiers"]) == {"starter", "pro", "enterprise"}
        assert body["data"]["tiers"]["pro"]["priceMonthly"] == 19.99
        assert body["data"]["freeTier"]["id"] == "free"
        assert body["data"]["hasActivePromotion"] is True

    def test_list_tiers_with_promo(self, client):
        """Test the catalog with promotional pricing."""
        response = client.get("/api/pricing/tiers", params={"promo": "true"})

        pro = response.json()["data"]["tiers"]["pro"]
        assert pro["priceMonthly"] == 14.99
        assert pro["originalPriceMonthly"] == 19.99
        assert pro["isPromotional"] is True
        assert pro["promotionExpiry"].startswith("2100-01-01")

    def test_get_tier(self, client):
        """Test fetching one tier, ignoring case."""
        response = client.get("/api/pricing/tiers/PRO")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["id"] == "pro"
        assert body["data"]["priceMonthly"] == 19.99

    def test_get_tier_with_promo(self, client):
        """Test fetching one tier with promotional pricing."""
        response = client.get("/api/pricing/tiers/starter?promo=true")

        assert response.json()["data"]["priceMonthly"] == 7.99

    def test_get_tier_not_found(self, client):
        """Test the not found payload."""
        response = client.get("/api/pricing/tiers/nonexistent")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Pricing tier not found"}

    def test_post_not_allowed(self, client):
        """Test that the catalog is read-only."""
        response = client.post("/api/pricing/tiers")

        assert response.status_code == 405
        assert response.json()["error"] == "Method not allowed"
        assert response.json()["hint"] == "Only GET requests are supported"
