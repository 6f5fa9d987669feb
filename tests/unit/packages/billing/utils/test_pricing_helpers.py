"""
Unit tests for pricing-model lookups.
"""

import pytest

from packages.billing.models.domain.pricing import PricingModel
from packages.billing.utils.pricing_helpers import (
    find_price_by_slug,
    find_usage_meter_balance,
    find_usage_meter_by_slug,
    find_usage_price_by_meter_slug,
    has_feature_access,
    is_default_plan_by_slug,
)


class TestFindUsageMeterBySlug:
    def test_finds_meter(self, fast_generations_model):
        meter = find_usage_meter_by_slug("fast_generations", fast_generations_model)
        assert meter is not None
        assert meter.id == 1

    def test_slug_match_is_case_sensitive(self, fast_generations_model):
        assert find_usage_meter_by_slug("Fast_Generations", fast_generations_model) is None

    @pytest.mark.parametrize(
        "pricing_model",
        [None, {}, {"usageMeters": None}, {"products": []}],
    )
    def test_missing_meters_returns_none(self, pricing_model):
        assert find_usage_meter_by_slug("fast_generations", pricing_model) is None

    def test_malformed_model_returns_none(self):
        assert find_usage_meter_by_slug("fast_generations", {"usageMeters": "x"}) is None


class TestFindUsagePriceByMeterSlug:
    def test_finds_usage_price_for_meter(self, fast_generations_model):
        price = find_usage_price_by_meter_slug("fast_generations", fast_generations_model)
        assert price is not None
        assert price.slug == "fg_price"

    def test_accepts_parsed_model(self, fast_generations_model):
        model = PricingModel.model_validate(fast_generations_model)
        price = find_usage_price_by_meter_slug("fast_generations", model)
        assert price.slug == "fg_price"

    @pytest.mark.parametrize(
        "pricing_model",
        [
            None,
            {"usageMeters": [{"id": 1, "slug": "fast_generations"}]},
            {"products": [{"prices": [{"type": "usage", "usageMeterId": 1}]}]},
        ],
    )
    def test_missing_products_or_meters_returns_none(self, pricing_model):
        assert find_usage_price_by_meter_slug("fast_generations", pricing_model) is None

    def test_unknown_slug_returns_none(self, fast_generations_model):
        assert find_usage_price_by_meter_slug("hd_video_minutes", fast_generations_model) is None

    def test_ignores_non_usage_prices(self):
        model = {
            "usageMeters": [{"id": 1, "slug": "fast_generations"}],
            "products": [
                {"prices": [{"type": "subscription", "usageMeterId": 1, "slug": "sub"}]}
            ],
        }
        assert find_usage_price_by_meter_slug("fast_generations", model) is None

    def test_first_matching_price_wins(self):
        model = {
            "usageMeters": [{"id": 1, "slug": "fast_generations"}],
            "products": [
                {"prices": [{"type": "usage", "usageMeterId": 1, "slug": "first"}]},
                {"prices": [{"type": "usage", "usageMeterId": 1, "slug": "second"}]},
            ],
        }
        assert find_usage_price_by_meter_slug("fast_generations", model).slug == "first"

    def test_duplicate_meter_slugs_resolve_to_first_meter(self):
        model = {
            "usageMeters": [
                {"id": 1, "slug": "fast_generations"},
                {"id": 2, "slug": "fast_generations"},
            ],
            "products": [
                {"prices": [{"type": "usage", "usageMeterId": 2, "slug": "second"}]},
                {"prices": [{"type": "usage", "usageMeterId": 1, "slug": "first"}]},
            ],
        }
        assert find_usage_price_by_meter_slug("fast_generations", model).slug == "first"

    def test_price_without_slug_is_returned(self):
        model = {
            "usageMeters": [{"id": 1, "slug": "fast_generations"}],
            "products": [{"prices": [{"type": "usage", "usageMeterId": 1}]}],
        }
        price = find_usage_price_by_meter_slug("fast_generations", model)
        assert price is not None
        assert price.slug is None


class TestIsDefaultPlanBySlug:
    def test_default_product_price(self, free_plan_model):
        assert is_default_plan_by_slug(free_plan_model, "free") is True

    def test_non_default_product_price(self, free_plan_model):
        assert is_default_plan_by_slug(free_plan_model, "pro") is False

    def test_unknown_slug(self, free_plan_model):
        assert is_default_plan_by_slug(free_plan_model, "enterprise") is False

    def test_missing_model_or_slug(self, free_plan_model):
        assert is_default_plan_by_slug(None, "free") is False
        assert is_default_plan_by_slug(free_plan_model, None) is False


class TestFindPriceBySlug:
    def test_finds_any_price_type(self, free_plan_model):
        assert find_price_by_slug("pro", free_plan_model).type == "subscription"

    def test_unknown_slug(self, free_plan_model):
        assert find_price_by_slug("missing", free_plan_model) is None


class TestSubscriptionLookups:
    @pytest.fixture
    def subscription(self):
        return {
            "experimental": {
                "featureItems": [{"type": "toggle", "slug": "unlimited_relaxed_images"}],
                "usageMeterBalances": [
                    {"slug": "fast_generations", "usageMeterId": 1, "availableBalance": 7},
                    {"usageMeterId": 2, "availableBalance": 3},
                ],
            }
        }

    def test_balance_by_slug(self, subscription):
        balance = find_usage_meter_balance("fast_generations", subscription)
        assert balance.available_balance == 7

    def test_balance_by_meter_id_fallback(self, subscription):
        model = {"usageMeters": [{"id": 2, "slug": "hd_video_minutes"}]}
        balance = find_usage_meter_balance("hd_video_minutes", subscription, model)
        assert balance.available_balance == 3

    def test_balance_missing(self, subscription):
        assert find_usage_meter_balance("hd_video_minutes", subscription) is None
        assert find_usage_meter_balance("fast_generations", None) is None

    def test_feature_access(self, subscription):
        assert has_feature_access("unlimited_relaxed_images", subscription) is True
        assert has_feature_access("optional_credit_top_ups", subscription) is False
        assert has_feature_access("unlimited_relaxed_images", {}) is False


class TestMistypedEntries:
    @pytest.fixture
    def model_with_mistyped_product(self, fast_generations_model):
        return {
            **fast_generations_model,
            "products": [
                *fast_generations_model["products"],
                {
                    "default": True,
                    "name": 42,
                    "prices": [{"slug": "free", "unitPrice": 9.99}, "not-a-price"],
                },
            ],
        }

    def test_valid_meter_still_found(self, model_with_mistyped_product):
        meter = find_usage_meter_by_slug("fast_generations", model_with_mistyped_product)
        assert meter is not None
        assert meter.id == 1

    def test_valid_usage_price_still_found(self, model_with_mistyped_product):
        price = find_usage_price_by_meter_slug(
            "fast_generations", model_with_mistyped_product
        )
        assert price.slug == "fg_price"

    def test_only_mistyped_fields_are_dropped(self, model_with_mistyped_product):
        model = PricingModel.model_validate(model_with_mistyped_product)
        product = model.products[1]

        assert product.name is None
        assert product.default is True
        assert len(product.prices) == 1
        assert product.prices[0].slug == "free"
        assert product.prices[0].unit_price is None
        assert is_default_plan_by_slug(model_with_mistyped_product, "free") is True

    def test_mistyped_meter_entry_is_skipped(self):
        model = {
            "usageMeters": [
                {"id": {"nested": True}, "slug": ["bad"]},
                "not-a-meter",
                {"id": 1, "slug": "fast_generations"},
            ]
        }
        assert find_usage_meter_by_slug("fast_generations", model).id == 1
