import pytest

from packages.billing.models.domain.pricing import PricingModel


@pytest.fixture
def fast_generations_model():
    """Pricing model with one priced meter (id 1, slug fast_generations)."""
    return {
        "usageMeters": [{"id": 1, "slug": "fast_generations"}],
        "products": [
            {
                "default": False,
                "prices": [{"type": "usage", "usageMeterId": 1, "slug": "fg_price"}],
            }
        ],
    }


@pytest.fixture
def free_plan_model():
    return PricingModel.model_validate(
        {
            "usageMeters": [],
            "products": [
                {"default": True, "prices": [{"slug": "free", "type": "subscription"}]},
                {"default": False, "prices": [{"slug": "pro", "type": "subscription"}]},
            ],
        }
    )


@pytest.fixture
def granted_subscription():
    """Subscription granting 100 + 50 credits on meter 1 plus a non-grant item."""
    return {
        "id": "sub_1",
        "experimental": {
            "featureItems": [
                {"type": "usage_credit_grant", "usageMeterId": 1, "amount": 100},
                {"type": "usage_credit_grant", "usageMeterId": 1, "amount": 50},
                {"type": "other", "usageMeterId": 1, "amount": 999},
            ]
        },
    }
