"""
Pricing model served by the local billing provider.

Mirrors the generation-based demo catalog: a free default plan, a Pro plan
with monthly credit grants, one-time top-ups and a usage price per meter.
A JSON file with the same camelCase shape can replace it through
LOCAL_PRICING_MODEL_PATH.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional
from pydantic import ValidationError

from common.core.exceptions import ConfigurationError
from common.core.otel_axiom_exporter import get_logger
from packages.billing.models.domain.pricing import PricingModel

logger = get_logger(__name__)

FAST_GENERATIONS_METER_ID = "um_fast_generations"
HD_VIDEO_MINUTES_METER_ID = "um_hd_video_minutes"

DEFAULT_PRICING_MODEL: Dict[str, Any] = {
    "id": "pm_local",
    "name": "Local pricing model",
    "usageMeters": [
        {"id": FAST_GENERATIONS_METER_ID, "slug": "fast_generations", "name": "Fast Generations"},
        {"id": HD_VIDEO_MINUTES_METER_ID, "slug": "hd_video_minutes", "name": "HD Video Minutes"},
    ],
    "products": [
        {
            "id": "prod_free",
            "name": "Free",
            "default": True,
            "prices": [
                {"id": "price_free", "slug": "free", "type": "subscription", "unitPrice": 0, "active": True},
            ],
            "features": [
                {
                    "slug": "free_fast_generations",
                    "name": "10 fast generations",
                    "type": "usage_credit_grant",
                    "usageMeterId": FAST_GENERATIONS_METER_ID,
                    "amount": 10,
                },
            ],
        },
        {
            "id": "prod_pro",
            "name": "Pro",
            "default": False,
            "prices": [
                {"id": "price_pro_monthly", "slug": "pro_monthly", "type": "subscription", "unitPrice": 6000, "active": True},
            ],
            "features": [
                {
                    "slug": "pro_fast_generations",
                    "name": "360 fast generations",
                    "type": "usage_credit_grant",
                    "usageMeterId": FAST_GENERATIONS_METER_ID,
                    "amount": 360,
                },
                {
                    "slug": "pro_hd_video_minutes",
                    "name": "30 HD video minutes",
                    "type": "usage_credit_grant",
                    "usageMeterId": HD_VIDEO_MINUTES_METER_ID,
                    "amount": 30,
                },
                {"slug": "unlimited_relaxed_images", "name": "Unlimited relaxed images", "type": "toggle"},
                {"slug": "optional_credit_top_ups", "name": "Optional credit top-ups", "type": "toggle"},
            ],
        },
        {
            "id": "prod_fast_generation_top_up",
            "name": "Fast Generation Top-Up",
            "prices": [
                {"id": "price_fast_generation_top_up", "slug": "fast_generation_top_up", "type": "single_payment", "unitPrice": 400, "active": True},
            ],
            "features": [
                {
                    "slug": "fast_generation_top_up_credits",
                    "type": "usage_credit_grant",
                    "usageMeterId": FAST_GENERATIONS_METER_ID,
                    "amount": 80,
                },
            ],
        },
        {
            "id": "prod_hd_video_minute_top_up",
            "name": "HD Video Minute Top-Up",
            "prices": [
                {"id": "price_hd_video_minute_top_up", "slug": "hd_video_minute_top_up", "type": "single_payment", "unitPrice": 1000, "active": True},
            ],
            "features": [
                {
                    "slug": "hd_video_minute_top_up_credits",
                    "type": "usage_credit_grant",
                    "usageMeterId": HD_VIDEO_MINUTES_METER_ID,
                    "amount": 10,
                },
            ],
        },
        {
            "id": "prod_usage",
            "name": "Metered usage",
            "prices": [
                {"id": "price_fast_generations_usage", "slug": "fast_generations_usage", "type": "usage", "usageMeterId": FAST_GENERATIONS_METER_ID, "unitPrice": 0, "active": True},
                {"id": "price_hd_video_minutes_usage", "slug": "hd_video_minutes_usage", "type": "usage", "usageMeterId": HD_VIDEO_MINUTES_METER_ID, "unitPrice": 0, "active": True},
            ],
        },
    ],
}


def load_pricing_model(path: Optional[str] = None) -> PricingModel:
    """
    Load the local pricing model.

    Args:
        path: JSON file to read; the built-in catalog is used when empty

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    if not path:
        return PricingModel.model_validate(DEFAULT_PRICING_MODEL)

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        pricing_model = PricingModel.model_validate(raw)
    except (OSError, ValueError, ValidationError) as e:
        raise ConfigurationError(f"Invalid local pricing model at {path}: {e}")

    logger.info(f"Loaded local pricing model from {path}")
    return pricing_model
