"""
Pricing-model snapshot as served by the billing platform.

Every field is optional: the catalog is loosely shaped JSON owned by an
external system, so it is validated leniently here and the lookup helpers
treat missing data as "not offered". A mistyped field or list entry is
dropped on its own instead of failing the whole payload.
"""

from typing import Any, Dict, List, Optional, Set, Union
from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

ExternalId = Union[int, str]


def _without_malformed(
    data: Dict[str, Any], error: ValidationError
) -> Optional[Dict[str, Any]]:
    """
    Copy of `data` without the keys and list entries named by `error`.

    Returns None when nothing in `data` can be dropped (e.g. a required
    field is missing).
    """
    bad_keys: Set[str] = set()
    bad_entries: Dict[str, Set[int]] = {}
    for err in error.errors():
        loc = err["loc"]
        if not loc or loc[0] not in data:
            return None
        key = loc[0]
        if len(loc) > 1 and isinstance(loc[1], int) and isinstance(data[key], list):
            bad_entries.setdefault(key, set()).add(loc[1])
        else:
            bad_keys.add(key)

    cleaned: Dict[str, Any] = {}
    for key, value in data.items():
        if key in bad_keys:
            continue
        if key in bad_entries:
            value = [
                item for i, item in enumerate(value) if i not in bad_entries[key]
            ]
        cleaned[key] = value
    return cleaned


class BillingModel(BaseModel):
    """Base for billing platform payloads (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    @model_validator(mode="wrap")
    @classmethod
    def drop_malformed(cls, data: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(data)
        except ValidationError as e:
            if not isinstance(data, dict):
                raise
            cleaned = _without_malformed(data, e)
            if cleaned is None:
                raise
            return handler(cleaned)


class UsageMeter(BillingModel):
    id: Optional[ExternalId] = None
    slug: Optional[str] = None
    name: Optional[str] = None


class Price(BillingModel):
    id: Optional[ExternalId] = None
    slug: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    product_id: Optional[ExternalId] = None
    # Only set on usage prices
    usage_meter_id: Optional[ExternalId] = None
    # Minor currency units
    unit_price: Optional[int] = None
    active: Optional[bool] = None


class Feature(BillingModel):
    id: Optional[ExternalId] = None
    slug: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    usage_meter_id: Optional[ExternalId] = None
    amount: Optional[Union[int, float]] = None


class Product(BillingModel):
    id: Optional[ExternalId] = None
    name: Optional[str] = None
    description: Optional[str] = None
    # Marks the free/fallback plan
    default: Optional[bool] = None
    prices: Optional[List[Price]] = None
    features: Optional[List[Feature]] = None


class PricingModel(BillingModel):
    id: Optional[ExternalId] = None
    name: Optional[str] = None
    products: Optional[List[Product]] = None
    usage_meters: Optional[List[UsageMeter]] = None

    @field_validator("products", "usage_meters", mode="before")
    @classmethod
    def drop_null_entries(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [item for item in value if item is not None]
        return value
