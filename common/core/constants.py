from enum import Enum


class Environment(str, Enum):
    """Environment profiles."""

    LOCAL = "local"
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class BillingProviderType(str, Enum):
    """Billing backend implementations."""

    FLOWGLAD = "flowglad"
    LOCAL = "local"


class UsageTotalStrategy(str, Enum):
    """How the per-period credit total of a usage meter is derived."""

    FEATURE_ITEMS = "feature_items"  # subscription usage_credit_grant items
    PURCHASES = "purchases"  # paid one-time top-up purchases


class CacheBackend(str, Enum):
    """Cache provider types."""

    MEMORY = "memory"
    REDIS = "redis"
    PASSTHROUGH = "passthrough"
