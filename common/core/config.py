from typing import Optional, List
from pydantic_settings import BaseSettings, SettingsConfigDict

from common.core.constants import (
    Environment,
    BillingProviderType,
    UsageTotalStrategy,
    CacheBackend,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Environment Profile
    environment: Environment = Environment.LOCAL

    # API Settings
    app_name: str = "creditboard-api"
    api_version: str = "0.1.0"
    debug: bool = False

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0

    @property
    def redis_connection_url(self) -> str:
        """Construct Redis URL from components."""
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        else:
            return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    # Caching
    cache_backend: CacheBackend = CacheBackend.MEMORY
    customer_details_cache_ttl_seconds: int = 300

    # Rate limiting (memory:// keeps limits per process)
    rate_limit_storage_uri: str = "memory://"
    usage_events_rate_limit: str = "30/minute"

    # OpenTelemetry
    otel_service_name: str = "creditboard-api"
    otel_service_version: str = "0.1.0"

    # Axiom (exporters are only attached when a token is configured)
    axiom_token: str = ""
    axiom_dataset: str = ""

    # Better Auth session endpoint
    better_auth_url: str = "http://localhost:3000"
    better_auth_session_path: str = "/api/auth/get-session"
    auth_request_timeout_seconds: float = 5.0

    # Billing
    billing_provider: BillingProviderType = BillingProviderType.LOCAL
    flowglad_secret_key: str = ""
    flowglad_base_url: str = "https://app.flowglad.com/api/v1"
    flowglad_request_timeout_seconds: float = 15.0

    # Local billing provider catalog (JSON file with products and usageMeters)
    local_pricing_model_path: Optional[str] = None

    # Usage totals
    usage_total_strategy: UsageTotalStrategy = UsageTotalStrategy.FEATURE_ITEMS
    credit_topup_price_id: str = ""
    credits_per_topup: int = 100

    # Dashboard
    dashboard_usage_meter_slugs: List[str] = ["fast_generations", "hd_video_minutes"]
    dashboard_feature_slugs: List[str] = [
        "unlimited_relaxed_images",
        "unlimited_relaxed_sd_video",
        "optional_credit_top_ups",
    ]

    @property
    def cors_allowed_origins(self) -> List[str]:
        """Auto-select CORS origins based on environment."""
        if self.environment == Environment.LOCAL:
            return [
                "http://localhost:3000",
                "http://localhost:5173",
            ]
        return []


settings = Settings()
