from fastapi import APIRouter, Depends, Request

from common.core.config import settings
from common.core.otel_axiom_exporter import get_logger
from common.providers.rate_limiter.limiter import limiter
from packages.billing.providers.billing.interface import BillingProviderInterface
from packages.billing.routes.dependencies import get_billing_provider_dependency

logger = get_logger(__name__)

router = APIRouter()


@router.get("/")
async def health_check(request: Request):
    # No rate limiting or logging - k8s probes hit this every 5-10s
    return {"status": "healthy", "service": settings.app_name}


@router.get("/billing")
@limiter.limit("100/minute")
async def billing_check(
    request: Request,
    billing: BillingProviderInterface = Depends(get_billing_provider_dependency),
):
    try:
        healthy = await billing.health_check()
    except Exception as e:
        logger.error(f"Billing health check failed: {e}")
        healthy = False
    return {
        "status": "healthy" if healthy else "unhealthy",
        "billing_provider": settings.billing_provider.value,
    }
