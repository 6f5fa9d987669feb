from fastapi import APIRouter

from api.v1.routes import (
    health,
)
from packages.billing.routes import billing, usage_events

api_router = APIRouter()

# Health check (no auth required)
api_router.include_router(health.router, prefix="/health", tags=["health"])

# Usage events (body validated before the session is checked)
api_router.include_router(usage_events.router, tags=["usage-events"])

# Billing (auth enforced per route)
api_router.include_router(billing.router, prefix="/billing", tags=["billing"])
