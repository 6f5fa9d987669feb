"""Billing API routes."""

from packages.billing.routes import billing, usage_events

__all__ = ["billing", "usage_events"]
