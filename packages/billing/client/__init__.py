"""Client for the usage-event API with optimistic balance reconciliation."""

from packages.billing.client.usage_client import (
    SubmissionInProgressError,
    UsageClient,
    UsageRequestError,
    balances_from_snapshot,
)

__all__ = [
    "SubmissionInProgressError",
    "UsageClient",
    "UsageRequestError",
    "balances_from_snapshot",
]
