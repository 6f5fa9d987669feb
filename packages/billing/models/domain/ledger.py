"""
Optimistic usage ledger.

After a usage event is submitted the displayed balance is lowered at once
while the authoritative balance is re-fetched. Pending deltas are additive and
only live until the next successful reload, which replaces the authoritative
balances and clears every pending delta in one step.
"""

from collections import defaultdict
from typing import Dict, List, Mapping, Optional, Union

Number = Union[int, float]


class PendingUsageLedger:
    """Authoritative balances plus locally recorded, not yet reconciled usage."""

    def __init__(self, balances: Optional[Mapping[str, Optional[Number]]] = None):
        self._authoritative: Dict[str, Optional[Number]] = dict(balances or {})
        self._pending: Dict[str, List[int]] = defaultdict(list)

    def record(self, meter_slug: str, amount: int) -> None:
        """Record usage that the server has accepted but not yet reflected."""
        self._pending[meter_slug].append(amount)

    def pending_total(self, meter_slug: str) -> int:
        return sum(self._pending.get(meter_slug, []))

    def authoritative(self, meter_slug: str) -> Optional[Number]:
        return self._authoritative.get(meter_slug)

    def available(self, meter_slug: str) -> Optional[Number]:
        """
        Balance to display for a meter, or None when the customer has no
        balance on it at all.
        """
        balance = self._authoritative.get(meter_slug)
        if balance is None:
            return None
        return max(0, balance - self.pending_total(meter_slug))

    def reconcile(self, balances: Mapping[str, Optional[Number]]) -> None:
        """Adopt a fresh authoritative snapshot and drop all pending deltas."""
        self._authoritative = dict(balances)
        self._pending = defaultdict(list)
