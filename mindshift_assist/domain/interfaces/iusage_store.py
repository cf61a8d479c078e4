# Stores per-session usage counters
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Protocol

from mindshift_assist.domain.models import SessionUsage


class IUsageStore(Protocol):
    # Creates the entry if absent and increments call_count; returns a copy
    def track(self, session_id: str, now: datetime) -> SessionUsage:
        ...

    # Adds tokens and cost to an existing entry; returns a copy or None
    def update(self, session_id: str, tokens: int, cost: Decimal, now: datetime) -> Optional[SessionUsage]:
        ...

    # Flags the entry as having raised its budget event; True only on the first flip
    def mark_budget_notified(self, session_id: str) -> bool:
        ...

    # Returns a copy of a session entry
    def get(self, session_id: str) -> Optional[SessionUsage]:
        ...

    # Returns copies of all live entries
    def all(self) -> List[SessionUsage]:
        ...
