from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, List, Optional

from mindshift_assist.domain.interfaces.iusage_store import IUsageStore
from mindshift_assist.domain.models import SessionUsage
from mindshift_assist.infrastructure.ledger.usage_store import InMemoryUsageStore

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    # # Return current UTC timestamp
    return datetime.now(timezone.utc)


class UsageLedger:
    # # Narrow track/update/get facade over a pluggable store with an injectable clock
    def __init__(self, store: Optional[IUsageStore] = None, clock: Clock = utc_now) -> None:
        self._store = store if store is not None else InMemoryUsageStore()
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    def track(self, session_id: str) -> SessionUsage:
        # # Counts every attempt, including ones the limit policy will deny
        return self._store.track(session_id, self._clock())

    def update(self, session_id: str, tokens: int, cost: Decimal) -> Optional[SessionUsage]:
        return self._store.update(session_id, tokens, cost, self._clock())

    def mark_budget_notified(self, session_id: str) -> bool:
        return self._store.mark_budget_notified(session_id)

    def get(self, session_id: str) -> Optional[SessionUsage]:
        return self._store.get(session_id)

    def all(self) -> List[SessionUsage]:
        return self._store.all()
