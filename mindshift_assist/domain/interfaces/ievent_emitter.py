# Emits real-time events (Datadog etc.)
from decimal import Decimal
from typing import Protocol


class IEventEmitter(Protocol):
    # Emits an event when a session trips its limit policy
    def emit_budget_exceeded_event(self, session_id: str, reason: str, call_count: int, total_cost: Decimal) -> None:
        ...
