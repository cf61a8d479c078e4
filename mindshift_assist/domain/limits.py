"""Per-session limit policy.

A session may keep calling the model while it has made at most
``max_calls`` tracked calls and spent at most ``target_cost``. The call count
is incremented before the check, so denied requests still erode the ceiling.

``cost_per_minute`` is computed for diagnostics only. It is deliberately not
part of the gating predicate: only raw cost and call count gate.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from mindshift_assist.domain.models import SessionUsage


@dataclass(frozen=True)
class LimitDecision:
    exceeded: bool
    reason: str
    cost_per_minute: Decimal


@dataclass(frozen=True)
class LimitPolicy:
    max_calls: int = 10
    target_cost: Decimal = Decimal("0.05")

    def cost_per_minute(self, usage: SessionUsage, now: datetime) -> Decimal:
        elapsed_minutes = Decimal(str((now - usage.session_start).total_seconds() / 60.0))
        return usage.total_cost / max(elapsed_minutes, Decimal(1))

    def exceeded(self, usage: SessionUsage) -> bool:
        return usage.call_count > self.max_calls or usage.total_cost > self.target_cost

    def evaluate(self, usage: SessionUsage, now: datetime) -> LimitDecision:
        # # Same predicate as exceeded(), plus the reason and the diagnostic rate
        if usage.call_count > self.max_calls:
            reason = "call_limit"
        elif usage.total_cost > self.target_cost:
            reason = "cost_limit"
        else:
            reason = "within_limits"
        return LimitDecision(
            exceeded=reason != "within_limits",
            reason=reason,
            cost_per_minute=self.cost_per_minute(usage, now),
        )
