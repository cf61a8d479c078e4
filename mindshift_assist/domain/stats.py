from decimal import Decimal
from typing import Iterable

from mindshift_assist.domain.models import SessionUsage, SystemStats


def aggregate_system_stats(sessions: Iterable[SessionUsage]) -> SystemStats:
    # # Recomputed on every call; denominators floored at 1
    entries = list(sessions)
    total_sessions = len(entries)
    sessions_with_ai = sum(1 for s in entries if s.call_count > 0)
    denominator = max(total_sessions, 1)

    total_cost = sum((s.total_cost for s in entries), Decimal("0"))
    total_tokens = sum(s.total_tokens for s in entries)

    return SystemStats(
        total_sessions=total_sessions,
        sessions_with_ai=sessions_with_ai,
        ai_usage_percentage=(sessions_with_ai / denominator) * 100.0,
        avg_cost_per_session=total_cost / denominator,
        avg_tokens_per_session=total_tokens / denominator,
    )
