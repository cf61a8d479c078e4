from __future__ import annotations

import threading
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from mindshift_assist.domain.models import SessionUsage


class InMemoryUsageStore:
    # # Process-lifetime session counters; one map-level lock serialises read-modify-write
    def __init__(self) -> None:
        self._sessions: Dict[str, SessionUsage] = {}
        self._lock = threading.Lock()

    def _entry(self, session_id: str, now: datetime) -> SessionUsage:
        # # Caller must hold the lock
        state = self._sessions.get(session_id)
        if state is None:
            state = SessionUsage(session_id=session_id, session_start=now, last_activity=now)
            self._sessions[session_id] = state
        return state

    def track(self, session_id: str, now: datetime) -> SessionUsage:
        with self._lock:
            self._evict(now)
            state = self._entry(session_id, now)
            state.call_count += 1
            state.last_activity = now
            return state.copy()

    def update(
        self,
        session_id: str,
        tokens: int,
        cost: Decimal,
        now: datetime,
    ) -> Optional[SessionUsage]:
        with self._lock:
            state = self._sessions.get(session_id)
            if state is None:
                return None
            state.total_tokens += max(0, int(tokens))
            state.total_cost += max(Decimal("0"), cost)
            state.last_activity = now
            return state.copy()

    def mark_budget_notified(self, session_id: str) -> bool:
        # # True only for the caller that flips the flag on a live entry
        with self._lock:
            state = self._sessions.get(session_id)
            if state is None or state.budget_notified:
                return False
            state.budget_notified = True
            return True

    def get(self, session_id: str) -> Optional[SessionUsage]:
        with self._lock:
            state = self._sessions.get(session_id)
            return state.copy() if state is not None else None

    def all(self) -> List[SessionUsage]:
        with self._lock:
            return [state.copy() for state in self._sessions.values()]

    def _evict(self, now: datetime) -> None:
        # # No expiry for the process-lifetime store
        return None


class ExpiringUsageStore(InMemoryUsageStore):
    # # Same counters, but sessions idle longer than ttl are dropped on the next track()
    def __init__(self, ttl_seconds: float) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be greater than zero")
        super().__init__()
        self._ttl = timedelta(seconds=ttl_seconds)

    def _evict(self, now: datetime) -> None:
        expired = [
            session_id
            for session_id, state in self._sessions.items()
            if now - (state.last_activity or state.session_start) > self._ttl
        ]
        for session_id in expired:
            del self._sessions[session_id]
