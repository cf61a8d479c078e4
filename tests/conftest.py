"""Shared test fixtures for the assistance service.

Provides a scripted fake model backend, a manual clock, recording telemetry
sinks and a fully wired orchestrator built on them.
"""

import os

# Telemetry must be off before any mindshift_assist module reads settings
os.environ["MINDSHIFT_TELEMETRY_ENABLED"] = "false"
os.environ.pop("OPENAI_API_KEY", None)

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional, Tuple

import pytest

from mindshift_assist.application.orchestrators.assistance_orchestrator import AssistanceOrchestrator
from mindshift_assist.domain.cost import TokenRates
from mindshift_assist.domain.limits import LimitPolicy
from mindshift_assist.domain.models import (
    AITrigger,
    AssistanceRequest,
    ModelCompletion,
    TriggerAction,
)
from mindshift_assist.infrastructure.ledger.ledger import UsageLedger
from mindshift_assist.infrastructure.ledger.usage_store import InMemoryUsageStore
from mindshift_assist.observability.enrichment import RedactionFilter


class FakeModelInvoker:
    """Returns queued completions, then a default one; or raises ``error``."""

    def __init__(
        self,
        responses: Optional[List[ModelCompletion]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.calls: List[Tuple[str, bool]] = []
        self.error = error
        self.closed = False
        self._responses = list(responses or [])
        self.default = ModelCompletion(
            content="Which of those feels most pressing right now?",
            input_tokens=200,
            output_tokens=20,
            total_tokens=220,
            model="fake-model",
        )

    def invoke(self, prompt: str, linguistic: bool) -> ModelCompletion:
        self.calls.append((prompt, linguistic))
        if self.error is not None:
            raise self.error
        if self._responses:
            return self._responses.pop(0)
        return self.default

    def close(self) -> None:
        self.closed = True


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.current = start or datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current = self.current + timedelta(seconds=seconds)


class RecordingMetricCollector:
    def __init__(self) -> None:
        self.latencies: List[float] = []
        self.tokens: List[Tuple[int, int, int]] = []
        self.costs: List[Decimal] = []
        self.fallbacks: List[str] = []

    def record_latency_ms(self, latency: float, **ctx) -> None:
        self.latencies.append(latency)

    def record_tokens(self, input_tokens: int, output_tokens: int, total_tokens: int, **ctx) -> None:
        self.tokens.append((input_tokens, output_tokens, total_tokens))

    def record_cost(self, cost: Decimal, **ctx) -> None:
        self.costs.append(cost)

    def record_fallback(self, reason: str, **ctx) -> None:
        self.fallbacks.append(reason)


class RecordingEventEmitter:
    def __init__(self) -> None:
        self.budget_events: List[Tuple[str, str, int, Decimal]] = []

    def emit_budget_exceeded_event(self, session_id: str, reason: str, call_count: int, total_cost: Decimal) -> None:
        self.budget_events.append((session_id, reason, call_count, total_cost))


def make_request(
    action: TriggerAction = TriggerAction.CLARIFY,
    user_input: str = "I don't really know what you mean",
    session_id: str = "session-1",
    step_id: str = "problem_capture",
    expected_response_type: str = "problem",
    condition: str = "user seems confused",
    prior_responses=None,
) -> AssistanceRequest:
    return AssistanceRequest(
        trigger=AITrigger(condition=condition, action=action),
        user_input=user_input,
        session_id=session_id,
        current_step_id=step_id,
        expected_response_type=expected_response_type,
        prior_responses=dict(prior_responses or {}),
    )


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def ledger(clock: ManualClock) -> UsageLedger:
    return UsageLedger(InMemoryUsageStore(), clock=clock)


@pytest.fixture
def invoker() -> FakeModelInvoker:
    return FakeModelInvoker()


@pytest.fixture
def metrics() -> RecordingMetricCollector:
    return RecordingMetricCollector()


@pytest.fixture
def events() -> RecordingEventEmitter:
    return RecordingEventEmitter()


@pytest.fixture
def rates() -> TokenRates:
    return TokenRates(input_per_1k=Decimal("0.00015"), output_per_1k=Decimal("0.0006"))


@pytest.fixture
def orchestrator(invoker, ledger, metrics, events, rates):
    orch = AssistanceOrchestrator(
        model_invoker=invoker,
        ledger=ledger,
        limit_policy=LimitPolicy(max_calls=10, target_cost=Decimal("0.05")),
        rates=rates,
        redaction=RedactionFilter(),
        metric_collector=metrics,
        event_emitter=events,
        model_name="fake-model",
        timeout_seconds=2.0,
    )
    yield orch
    orch.close()
