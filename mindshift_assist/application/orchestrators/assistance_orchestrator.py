# Interface-driven orchestrator deciding per turn between model text and scripted fallback
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from decimal import Decimal
from typing import Any, Dict, Optional

from mindshift_assist.domain.cost import TokenRates, calculate_cost
from mindshift_assist.domain.errors import ModelError, ModelTimeoutError
from mindshift_assist.domain.fallback import fallback_message, fallback_result
from mindshift_assist.domain.formatting import format_ai_response
from mindshift_assist.domain.limits import LimitDecision, LimitPolicy
from mindshift_assist.domain.models import (
    AssistanceRequest,
    AssistanceResult,
    LinguisticInterpretationResult,
    ModelCompletion,
    SessionUsage,
    SystemStats,
)
from mindshift_assist.domain.prompts import (
    build_assistance_prompt,
    build_linguistic_interpretation_prompt,
)
from mindshift_assist.domain.stats import aggregate_system_stats

# Interfaces
from mindshift_assist.domain.interfaces.ievent_emitter import IEventEmitter
from mindshift_assist.domain.interfaces.imetric_collector import IMetricCollector
from mindshift_assist.domain.interfaces.imodel_invoker import IModelInvoker
from mindshift_assist.domain.interfaces.iredaction_filter import IRedactionFilter

from mindshift_assist.infrastructure.ledger.ledger import UsageLedger
from mindshift_assist.infrastructure.telemetry import (
    annotate_llm_span,
    llm_span,
    log_event,
)


class AssistanceOrchestrator:
    # Depends purely on interfaces; one instance per process, passed to callers
    def __init__(
        self,
        model_invoker: IModelInvoker,
        ledger: UsageLedger,
        limit_policy: LimitPolicy,
        rates: TokenRates,
        redaction: IRedactionFilter,
        metric_collector: IMetricCollector,
        event_emitter: IEventEmitter,
        model_name: str = "",
        timeout_seconds: float = 10.0,
        max_workers: int = 8,
    ) -> None:
        self._invoker = model_invoker
        self._ledger = ledger
        self._policy = limit_policy
        self._rates = rates
        self._redaction = redaction
        self._metrics = metric_collector
        self._events = event_emitter
        self._model_name = model_name
        self._timeout_seconds = timeout_seconds
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="model-invoker",
        )

    # ------------------------------------------------------------------
    # Public boundary: both process_* methods always return a usable result
    # ------------------------------------------------------------------

    def process_assistance_request(self, request: AssistanceRequest) -> AssistanceResult:
        session_id = request.session_id
        usage = self._ledger.track(session_id)
        ctx = self._context(request.session_id, request.current_step_id)
        ctx["action"] = request.trigger.action.value

        log_event(
            event_type="assistance_request",
            message="Received assistance request",
            extra_fields={
                **ctx,
                "condition": self._redaction.preview(request.trigger.condition),
                "user_input": self._redaction.preview(request.user_input),
                "call_count": usage.call_count,
            },
        )

        decision = self._policy.evaluate(usage, self._ledger.now())
        if decision.exceeded:
            self._on_budget_exceeded(usage, decision, ctx)
            return fallback_result(request)

        linguistic = request.linguistic_step is not None
        prompt = build_assistance_prompt(request)
        completion = self._invoke(prompt, linguistic, ctx)
        if completion is None:
            return fallback_result(request)

        cost = self._record_completion(session_id, completion, ctx)
        message = format_ai_response(completion.content)
        if not message:
            # # Tokens were spent; keep the accounting but serve scripted text
            self._record_fallback("empty_response", ctx)
            message = fallback_message(request)

        log_event(
            event_type="assistance_completed",
            message="Assistance served from model output",
            extra_fields={
                **ctx,
                "served_by": completion.model,
                "total_tokens": completion.total_tokens,
                "cost": str(cost),
                "cost_per_minute": str(decision.cost_per_minute),
            },
        )

        return AssistanceResult(
            message=message,
            token_count=completion.total_tokens,
            cost=cost,
            used_model=True,
        )

    def process_linguistic_interpretation(
        self,
        scripted_response: str,
        user_input: str,
        step_id: str,
        session_id: str,
    ) -> LinguisticInterpretationResult:
        usage = self._ledger.track(session_id)
        ctx = self._context(session_id, step_id)

        decision = self._policy.evaluate(usage, self._ledger.now())
        if decision.exceeded:
            self._on_budget_exceeded(usage, decision, ctx)
            return self._scripted_interpretation(scripted_response)

        prompt = build_linguistic_interpretation_prompt(scripted_response, user_input, step_id)
        completion = self._invoke(prompt, True, ctx)
        if completion is None:
            return self._scripted_interpretation(scripted_response)

        cost = self._record_completion(session_id, completion, ctx)
        improved = format_ai_response(completion.content)

        log_event(
            event_type="linguistic_interpretation",
            message="Linguistic interpretation completed",
            extra_fields={
                **ctx,
                "user_input": self._redaction.preview(user_input),
                "improved_response": self._redaction.preview(improved),
                "total_tokens": completion.total_tokens,
                "cost": str(cost),
            },
        )

        if not improved:
            self._record_fallback("empty_response", ctx)
            return LinguisticInterpretationResult(
                success=False,
                improved_response=scripted_response,
                fallback_to_scripted=True,
                cost=cost,
                tokens=completion.total_tokens,
            )

        return LinguisticInterpretationResult(
            success=True,
            improved_response=improved,
            fallback_to_scripted=False,
            cost=cost,
            tokens=completion.total_tokens,
        )

    def get_usage_stats(self, session_id: str) -> Optional[SessionUsage]:
        return self._ledger.get(session_id)

    def get_system_stats(self) -> SystemStats:
        return aggregate_system_stats(self._ledger.all())

    def close(self) -> None:
        # # Release worker threads and the backend connection; in-flight calls are not awaited
        self._executor.shutdown(wait=False)
        close_invoker = getattr(self._invoker, "close", None)
        if callable(close_invoker):
            close_invoker()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _context(self, session_id: str, step_id: str) -> Dict[str, Any]:
        return {
            "session_id": session_id,
            "step_id": step_id,
            "model": self._model_name,
        }

    def _invoke(
        self,
        prompt: str,
        linguistic: bool,
        ctx: Dict[str, Any],
    ) -> Optional[ModelCompletion]:
        # # Fallible call as a result: a completion, or None after a logged ModelError
        try:
            with llm_span(model_name=self._model_name or "unknown"):
                annotate_llm_span(
                    input_data=self._redaction.redact_text(prompt),
                    metadata=self._redaction.redact_payload({**ctx, "linguistic": linguistic}),
                )
                completion = self._call_with_timeout(prompt, linguistic)
                annotate_llm_span(
                    output_data=self._redaction.redact_text(completion.content),
                    metrics={
                        "input_tokens": completion.input_tokens,
                        "output_tokens": completion.output_tokens,
                        "total_tokens": completion.total_tokens,
                    },
                )
        except ModelError as exc:
            self._record_fallback("model_error", ctx)
            log_event(
                event_type="assistance_fallback",
                message="Model invocation failed, serving scripted fallback",
                level=logging.WARNING,
                extra_fields={
                    **ctx,
                    "reason": "model_error",
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            return None
        return completion

    def _call_with_timeout(self, prompt: str, linguistic: bool) -> ModelCompletion:
        # # The outbound call is the only suspension point; bound the wait
        future = self._executor.submit(self._invoker.invoke, prompt, linguistic)
        try:
            return future.result(timeout=self._timeout_seconds)
        except FutureTimeoutError as exc:
            future.cancel()
            raise ModelTimeoutError(
                f"No completion within {self._timeout_seconds}s"
            ) from exc

    def _record_completion(
        self,
        session_id: str,
        completion: ModelCompletion,
        ctx: Dict[str, Any],
    ) -> Decimal:
        cost = calculate_cost(completion.input_tokens, completion.output_tokens, self._rates)
        self._ledger.update(session_id, completion.total_tokens, cost)

        self._metrics.record_latency_ms(completion.latency_ms, **ctx)
        self._metrics.record_tokens(
            completion.input_tokens,
            completion.output_tokens,
            completion.total_tokens,
            **ctx,
        )
        self._metrics.record_cost(cost, **ctx)
        return cost

    def _record_fallback(self, reason: str, ctx: Dict[str, Any]) -> None:
        self._metrics.record_fallback(reason, **ctx)

    def _on_budget_exceeded(
        self,
        usage: SessionUsage,
        decision: LimitDecision,
        ctx: Dict[str, Any],
    ) -> None:
        self._record_fallback("budget", ctx)
        log_event(
            event_type="budget_exceeded",
            message="Session limits exceeded, serving scripted fallback",
            extra_fields={
                **ctx,
                "reason": decision.reason,
                "usage": usage.to_observability_payload(),
                "cost_per_minute": str(decision.cost_per_minute),
            },
        )

        # # The flag lives on the ledger entry and is dropped with it on eviction
        if self._ledger.mark_budget_notified(usage.session_id):
            self._events.emit_budget_exceeded_event(
                usage.session_id,
                decision.reason,
                usage.call_count,
                usage.total_cost,
            )

    @staticmethod
    def _scripted_interpretation(scripted_response: str) -> LinguisticInterpretationResult:
        return LinguisticInterpretationResult(
            success=False,
            improved_response=scripted_response,
            fallback_to_scripted=True,
        )
