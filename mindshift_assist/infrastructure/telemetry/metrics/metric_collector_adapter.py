# Adapters turning metric_collector functions into interface implementations

from decimal import Decimal

from mindshift_assist.domain.interfaces.imetric_collector import IMetricCollector
from mindshift_assist.infrastructure.telemetry.metrics.metric_collector import (
    record_fallback,
    record_llm_cost,
    record_llm_latency_ms,
    record_llm_tokens,
)


class DatadogMetricCollector(IMetricCollector):
    # Records latency in ms
    def record_latency_ms(self, latency: float, **ctx) -> None:
        record_llm_latency_ms(latency, None, **ctx)

    # Records token counts
    def record_tokens(
        self,
        input_tokens: int,
        output_tokens: int,
        total_tokens: int,
        **ctx,
    ) -> None:
        record_llm_tokens(input_tokens, output_tokens, total_tokens, None, **ctx)

    # Records computed cost
    def record_cost(self, cost: Decimal, **ctx) -> None:
        record_llm_cost(float(cost), None, **ctx)

    # Records a served fallback
    def record_fallback(self, reason: str, **ctx) -> None:
        record_fallback(reason, None, **ctx)


class NoOpMetricCollector(IMetricCollector):
    # Used when telemetry is disabled
    def record_latency_ms(self, latency: float, **ctx) -> None:
        return None

    def record_tokens(self, input_tokens: int, output_tokens: int, total_tokens: int, **ctx) -> None:
        return None

    def record_cost(self, cost: Decimal, **ctx) -> None:
        return None

    def record_fallback(self, reason: str, **ctx) -> None:
        return None
