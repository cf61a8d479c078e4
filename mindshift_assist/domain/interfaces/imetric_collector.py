# Sends metric values to datadog or other sinks
from decimal import Decimal
from typing import Protocol


class IMetricCollector(Protocol):
    # Records model latency
    def record_latency_ms(self, latency: float, **ctx) -> None:
        ...

    # Records token counts
    def record_tokens(self, input_tokens: int, output_tokens: int, total_tokens: int, **ctx) -> None:
        ...

    # Records computed cost
    def record_cost(self, cost: Decimal, **ctx) -> None:
        ...

    # Records a fallback served instead of model text
    def record_fallback(self, reason: str, **ctx) -> None:
        ...
