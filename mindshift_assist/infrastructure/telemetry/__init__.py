# # TELEMETRY PUBLIC API
# # Raw collectors (logs, spans, metrics, events) for the orchestrator and other layers.

# --- Tracing ---
from .tracing.llmobs import (
    annotate_llm_span,
    llm_span,
)

# --- Logging ---
from .logging.log_collector import (
    log_event,
    configure_observability_logger,
)

# --- Metrics ---
from .metrics.metric_collector_adapter import (
    DatadogMetricCollector,
    NoOpMetricCollector,
)

# --- Events ---
from .events.datadog_events import (
    DatadogEventEmitter,
    NoOpEventEmitter,
)

__all__ = [
    # tracing
    "annotate_llm_span",
    "llm_span",

    # logging
    "log_event",
    "configure_observability_logger",

    # metrics
    "DatadogMetricCollector",
    "NoOpMetricCollector",

    # events
    "DatadogEventEmitter",
    "NoOpEventEmitter",
]
