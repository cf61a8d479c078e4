# Builds a fully wired orchestrator instance with all concrete implementations
from typing import Optional

# Model backends
from mindshift_assist.domain.interfaces.imodel_invoker import IModelInvoker
from mindshift_assist.infrastructure.llm.openai.client import OpenAIModelInvoker

# Ledger
from mindshift_assist.domain.interfaces.iusage_store import IUsageStore
from mindshift_assist.infrastructure.ledger.ledger import UsageLedger
from mindshift_assist.infrastructure.ledger.usage_store import (
    ExpiringUsageStore,
    InMemoryUsageStore,
)

# Policy and pricing
from mindshift_assist.domain.cost import TokenRates
from mindshift_assist.domain.limits import LimitPolicy

# Enrichment + telemetry
from mindshift_assist.observability.enrichment import RedactionConfig, RedactionFilter
from mindshift_assist.infrastructure.telemetry import (
    DatadogEventEmitter,
    DatadogMetricCollector,
    NoOpEventEmitter,
    NoOpMetricCollector,
)

# Config
from mindshift_assist.infrastructure.config.settings import Settings, get_settings

# Orchestrator class
from mindshift_assist.application.orchestrators.assistance_orchestrator import AssistanceOrchestrator


def build_model_invoker(settings: Settings) -> IModelInvoker:
    # Nothing here touches credentials; they are checked on the first call
    if settings.llm_provider == "vertex":
        # Imported lazily so the OpenAI path does not load the Vertex SDK
        from mindshift_assist.infrastructure.llm.vertex.client import VertexModelInvoker

        return VertexModelInvoker(settings)
    return OpenAIModelInvoker(settings)


def build_usage_store(settings: Settings) -> IUsageStore:
    if settings.usage_store_backend == "expiring":
        return ExpiringUsageStore(ttl_seconds=settings.usage_ttl_seconds)
    return InMemoryUsageStore()


def model_name_for(settings: Settings) -> str:
    if settings.llm_provider == "vertex":
        return settings.vertex_model_name
    return settings.openai_model


def build_assistance_orchestrator(
    settings: Optional[Settings] = None,
    model_invoker: Optional[IModelInvoker] = None,
    ledger: Optional[UsageLedger] = None,
) -> AssistanceOrchestrator:
    settings = settings or get_settings()

    if settings.telemetry_enabled:
        metric_collector = DatadogMetricCollector()
        event_emitter = DatadogEventEmitter()
    else:
        metric_collector = NoOpMetricCollector()
        event_emitter = NoOpEventEmitter()

    return AssistanceOrchestrator(
        model_invoker=model_invoker or build_model_invoker(settings),
        ledger=ledger or UsageLedger(build_usage_store(settings)),
        limit_policy=LimitPolicy(
            max_calls=settings.max_calls_per_session,
            target_cost=settings.target_cost_per_session,
        ),
        rates=TokenRates(
            input_per_1k=settings.input_rate_per_1k,
            output_per_1k=settings.output_rate_per_1k,
        ),
        redaction=RedactionFilter(RedactionConfig()),
        metric_collector=metric_collector,
        event_emitter=event_emitter,
        model_name=model_name_for(settings),
        timeout_seconds=settings.model_timeout_seconds,
    )
