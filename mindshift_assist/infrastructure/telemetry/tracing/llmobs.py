from __future__ import annotations

import contextlib
from typing import Any, ContextManager, Dict, Optional

from ddtrace.llmobs import LLMObs


def llm_span(model_name: str, name: str = "assistance_completion") -> ContextManager[Any]:
    # # Datadog LLM span when LLM Observability is enabled, otherwise a no-op context
    if not LLMObs.enabled:
        return contextlib.nullcontext()
    return LLMObs.llm(model_name=model_name, name=name)


def annotate_llm_span(
    input_data: Any = None,
    output_data: Any = None,
    metadata: Optional[Dict[str, Any]] = None,
    metrics: Optional[Dict[str, Any]] = None,
) -> None:
    # # Annotate the active LLMObs span; skipped while LLMObs is disabled
    if not LLMObs.enabled:
        return
    LLMObs.annotate(
        input_data=input_data,
        output_data=output_data,
        metadata=metadata,
        metrics=metrics,
    )
