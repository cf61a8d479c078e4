# Assistance router; the orchestrator is created once per app and injected from app.state
from fastapi import APIRouter, Depends, HTTPException, Request

from mindshift_assist.api.schemas.assistance import (
    AssistanceRequestSchema,
    AssistanceResponseSchema,
    LinguisticRequestSchema,
    LinguisticResponseSchema,
    SessionUsageSchema,
    SystemStatsSchema,
)
from mindshift_assist.application.orchestrators.assistance_orchestrator import AssistanceOrchestrator

# Datadog LLMObs workflow decorator
from ddtrace.llmobs.decorators import workflow


router = APIRouter(prefix="/api/v1", tags=["assistance"])


def get_orchestrator(request: Request) -> AssistanceOrchestrator:
    # Explicit per-process instance, no hidden singleton
    return request.app.state.orchestrator


@router.post("/assistance", response_model=AssistanceResponseSchema)
@workflow()  # Datadog workflow root span
def assistance_endpoint(
    req: AssistanceRequestSchema,
    orchestrator: AssistanceOrchestrator = Depends(get_orchestrator),
) -> AssistanceResponseSchema:
    result = orchestrator.process_assistance_request(req.to_domain())
    return AssistanceResponseSchema.from_domain(result)


@router.post("/assistance/linguistic", response_model=LinguisticResponseSchema)
@workflow()
def linguistic_endpoint(
    req: LinguisticRequestSchema,
    orchestrator: AssistanceOrchestrator = Depends(get_orchestrator),
) -> LinguisticResponseSchema:
    result = orchestrator.process_linguistic_interpretation(
        scripted_response=req.scripted_response,
        user_input=req.user_input,
        step_id=req.step_id,
        session_id=req.session_id,
    )
    return LinguisticResponseSchema.from_domain(result)


@router.get("/usage", response_model=SystemStatsSchema)
def system_usage_endpoint(
    orchestrator: AssistanceOrchestrator = Depends(get_orchestrator),
) -> SystemStatsSchema:
    return SystemStatsSchema.from_domain(orchestrator.get_system_stats())


@router.get("/usage/{session_id}", response_model=SessionUsageSchema)
def session_usage_endpoint(
    session_id: str,
    orchestrator: AssistanceOrchestrator = Depends(get_orchestrator),
) -> SessionUsageSchema:
    usage = orchestrator.get_usage_stats(session_id)
    if usage is None:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    return SessionUsageSchema.from_domain(usage)
