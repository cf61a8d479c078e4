from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict

from pydantic import BaseModel, Field

from mindshift_assist.domain.models import (
    AITrigger,
    AssistanceRequest,
    AssistanceResult,
    LinguisticInterpretationResult,
    SessionUsage,
    SystemStats,
    TriggerAction,
)


class TriggerSchema(BaseModel):
    condition: str = Field(default="", description="Why the protocol asked for assistance")
    action: str = Field(default=TriggerAction.GENERAL.value, description="clarify, focus, simplify or redirect")


class AssistanceRequestSchema(BaseModel):
    trigger: TriggerSchema
    user_input: str
    session_id: str = Field(min_length=1)
    current_step_id: str
    expected_response_type: str = ""
    prior_responses: Dict[str, str] = Field(default_factory=dict)

    def to_domain(self) -> AssistanceRequest:
        # # Unknown actions become the generic guidance variant
        return AssistanceRequest(
            trigger=AITrigger(
                condition=self.trigger.condition,
                action=TriggerAction.parse(self.trigger.action),
            ),
            user_input=self.user_input,
            session_id=self.session_id,
            current_step_id=self.current_step_id,
            expected_response_type=self.expected_response_type,
            prior_responses=dict(self.prior_responses),
        )


class AssistanceResponseSchema(BaseModel):
    message: str
    should_return_to_script: bool
    token_count: int
    cost: Decimal

    @classmethod
    def from_domain(cls, result: AssistanceResult) -> "AssistanceResponseSchema":
        return cls(
            message=result.message,
            should_return_to_script=result.should_return_to_script,
            token_count=result.token_count,
            cost=result.cost,
        )


class LinguisticRequestSchema(BaseModel):
    scripted_response: str
    user_input: str
    step_id: str
    session_id: str = Field(min_length=1)


class LinguisticResponseSchema(BaseModel):
    success: bool
    improved_response: str
    fallback_to_scripted: bool
    cost: Decimal
    tokens: int

    @classmethod
    def from_domain(cls, result: LinguisticInterpretationResult) -> "LinguisticResponseSchema":
        return cls(
            success=result.success,
            improved_response=result.improved_response,
            fallback_to_scripted=result.fallback_to_scripted,
            cost=result.cost,
            tokens=result.tokens,
        )


class SessionUsageSchema(BaseModel):
    session_id: str
    call_count: int
    total_tokens: int
    total_cost: Decimal
    session_start: datetime

    @classmethod
    def from_domain(cls, usage: SessionUsage) -> "SessionUsageSchema":
        return cls(
            session_id=usage.session_id,
            call_count=usage.call_count,
            total_tokens=usage.total_tokens,
            total_cost=usage.total_cost,
            session_start=usage.session_start,
        )


class SystemStatsSchema(BaseModel):
    total_sessions: int
    sessions_with_ai: int
    ai_usage_percentage: float
    avg_cost_per_session: Decimal
    avg_tokens_per_session: float

    @classmethod
    def from_domain(cls, stats: SystemStats) -> "SystemStatsSchema":
        return cls(
            total_sessions=stats.total_sessions,
            sessions_with_ai=stats.sessions_with_ai,
            ai_usage_percentage=stats.ai_usage_percentage,
            avg_cost_per_session=stats.avg_cost_per_session,
            avg_tokens_per_session=stats.avg_tokens_per_session,
        )
