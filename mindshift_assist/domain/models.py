from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional


class TriggerAction(str, Enum):
    # Closed set of assistance actions the protocol can request
    CLARIFY = "clarify"
    FOCUS = "focus"
    SIMPLIFY = "simplify"
    REDIRECT = "redirect"
    GENERAL = "general"

    @classmethod
    def parse(cls, value: Any) -> "TriggerAction":
        # # Unknown action strings collapse into the generic guidance variant
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.GENERAL


class LinguisticStep(str, Enum):
    # Steps whose scripted text is smoothed with the user's own words
    BODY_SENSATION_CHECK = "body_sensation_check"
    FEEL_SOLUTION_STATE = "feel_solution_state"

    @classmethod
    def from_step_id(cls, step_id: str) -> Optional["LinguisticStep"]:
        # # Return the matching step or None for any other protocol step
        try:
            return cls(step_id)
        except ValueError:
            return None


@dataclass(frozen=True)
class AITrigger:
    # # Reason the scripted protocol asked for assistance on this turn
    condition: str
    action: TriggerAction = TriggerAction.GENERAL

    def __post_init__(self) -> None:
        # # Accept raw action strings from the protocol layer
        object.__setattr__(self, "action", TriggerAction.parse(self.action))


@dataclass
class AssistanceRequest:
    # # Input owned by the protocol state machine
    trigger: AITrigger
    user_input: str
    session_id: str
    current_step_id: str
    expected_response_type: str = ""
    prior_responses: Dict[str, str] = field(default_factory=dict)

    @property
    def linguistic_step(self) -> Optional[LinguisticStep]:
        return LinguisticStep.from_step_id(self.current_step_id)


@dataclass(frozen=True)
class AssistanceResult:
    # # The orchestrator never takes over the protocol, so should_return_to_script stays True
    message: str
    token_count: int = 0
    cost: Decimal = Decimal("0")
    should_return_to_script: bool = True
    used_model: bool = False


@dataclass(frozen=True)
class LinguisticInterpretationResult:
    success: bool
    improved_response: str
    fallback_to_scripted: bool
    cost: Decimal = Decimal("0")
    tokens: int = 0


@dataclass
class SessionUsage:
    # # Per-session counters held by the usage ledger
    session_id: str
    session_start: datetime
    call_count: int = 0
    total_tokens: int = 0
    total_cost: Decimal = Decimal("0")
    last_activity: Optional[datetime] = None
    budget_notified: bool = False

    def copy(self) -> "SessionUsage":
        return SessionUsage(
            session_id=self.session_id,
            session_start=self.session_start,
            call_count=self.call_count,
            total_tokens=self.total_tokens,
            total_cost=self.total_cost,
            last_activity=self.last_activity,
            budget_notified=self.budget_notified,
        )

    def to_observability_payload(self) -> Dict[str, Any]:
        # # Compact view for logs and stats endpoints
        return {
            "session_id": self.session_id,
            "session_start": self.session_start.isoformat(),
            "call_count": self.call_count,
            "total_tokens": self.total_tokens,
            "total_cost": str(self.total_cost),
        }


@dataclass(frozen=True)
class ModelCompletion:
    # # Successful model call with the service's own usage accounting
    content: str
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    model: str = ""
    latency_ms: float = 0.0


@dataclass(frozen=True)
class SystemStats:
    total_sessions: int
    sessions_with_ai: int
    ai_usage_percentage: float
    avg_cost_per_session: Decimal
    avg_tokens_per_session: float
