# Deterministic zero-cost text used whenever the model is skipped or fails
from typing import Dict

from mindshift_assist.domain.models import AssistanceRequest, AssistanceResult, TriggerAction
from mindshift_assist.domain.prompts import SIMPLIFY_SCRIPT
from mindshift_assist.domain.templates import template_response

_FALLBACK_MESSAGES: Dict[TriggerAction, str] = {
    TriggerAction.CLARIFY: (
        "Take a moment to notice what you're feeling. What do you notice in your body?"
    ),
    TriggerAction.FOCUS: (
        "Let's focus on just one problem for now. Which issue feels most important to you?"
    ),
    TriggerAction.SIMPLIFY: SIMPLIFY_SCRIPT,
    TriggerAction.REDIRECT: (
        "Let's return to the current step. What are you feeling in your body?"
    ),
    TriggerAction.GENERAL: "Please continue with the current step of the process.",
}


def fallback_message(request: AssistanceRequest) -> str:
    # # Linguistic steps restate the scripted template with the user's verbatim words
    if request.linguistic_step is not None:
        return template_response(request.current_step_id, request.user_input)
    return _FALLBACK_MESSAGES[request.trigger.action]


def fallback_result(request: AssistanceRequest) -> AssistanceResult:
    return AssistanceResult(message=fallback_message(request))
