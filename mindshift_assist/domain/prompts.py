"""Prompt construction for the two assistance families.

Linguistic-interpretation prompts are few-shot and only smooth the user's own
words into a fixed scripted sentence. Minimal-guidance prompts carry one
instruction per trigger action with the word ceiling written into the text.

Every prompt embeds only the current step id, the expected response type, the
raw user text and the trigger condition. Nothing else from the session is
sent to the model.
"""

from __future__ import annotations

from typing import Dict

from mindshift_assist.domain.models import (
    AssistanceRequest,
    LinguisticStep,
    TriggerAction,
)
from mindshift_assist.domain.templates import template_response

SIMPLIFY_SCRIPT = (
    "I'm just going to stop you there because in order to apply a Mind Shifting "
    "method to this we need to define the problem, so please can you tell me what "
    "the problem is in a few words."
)

_BODY_SENSATION_PROMPT = """You are a linguistic interpreter for Mind Shifting sessions. Your task is to contextualize the user's feeling response.

User's response: "{user_input}"
Current scripted response: "{scripted_response}"

Task: Extract the core emotion/feeling from the user's response and use it in the template.

Template: "Feel [contextualized emotion]... what happens in yourself when you feel [contextualized emotion]?"

Rules:
1. Extract the core emotional word from the user's response
2. Remove unnecessary words like "like I am", "I feel", "it's", etc.
3. Use only the core emotion in the template
4. Keep the exact template structure
5. Return only the rephrased response, nothing else

Examples:
- User: "like I am overwhelmed" → "Feel overwhelmed... what happens in yourself when you feel overwhelmed?"
- User: "I feel anxious" → "Feel anxious... what happens in yourself when you feel anxious?"
- User: "it's stressful" → "Feel stressed... what happens in yourself when you feel stressed?"
- User: "heavy" → "Feel heavy... what happens in yourself when you feel heavy?"

Extract the core emotion and apply the template now:"""

_FEEL_SOLUTION_PROMPT = """You are a linguistic interpreter for Mind Shifting sessions. Your task is to contextualize the user's response into a natural past-tense phrase.

User's response: "{user_input}"
Current scripted response: "{scripted_response}"

Task: Transform the user's response into a natural, past-tense phrase that completes "What would you feel like if...?"

Rules:
1. Convert the user's response to natural past tense
2. Make it sound conversational, not robotic
3. Keep the user's core meaning intact
4. Return ONLY the contextualized phrase (what goes in the quotes), not the full question
5. Do not include "had already happened" - that's redundant

Examples:
- User: "more money" → "you had more money"
- User: "better job" → "you had a better job"
- User: "lose weight" → "you had lost weight"
- User: "money issues need to be solved" → "your money issues were solved"
- User: "relationship" → "you were in that relationship"
- User: "be happy" → "you were happy"

Transform the user's response into a past-tense phrase now:"""

_GENERIC_LINGUISTIC_PROMPT = """You are a linguistic interpreter for Mind Shifting sessions. Your task is to contextualize the user's response.

User's response: "{user_input}"
Current scripted response: "{scripted_response}"

Task: Make the response more natural and conversational while maintaining the therapeutic structure.

Rules:
1. Keep the therapeutic intent intact
2. Make it sound more conversational
3. Use the user's actual words naturally
4. Return only the rephrased response, nothing else

Rephrase now:"""

_REPHRASE_PROMPT = """You are a linguistic interpreter for therapeutic Mind Shifting sessions.

Current therapeutic step: {step_id}
User's response: "{user_input}"
Template response: "{template}"

Your task is to rephrase the template response to use natural, conversational language while maintaining the exact therapeutic structure and intent.

Rules:
1. Extract the core emotional state or desired outcome from the user's response
2. Use the user's actual emotional words naturally in the rephrased response
3. Keep the same question structure and therapeutic intent
4. Make it sound conversational, not robotic or repetitive
5. Do not change the therapeutic protocol or add new content
6. Return only the rephrased response, nothing else

Examples:
- Instead of: "What would you feel like if 'I need to feel happy' had already happened"
- Say: "What would you feel like if you already felt happy?"

- Instead of: "Feel 'I would feel good'... what does 'I would feel good' feel like?"
- Say: "Feel GOOD... what does GOOD feel like?"

Rephrase the template response now:"""

_LINGUISTIC_PROMPTS: Dict[LinguisticStep, str] = {
    LinguisticStep.BODY_SENSATION_CHECK: _BODY_SENSATION_PROMPT,
    LinguisticStep.FEEL_SOLUTION_STATE: _FEEL_SOLUTION_PROMPT,
}

_GUIDANCE: Dict[TriggerAction, str] = {
    TriggerAction.CLARIFY: (
        "The user seems stuck or confused. Provide a brief, gentle clarification to help "
        "them understand what's being asked. Keep it under 30 words and guide them back to "
        "the treatment protocol. Do not deviate from the Mind Shifting methodology."
    ),
    TriggerAction.FOCUS: (
        "The user mentioned multiple problems. Help them focus on just one problem for this "
        "session. Ask them to choose the most pressing issue. Keep response under 25 words."
    ),
    TriggerAction.SIMPLIFY: (
        "The user's response was too long or complex. This is a 30-second interruption case. "
        f'Use the exact Mind Shifting protocol: "{SIMPLIFY_SCRIPT}"'
    ),
    TriggerAction.REDIRECT: (
        "The user went off-topic. Gently redirect them back to the current step of the "
        "treatment. Keep response under 15 words."
    ),
    TriggerAction.GENERAL: (
        "Provide brief guidance to help the user continue with the treatment. "
        "Keep response under 20 words."
    ),
}


def build_linguistic_interpretation_prompt(
    scripted_response: str,
    user_input: str,
    step_id: str,
) -> str:
    """Few-shot prompt that splices the user's words into a scripted sentence.

    The two linguistic steps each have their own template; any other step id
    gets the generic rephrasing instruction.
    """
    step = LinguisticStep.from_step_id(step_id)
    template = _LINGUISTIC_PROMPTS[step] if step is not None else _GENERIC_LINGUISTIC_PROMPT
    return template.format(user_input=user_input, scripted_response=scripted_response)


def build_rephrase_prompt(request: AssistanceRequest) -> str:
    # # Template is rendered from the response the protocol stored for this step
    last_response = request.prior_responses.get(request.current_step_id, "")
    return _REPHRASE_PROMPT.format(
        step_id=request.current_step_id,
        user_input=request.user_input,
        template=template_response(request.current_step_id, last_response),
    )


def build_minimal_prompt(request: AssistanceRequest) -> str:
    """Trigger-action prompt restricted to the current turn."""
    base_context = (
        "You are assisting with Mind Shifting treatment.\n"
        f"Current step: {request.current_step_id}\n"
        f"Expected response type: {request.expected_response_type}\n"
        f'User said: "{request.user_input}"\n'
        f"Issue: {request.trigger.condition}"
    )
    return f"{base_context}\n\n{_GUIDANCE[request.trigger.action]}"


def build_assistance_prompt(request: AssistanceRequest) -> str:
    # # Linguistic steps get the rephrasing prompt, every other step the minimal one
    if request.linguistic_step is not None:
        return build_rephrase_prompt(request)
    return build_minimal_prompt(request)
