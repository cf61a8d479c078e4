# Scripted sentences the protocol speaks when it quotes the user back
from typing import Callable, Dict

from mindshift_assist.domain.models import LinguisticStep


_TEMPLATES: Dict[str, Callable[[str], str]] = {
    LinguisticStep.FEEL_SOLUTION_STATE.value: (
        lambda r: f'What would you feel like if "{r}" had already happened?'
    ),
    "feel_good_state": (
        lambda r: f'Feel "{r}"... what does "{r}" feel like?'
    ),
    LinguisticStep.BODY_SENSATION_CHECK.value: (
        lambda r: f'Feel "{r}"... what happens in yourself when you feel "{r}"?'
    ),
    "deeper_feeling_inquiry": (
        lambda r: f'Feel "{r}"... what does "{r}" feel like in your body?'
    ),
    "sensation_progression": (
        lambda r: f'Feel "{r}"... what happens to "{r}" when you feel "{r}"?'
    ),
}


def _default_template(response: str) -> str:
    return f'Feel "{response}"... what does that feel like?'


def template_response(step_id: str, user_response: str) -> str:
    # # Render the verbatim scripted sentence for a step
    render = _TEMPLATES.get(step_id, _default_template)
    return render(user_response)
