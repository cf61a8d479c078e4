# Defines the contract for an external completion backend
from typing import Protocol

from mindshift_assist.domain.models import ModelCompletion


class IModelInvoker(Protocol):
    # Sends one prompt as a single system message; raises ModelError on failure
    def invoke(self, prompt: str, linguistic: bool) -> ModelCompletion:
        ...
