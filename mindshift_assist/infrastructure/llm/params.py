from dataclasses import dataclass

from mindshift_assist.infrastructure.config.settings import Settings


@dataclass(frozen=True)
class GenerationParams:
    max_tokens: int
    temperature: float


def generation_params(linguistic: bool, settings: Settings) -> GenerationParams:
    # # Linguistic smoothing favours determinism, guidance favours variety
    if linguistic:
        return GenerationParams(
            max_tokens=settings.linguistic_max_tokens,
            temperature=settings.linguistic_temperature,
        )
    return GenerationParams(
        max_tokens=settings.default_max_tokens,
        temperature=settings.default_temperature,
    )
