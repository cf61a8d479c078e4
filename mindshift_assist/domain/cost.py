from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

_PER_THOUSAND = Decimal(1000)


@dataclass(frozen=True)
class TokenRates:
    # # Currency per 1,000 tokens, defaults match gpt-4o-mini pricing
    input_per_1k: Decimal = Decimal("0.00015")
    output_per_1k: Decimal = Decimal("0.0006")


def calculate_cost(input_tokens: int, output_tokens: int, rates: TokenRates) -> Decimal:
    # # Linear in both token counts so per-call costs add up exactly in the ledger
    return (
        Decimal(max(0, int(input_tokens))) * rates.input_per_1k
        + Decimal(max(0, int(output_tokens))) * rates.output_per_1k
    ) / _PER_THOUSAND
