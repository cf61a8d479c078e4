"""Tests for response formatting and cost calculation."""

from decimal import Decimal

import pytest

from mindshift_assist.domain.cost import TokenRates, calculate_cost
from mindshift_assist.domain.formatting import format_ai_response


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('"Which problem matters most?"', "Which problem matters most?"),
        ('  "Feel heavy... what happens?"  \n', "Feel heavy... what happens?"),
        ("No quotes here.", "No quotes here."),
        ('Say "stop" when ready', 'Say "stop" when ready'),
        ('"leading only', "leading only"),
        ("", ""),
    ],
)
def test_format_ai_response(raw, expected) -> None:
    assert format_ai_response(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ['""doubled""', ' " spaced " ', '"a"b"', "plain", '"', "  ", 'you had "more" money'],
)
def test_format_ai_response_is_idempotent(raw) -> None:
    once = format_ai_response(raw)
    assert format_ai_response(once) == once


def test_format_keeps_interior_content() -> None:
    raw = '"Feel "overwhelmed"... what happens in yourself?"'
    assert format_ai_response(raw) == 'Feel "overwhelmed"... what happens in yourself?'


# ---------------------------------------------------------------------------
# Cost
# ---------------------------------------------------------------------------

def test_cost_uses_per_thousand_rates() -> None:
    rates = TokenRates()

    assert calculate_cost(1000, 0, rates) == Decimal("0.00015")
    assert calculate_cost(0, 1000, rates) == Decimal("0.0006")
    assert calculate_cost(1000, 1000, rates) == Decimal("0.00075")


def test_cost_is_additive() -> None:
    rates = TokenRates()

    a = calculate_cost(120, 30, rates)
    b = calculate_cost(480, 120, rates)

    assert calculate_cost(600, 150, rates) == a + b


def test_cost_of_zero_tokens_is_zero() -> None:
    assert calculate_cost(0, 0, TokenRates()) == 0


def test_custom_rates() -> None:
    rates = TokenRates(input_per_1k=Decimal("0.01"), output_per_1k=Decimal("0.03"))
    assert calculate_cost(500, 100, rates) == Decimal("0.008")
