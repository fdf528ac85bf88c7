import asyncio
import json
from datetime import date
from decimal import Decimal

import pytest

from services.expense_parser import ExpenseParser
from tests.fakes import FakeCompletionService

TODAY = date(2025, 3, 15)


def _parser(*replies):
    completion = FakeCompletionService(*replies)
    return ExpenseParser(completion, today=lambda: TODAY), completion


def test_model_extraction_is_finalized():
    parser, completion = _parser(
        json.dumps(
            {
                "amount": 32.5,
                "category": "alimentação",
                "description": "Almoço no restaurante",
                "date": "2019-01-01",
                "isValid": True,
            }
        )
    )

    parsed = asyncio.run(parser.parse("almocei por 32,50"))

    assert parsed.amount == Decimal("32.5")
    assert parsed.category == "Alimentação"
    assert parsed.description == "Almoço no restaurante"
    assert parsed.date == TODAY
    assert parsed.is_valid is True

    call = completion.calls[0]
    assert call["max_tokens"] == 200
    assert call["temperature"] == 0.1
    assert TODAY.isoformat() in call["prompt"]
    assert "5.2" in call["prompt"]


def test_unknown_category_becomes_outros_and_blank_description_default():
    parser, _ = _parser(json.dumps({"amount": 10, "category": "Pets", "description": " "}))
    parsed = asyncio.run(parser.parse("ração 10"))
    assert parsed.category == "Outros"
    assert parsed.description == "Despesa"


def test_zero_amount_from_model_is_invalid():
    parser, _ = _parser(json.dumps({"amount": 0, "category": "Outros", "isValid": True}))
    parsed = asyncio.run(parser.parse("gastei nada"))
    assert parsed.is_valid is False


@pytest.mark.parametrize(
    "reply",
    [
        "",
        "sem json aqui",
        json.dumps({"amount": -10, "category": "Outros"}),
        json.dumps({"category": "Outros"}),
        ConnectionError("offline"),
    ],
)
def test_failures_fall_back_to_extractor(reply):
    parser, _ = _parser(reply)
    parsed = asyncio.run(parser.parse("gastei 50 no mercado"))
    assert parsed.amount == Decimal("50")
    assert parsed.category == "Alimentação"
    assert parsed.is_valid is True
    assert parsed.date == TODAY


def test_without_completion_service():
    parser = ExpenseParser(None, today=lambda: TODAY)
    parsed = asyncio.run(parser.parse("gastei 25 no uber"))
    assert parsed.category == "Transporte"
    assert parsed.amount == Decimal("25")
