from datetime import date
from decimal import Decimal

import pytest

from services.expense_extractor import (
    ExpenseTextExtractor,
    classify_category,
    clean_description,
    extract_amount,
)

TODAY = date(2025, 3, 15)
extractor = ExpenseTextExtractor(today=lambda: TODAY)


def test_gastei_50_no_mercado():
    parsed = extractor.extract("gastei 50 no mercado")
    assert parsed.amount == Decimal("50")
    assert parsed.category == "Alimentação"
    assert parsed.is_valid is True
    assert parsed.date == TODAY


@pytest.mark.parametrize(
    "text, expected",
    [
        ("gastei 25,90 no uber", Decimal("25.90")),
        ("paguei 1200.00 de aluguel", Decimal("1200.00")),
        ("comprei remédio por 45", Decimal("45")),
        ("gastei 10 e depois 20", Decimal("10")),
        ("sem valor", Decimal("0")),
    ],
)
def test_extract_amount(text, expected):
    assert extract_amount(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("gastei 25 no uber", "Transporte"),
        ("paguei 1200 de aluguel", "Moradia"),
        ("ingresso do cinema 40", "Lazer"),
        ("comprei remédio por 45", "Saúde"),
        ("presente 80", "Outros"),
    ],
)
def test_classify_category(text, expected):
    assert classify_category(text) == expected


def test_category_restricted_to_vocabulary():
    assert classify_category("uber 20", vocabulary=("Alimentação", "Outros")) == "Outros"


def test_clean_description_strips_digits_and_collapses_spaces():
    assert clean_description("gastei  50   no mercado") == "gastei no mercado"
    assert clean_description("50") == "Despesa"


def test_zero_amount_is_invalid():
    parsed = extractor.extract("gastei no mercado")
    assert parsed.amount == Decimal("0")
    assert parsed.is_valid is False
