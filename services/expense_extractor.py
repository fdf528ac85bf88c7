# FILE: services/expense_extractor.py
import re
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Sequence, Tuple

from models.expense import DEFAULT_CATEGORY, DEFAULT_DESCRIPTION, ParsedExpense
from services.date_resolver import get_today

# Keyword → category, evaluated top to bottom; first hit wins
CATEGORY_KEYWORDS: Sequence[Tuple[str, Tuple[str, ...]]] = (
    ("Alimentação", ("mercado", "comida", "alimentação", "alimentacao", "restaurante",
                     "lanche", "padaria", "ifood", "almoço", "almoco", "jantar")),
    ("Transporte", ("uber", "transporte", "gasolina", "combustível", "combustivel",
                    "ônibus", "onibus", "metrô", "metro", "taxi", "táxi")),
    ("Moradia", ("aluguel", "moradia", "casa", "condomínio", "condominio")),
    ("Lazer", ("lazer", "cinema", "diversão", "diversao", "netflix", "show")),
    ("Saúde", ("remédio", "remedio", "saúde", "saude", "médico", "medico",
               "farmácia", "farmacia", "dentista")),
)

_amount_re = re.compile(r"(\d+(?:[.,]\d{2})?)")
_digits_re = re.compile(r"\d+")


def extract_amount(text: str) -> Decimal:
    """First numeral in the text, decimal comma normalized. Zero when absent."""
    m = _amount_re.search(text or "")
    if not m:
        return Decimal("0")
    return Decimal(m.group(1).replace(",", "."))


def classify_category(text: str, vocabulary: Sequence[str] = ()) -> str:
    lowered = (text or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if vocabulary and category not in vocabulary:
            continue
        if any(kw in lowered for kw in keywords):
            return category
    return DEFAULT_CATEGORY


def clean_description(text: str) -> str:
    stripped = _digits_re.sub("", text or "")
    return " ".join(stripped.split()) or DEFAULT_DESCRIPTION


class ExpenseTextExtractor:
    """
    Regex/keyword extraction used when the model-backed parser is unavailable.
    """

    def __init__(
        self,
        vocabulary: Sequence[str] = (),
        today: Optional[Callable[[], date]] = None,
    ):
        self.vocabulary = tuple(vocabulary)
        self.today = today or get_today

    def extract(self, message: str) -> ParsedExpense:
        amount = extract_amount(message)
        return ParsedExpense(
            amount=amount,
            category=classify_category(message, self.vocabulary),
            description=clean_description(message),
            date=self.today(),
            is_valid=amount > 0,
        )
