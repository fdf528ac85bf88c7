# FILE: services/keyword_classifier.py
"""
Deterministic, offline intent classifier.

Used whenever the model-backed classifier is unavailable or returns something
unusable. Rules are evaluated in a fixed priority order and the first match wins,
so "quanto gastei 50" is an expense even though it also looks like a report.
"""

import re
from typing import Iterable

from core.intent import IntentAnalysis, IntentParameters, IntentType

_DIGIT_RE = re.compile(r"\d")

EXPENSE_KEYWORDS = ("gastei", "paguei", "comprei", "gasto", "despesa", "valor", "reais", "r$")

REPORT_KEYWORDS = (
    "quanto", "gastei", "relatório", "relatorio", "resumo", "total",
    "hoje", "mês", "semana",
)

ANALYSIS_KEYWORDS = (
    "analise", "análise", "saúde financeira", "saude financeira", "como estou",
    "avaliação", "avaliacao", "insights", "tendências", "tendencias",
)

# Matched as whole words: "oi" must not fire inside "dois" or "noite"
CONVERSATION_KEYWORDS = (
    "oi", "olá", "ola", "como você está", "como voce esta", "conte sobre",
    "me fale", "bom dia", "boa tarde", "boa noite",
)

HELP_KEYWORDS = ("ajuda", "help")


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(kw in text for kw in keywords)


def _contains_any_word(text: str, keywords: Iterable[str]) -> bool:
    return any(re.search(rf"(?<!\w){re.escape(kw)}(?!\w)", text) for kw in keywords)


class KeywordFallbackClassifier:
    """
    Rule-based intent guesser over the lower-cased message.
    Produces the same IntentAnalysis schema as the model path.
    """

    def classify(self, message: str) -> IntentAnalysis:
        text = (message or "").lower()

        if _DIGIT_RE.search(text) and _contains_any(text, EXPENSE_KEYWORDS):
            return IntentAnalysis(
                type=IntentType.EXPENSE,
                intent="registrar despesa",
                confidence=0.8,
            )

        if _contains_any(text, REPORT_KEYWORDS):
            return IntentAnalysis(
                type=IntentType.REPORT,
                intent="consultar gastos",
                parameters=IntentParameters(period="month"),
                confidence=0.7,
            )

        if _contains_any(text, ANALYSIS_KEYWORDS):
            return IntentAnalysis(
                type=IntentType.ANALYSIS,
                intent="análise financeira",
                parameters=IntentParameters(analysis_type="health"),
                confidence=0.8,
            )

        if _contains_any_word(text, CONVERSATION_KEYWORDS):
            return IntentAnalysis(
                type=IntentType.CONVERSATION,
                intent="conversa geral",
                confidence=0.9,
            )

        if _contains_any(text, HELP_KEYWORDS):
            return IntentAnalysis(
                type=IntentType.HELP,
                intent="pedido de ajuda",
                confidence=0.9,
            )

        return IntentAnalysis(
            type=IntentType.UNKNOWN,
            intent="não identificado",
            confidence=0.1,
        )
