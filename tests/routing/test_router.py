import asyncio
import json
from datetime import date
from decimal import Decimal

import pytest

from core.intent import BASIC_INTENT_TYPES, IntentType
from services.date_resolver import get_today
from services.messaging import help_message
from services.router import build_intent_router
from tests.fakes import FakeCompletionService, InMemoryRecordStore

SENDER = "+5511999990000"


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def _intent(type_, confidence=0.9, **parameters):
    return json.dumps({"type": type_, "intent": "teste", "parameters": parameters, "confidence": confidence})


def _router(store, intent_replies=(), parsing_replies=(), response_replies=(), **kwargs):
    return build_intent_router(
        store,
        intent_completion=FakeCompletionService(*intent_replies),
        parsing_completion=FakeCompletionService(*parsing_replies),
        response_completion=FakeCompletionService(*response_replies),
        **kwargs,
    )


def _handle(router, text, sender=SENDER):
    return asyncio.run(router.handle(sender, text))


# ---------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------

def test_expense_is_recorded(store):
    router = _router(
        store,
        intent_replies=[_intent("expense", amount=50)],
        parsing_replies=[json.dumps({"amount": 50, "category": "Alimentação", "description": "mercado"})],
    )

    reply = _handle(router, "gastei 50 no mercado")

    assert reply.type is IntentType.EXPENSE
    assert "✅ Despesa registrada com sucesso!" in reply.message
    assert "R$ 50,00" in reply.message
    assert len(store.expenses) == 1
    saved = store.expenses[0]
    assert saved.amount == Decimal("50")
    assert saved.category_name == "Alimentação"
    assert store.users[SENDER].id == saved.user_id


def test_invalid_expense_asks_to_rephrase(store):
    router = _router(
        store,
        intent_replies=[_intent("expense")],
        parsing_replies=[json.dumps({"amount": 0, "isValid": False})],
    )
    reply = _handle(router, "gastei no mercado")
    assert "gastei 50 no mercado" in reply.message
    assert store.expenses == []


def test_report_uses_period(store):
    user = asyncio.run(store.find_or_create_user_by_phone(SENDER, name="Ana"))
    store.add_expense(user.id, 40, "Transporte", get_today(), "uber")

    router = _router(store, intent_replies=[_intent("report", period="today")])
    reply = _handle(router, "quanto gastei hoje?")

    assert reply.type is IntentType.REPORT
    assert "Ana" in reply.message
    assert reply.data["count"] == 1


def test_question_acknowledges_then_answers_full_history(store):
    user = asyncio.run(store.find_or_create_user_by_phone(SENDER))
    store.add_expense(user.id, 300, "Moradia", date(2020, 1, 1), "luz")

    router = _router(
        store,
        intent_replies=[_intent("question")],
        response_replies=["Vou verificar! 🔍"],
    )
    reply = _handle(router, "qual minha maior despesa?")

    assert reply.type is IntentType.QUESTION
    assert reply.message.startswith("Vou verificar! 🔍")
    assert "🔝 Maior despesa: luz - R$ 300,00" in reply.message


def test_analysis_falls_back_to_rendered_report(store):
    user = asyncio.run(store.find_or_create_user_by_phone(SENDER))
    store.add_expense(user.id, 100, "Lazer", date(2020, 1, 1), "show")

    router = _router(
        store,
        intent_replies=[_intent("analysis", analysisType="health")],
        response_replies=[RuntimeError("model down")],
    )
    reply = _handle(router, "como está minha saúde financeira?")

    assert reply.type is IntentType.ANALYSIS
    assert "📊 Relatório Financeiro" in reply.message
    assert reply.data["analysis_type"] == "health"


def test_conversation(store):
    router = _router(store, intent_replies=[_intent("conversation")], response_replies=["Olá, Ana!"])
    reply = _handle(router, "oi")
    assert reply.type is IntentType.CONVERSATION
    assert reply.message == "Olá, Ana!"


@pytest.mark.parametrize("type_", ["help", "unknown", "shopping"])
def test_help_unknown_and_unrecognized_route_to_help(store, type_):
    router = _router(store, intent_replies=[_intent(type_)])
    reply = _handle(router, "???")
    assert reply.type is IntentType.HELP
    assert reply.message == help_message()


def test_blank_message_is_help(store):
    router = _router(store)
    assert _handle(router, "   ").message == help_message()


def test_basic_profile_routes_analysis_to_help(store):
    router = _router(store, intent_replies=[_intent("analysis")], enabled_types=BASIC_INTENT_TYPES)
    assert _handle(router, "análise").type is IntentType.HELP


# ---------------------------------------------------------------------
# Multi-expense
# ---------------------------------------------------------------------

def test_multiple_expenses_in_one_message(store):
    router = _router(store)  # parsing completion empty -> regex fallback for each fragment
    reply = _handle(router, "gastei 10 no pão, gastei 20 no uber")

    assert reply.type is IntentType.EXPENSE
    assert "2 despesa(s) registrada(s)" in reply.message
    assert "R$ 30,00" in reply.message
    assert reply.data["saved"] == 2
    assert {e.category_name for e in store.expenses} == {"Outros", "Transporte"}


def test_multiple_expenses_keep_decimal_amounts(store):
    router = _router(store)
    reply = _handle(router, "gastei 45,90 no mercado, gastei 10 no pão")

    assert reply.data["saved"] == 2
    assert sorted(e.amount for e in store.expenses) == [Decimal("10"), Decimal("45.90")]
    assert "R$ 55,90" in reply.message


def test_multiple_expenses_none_valid(store):
    router = _router(store)
    reply = _handle(router, "gastei no pão, gastei no leite")
    assert "Nenhuma despesa válida" in reply.message
    assert store.expenses == []


# ---------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------

def test_store_failure_on_report_is_generic_message(store):
    store.fail_reads = True
    router = _router(store, intent_replies=[_intent("report", period="month")])
    reply = _handle(router, "relatório")
    assert reply.type is IntentType.REPORT
    assert "Erro ao gerar relatório." in reply.message
    assert "database" not in reply.message


def test_store_failure_on_question(store):
    store.fail_reads = True
    router = _router(store, intent_replies=[_intent("question")], response_replies=["ok"])
    reply = _handle(router, "quanto gastei?")
    assert "Erro ao processar pergunta." in reply.message


def test_unexpected_error_is_internal_error():
    class BrokenStore(InMemoryRecordStore):
        async def find_or_create_user_by_phone(self, phone, name=None):
            raise RuntimeError("boom")

    router = _router(BrokenStore(), intent_replies=[_intent("expense")])
    reply = _handle(router, "gastei 50 no mercado")
    assert "Erro interno. Tente novamente." in reply.message


def test_long_input_is_truncated(store):
    completion = FakeCompletionService(_intent("help"))
    router = build_intent_router(store, intent_completion=completion)
    router.max_input_len = 10
    _handle(router, "a" * 50)
    assert "a" * 11 not in completion.calls[0]["prompt"]
