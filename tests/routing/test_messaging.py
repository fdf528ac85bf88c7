# tests/routing/test_messaging.py

import asyncio
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

from models.expense import Expense, ParsedExpense
from services.messaging import (
    TwilioGateway,
    as_whatsapp_address,
    error_message,
    expense_confirmation,
    multi_expense_summary,
)


def test_whatsapp_prefix_added_once():
    assert as_whatsapp_address("+5511999990000") == "whatsapp:+5511999990000"
    assert as_whatsapp_address("whatsapp:+5511999990000") == "whatsapp:+5511999990000"


def test_twilio_gateway_sends_through_client():
    client = MagicMock()
    gateway = TwilioGateway(client, "+14155238886")

    asyncio.run(gateway.send_message("+5511999990000", "olá"))

    client.messages.create.assert_called_once_with(
        from_="whatsapp:+14155238886", to="whatsapp:+5511999990000", body="olá",
    )


def test_expense_confirmation():
    parsed = ParsedExpense(
        amount=Decimal("1234.5"), category="Moradia", description="aluguel", date=date(2025, 3, 15), is_valid=True,
    )
    text = expense_confirmation(parsed)
    assert "💰 Valor: R$ 1.234,50" in text
    assert "📂 Categoria: Moradia" in text
    assert "📅 Data: 15/03/2025" in text


def test_multi_expense_summary():
    expenses = [
        Expense(id="1", user_id="u", description="pão", category_id="c", category_name="Outros",
                amount=Decimal("10"), date=date(2025, 3, 15)),
        Expense(id="2", user_id="u", description="uber", category_id="t", category_name="Transporte",
                amount=Decimal("20.5"), date=date(2025, 3, 15)),
    ]
    text = multi_expense_summary(expenses)
    assert text.startswith("✅ 2 despesa(s) registrada(s) com sucesso!")
    assert "💰 Total: R$ 30,50" in text
    assert "2. uber - R$ 20,50 (Transporte)" in text


def test_error_message_points_to_help():
    assert error_message("x").startswith("❌ Erro: x")
    assert '"ajuda"' in error_message("x")
