# FILE: services/messaging.py
"""
Outbound messages: fixed WhatsApp templates and the gateway that delivers them.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Sequence

from models.expense import Expense, ParsedExpense
from services.utils import format_brl

logger = logging.getLogger("messaging")
logger.setLevel(logging.INFO)
if not logger.handlers:
    fh = logging.FileHandler("messaging.log")
    fh.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logger.addHandler(fh)

WHATSAPP_PREFIX = "whatsapp:"

REPHRASE_EXPENSE = 'Não consegui entender a despesa. Tente: "gastei 50 no mercado"'
NO_VALID_EXPENSES = "Nenhuma despesa válida foi encontrada na mensagem."
REPORT_FAILED = "Erro ao gerar relatório."
QUESTION_FAILED = "Erro ao processar pergunta."
INTERNAL_ERROR = "Erro interno. Tente novamente."


# -----------------------------
# Templates
# -----------------------------
def help_message() -> str:
    return (
        "🤖 MeuBolso.AI - Assistente Financeiro\n\n"
        "📝 Como usar:\n"
        '• "gastei 50 no mercado" - Registra despesa\n'
        '• "quanto gastei esse mês" - Relatório do mês\n'
        '• "resumo da semana" - Resumo por categoria\n'
        '• "como está minha saúde financeira" - Análise\n'
        '• "ajuda" - Mostra esta mensagem\n\n'
        "💡 Exemplos:\n"
        '• "gastei 25 no uber"\n'
        '• "paguei 1200 de aluguel"\n'
        '• "comprei remédio por 45"'
    )


def error_message(error: str) -> str:
    return f'❌ Erro: {error}\n\n💡 Digite "ajuda" para ver os comandos disponíveis.'


def expense_confirmation(expense: ParsedExpense) -> str:
    return (
        "✅ Despesa registrada com sucesso!\n\n"
        f"💰 Valor: {format_brl(expense.amount)}\n"
        f"📂 Categoria: {expense.category}\n"
        f"📝 Descrição: {expense.description}\n"
        f"📅 Data: {expense.date.strftime('%d/%m/%Y')}"
    )


def multi_expense_summary(expenses: Sequence[Expense]) -> str:
    total = sum((e.amount for e in expenses), 0)
    lines = [f"✅ {len(expenses)} despesa(s) registrada(s) com sucesso!", "", f"💰 Total: {format_brl(total)}", ""]
    for i, e in enumerate(expenses, start=1):
        lines.append(f"{i}. {e.description} - {format_brl(e.amount)} ({e.category_name})")
    return "\n".join(lines)


# -----------------------------
# Gateways
# -----------------------------
def as_whatsapp_address(number: str) -> str:
    return number if number.startswith(WHATSAPP_PREFIX) else f"{WHATSAPP_PREFIX}{number}"


class MessagingGateway(ABC):
    @abstractmethod
    async def send_message(self, to: str, body: str) -> None:
        pass


class TwilioGateway(MessagingGateway):
    """
    Sends WhatsApp messages through a twilio.rest.Client.
    The client is synchronous, so each send runs in a worker thread.
    """

    def __init__(self, client, from_number: str):
        self.client = client
        self.from_number = as_whatsapp_address(from_number)

    async def send_message(self, to: str, body: str) -> None:
        to = as_whatsapp_address(to)
        await asyncio.to_thread(
            self.client.messages.create, from_=self.from_number, to=to, body=body,
        )
        logger.info("[SEND] to=%s chars=%d", to, len(body))
