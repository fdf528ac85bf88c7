import logging
from typing import List

from core.intent import Intent, IntentType
from executors.base import BaseExecutor
from models.expense import Expense, ParsedExpense
from models.reply import AssistantReply
from services.expense_parser import ExpenseParser
from services.expense_splitter import split_expenses
from services.messaging import (
    NO_VALID_EXPENSES,
    REPHRASE_EXPENSE,
    error_message,
    expense_confirmation,
    multi_expense_summary,
)
from services.record_store import RecordStore
from services.utils import deep_serialize

logger = logging.getLogger("executors.expense")


async def record_expense(store: RecordStore, sender: str, parsed: ParsedExpense) -> Expense:
    user = await store.find_or_create_user_by_phone(sender)
    category = await store.find_or_create_category(parsed.category)
    return await store.create_expense(
        user_id=user.id,
        description=parsed.description,
        category_id=category.id,
        amount=parsed.amount,
        date=parsed.date,
    )


class ExpenseExecutor(BaseExecutor):
    """
    Executes expense-related intents: parse, then persist.
    """

    def __init__(self, parser: ExpenseParser, store: RecordStore):
        self.parser = parser
        self.store = store

    async def execute(self, intent: Intent) -> AssistantReply:
        parsed = await self.parser.parse(intent.raw_input)
        if not parsed.is_valid:
            return AssistantReply(
                type=IntentType.EXPENSE,
                message=error_message(REPHRASE_EXPENSE),
                data={"expense": deep_serialize(parsed), "saved": False},
            )

        expense = await record_expense(self.store, intent.sender, parsed)
        logger.info("[EXPENSE] saved id=%s amount=%s", expense.id, expense.amount)
        return AssistantReply(
            type=IntentType.EXPENSE,
            message=expense_confirmation(parsed),
            data={"expense": deep_serialize(expense), "saved": True},
        )


class MultiExpenseExecutor(BaseExecutor):
    """
    Several expenses in one message: each fragment is parsed and saved on its own.
    A fragment that fails is logged and skipped.
    """

    def __init__(self, parser: ExpenseParser, store: RecordStore):
        self.parser = parser
        self.store = store

    async def execute(self, intent: Intent) -> AssistantReply:
        saved: List[Expense] = []
        for fragment in split_expenses(intent.raw_input):
            try:
                parsed = await self.parser.parse(fragment)
                if parsed.is_valid:
                    saved.append(await record_expense(self.store, intent.sender, parsed))
            except Exception:
                logger.exception("[EXPENSE] fragment failed: %r", fragment)

        if not saved:
            return AssistantReply(
                type=IntentType.EXPENSE,
                message=error_message(NO_VALID_EXPENSES),
                data={"expenses": [], "saved": 0},
            )

        return AssistantReply(
            type=IntentType.EXPENSE,
            message=multi_expense_summary(saved),
            data={"expenses": deep_serialize(saved), "saved": len(saved)},
        )
