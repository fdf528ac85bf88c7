# services/router.py
"""
Intent Router

- Entry point for one inbound message: handle(sender, text) -> AssistantReply
- Multi-expense messages skip classification
- Otherwise classify, wrap into an Intent and dispatch to one executor
- Never raises: failures become a user-facing error reply and a log line
"""

import logging
from typing import Dict, Iterable, Optional

from agents.completion import CompletionService
from agents.response_agent import FinanceResponder
from config import MAX_INPUT_LEN
from core.errors import QueryFailure
from core.intent import ALL_INTENT_TYPES, Intent, IntentAnalysis, IntentType
from executors.base import BaseExecutor
from executors.conversation import AnalysisExecutor, ConversationExecutor
from executors.expense import ExpenseExecutor, MultiExpenseExecutor
from executors.help import HelpExecutor
from executors.query import QuestionExecutor, ReportExecutor
from models.reply import AssistantReply
from services.expense_parser import ExpenseParser
from services.expense_splitter import split_expenses
from services.intent_classifier import IntentClassifier
from services.messaging import INTERNAL_ERROR, QUESTION_FAILED, REPORT_FAILED, error_message
from services.query_engine import ExpenseQueryEngine
from services.record_store import RecordStore
from services.report_generator import ReportGenerator

logger = logging.getLogger("intent_router")
logger.setLevel(logging.INFO)
if not logger.handlers:
    fh = logging.FileHandler("intent_router.log")
    fh.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logger.addHandler(fh)

QUERY_FAILURE_MESSAGES = {
    IntentType.REPORT: REPORT_FAILED,
    IntentType.ANALYSIS: REPORT_FAILED,
    IntentType.QUESTION: QUESTION_FAILED,
}

MULTI_EXPENSE_ANALYSIS = IntentAnalysis(
    type=IntentType.EXPENSE, intent="registrar múltiplas despesas", confidence=1.0,
)


class IntentRouter:
    def __init__(
        self,
        classifier: IntentClassifier,
        executors: Dict[IntentType, BaseExecutor],
        *,
        help_executor: Optional[BaseExecutor] = None,
        multi_expense_executor: Optional[BaseExecutor] = None,
        max_input_len: int = MAX_INPUT_LEN,
    ):
        self.classifier = classifier
        self.executors = executors
        self.help_executor = help_executor or HelpExecutor()
        self.multi_expense_executor = multi_expense_executor
        self.max_input_len = max_input_len

    def executor_for(self, intent_type: IntentType) -> BaseExecutor:
        if intent_type.is_help():
            return self.help_executor
        return self.executors.get(intent_type, self.help_executor)

    async def handle(self, sender: str, text: str) -> AssistantReply:
        text = (text or "").strip()[: self.max_input_len]
        if not text:
            return await self.help_executor.execute(
                Intent(sender=sender, raw_input="", analysis=IntentAnalysis(type=IntentType.HELP, confidence=1.0))
            )

        intent_type = IntentType.UNKNOWN
        try:
            if self.multi_expense_executor is not None and len(split_expenses(text)) > 1:
                logger.info("[ROUTE] sender=%s multi-expense", sender)
                intent_type = IntentType.EXPENSE
                intent = Intent(sender=sender, raw_input=text, analysis=MULTI_EXPENSE_ANALYSIS)
                return await self.multi_expense_executor.execute(intent)

            analysis = await self.classifier.classify(text)
            intent_type = analysis.type
            intent = Intent(sender=sender, raw_input=text, analysis=analysis)
            executor = self.executor_for(intent_type)
            logger.info("[ROUTE] sender=%s type=%s executor=%s", sender, intent_type.value, type(executor).__name__)
            return await executor.execute(intent)

        except QueryFailure as e:
            logger.error("[QUERY_FAILURE] sender=%s type=%s error=%s", sender, intent_type.value, e)
            message = QUERY_FAILURE_MESSAGES.get(intent_type, INTERNAL_ERROR)
            return AssistantReply(type=intent_type, message=error_message(message))

        except Exception as e:
            logger.exception("[ERROR] sender=%s exception=%s", sender, e)
            return AssistantReply(type=intent_type, message=error_message(INTERNAL_ERROR))


def build_intent_router(
    store: RecordStore,
    *,
    intent_completion: Optional[CompletionService] = None,
    parsing_completion: Optional[CompletionService] = None,
    response_completion: Optional[CompletionService] = None,
    enabled_types: Iterable[IntentType] = ALL_INTENT_TYPES,
) -> IntentRouter:
    """
    Wire the full pipeline around one record store.
    A missing completion service means that stage always uses its fallback.
    """
    enabled_types = frozenset(enabled_types)
    parser = ExpenseParser(parsing_completion)
    engine = ExpenseQueryEngine(store)
    reports = ReportGenerator()
    responder = FinanceResponder(response_completion)

    executors: Dict[IntentType, BaseExecutor] = {
        IntentType.EXPENSE: ExpenseExecutor(parser, store),
        IntentType.REPORT: ReportExecutor(store, engine, reports),
        IntentType.QUESTION: QuestionExecutor(store, engine, reports, responder),
        IntentType.ANALYSIS: AnalysisExecutor(store, engine, reports, responder),
        IntentType.CONVERSATION: ConversationExecutor(responder),
    }
    return IntentRouter(
        IntentClassifier(intent_completion, enabled_types=enabled_types),
        {t: ex for t, ex in executors.items() if t in enabled_types},
        multi_expense_executor=MultiExpenseExecutor(parser, store),
    )
