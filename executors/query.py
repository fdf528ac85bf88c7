import logging

from agents.response_agent import FinanceResponder
from core.errors import QueryFailure
from core.intent import Intent, IntentType
from executors.base import BaseExecutor
from models.expense import User
from models.reply import AssistantReply
from models.query import QueryFilter
from services.query_engine import ExpenseQueryEngine
from services.record_store import RecordStore
from services.report_generator import ReportGenerator
from services.utils import deep_serialize

logger = logging.getLogger("executors.query")


async def resolve_user(store: RecordStore, sender: str) -> User:
    try:
        return await store.find_or_create_user_by_phone(sender)
    except Exception as e:
        logger.exception("[QUERY] user lookup failed sender=%s", sender)
        raise QueryFailure(f"could not resolve user: {e}") from e


class ReportExecutor(BaseExecutor):
    """
    Report for the requested period/category, addressed to the user by name.
    """

    def __init__(self, store: RecordStore, engine: ExpenseQueryEngine, reports: ReportGenerator):
        self.store = store
        self.engine = engine
        self.reports = reports

    async def execute(self, intent: Intent) -> AssistantReply:
        params = intent.analysis.parameters
        user = await resolve_user(self.store, intent.sender)
        query_filter = await self.engine.resolve(params)
        expenses = await self.engine.fetch(user.id, query_filter)

        report = self.reports.build_report(expenses, user.name)
        message = self.reports.render_report(expenses, params, user.name, report=report)
        return AssistantReply(
            type=IntentType.REPORT,
            message=message,
            data={
                "filter": deep_serialize(query_filter),
                "report": deep_serialize(report),
                "count": len(expenses),
            },
        )


class QuestionExecutor(BaseExecutor):
    """
    Short acknowledgement followed by a summary over the user's whole history.
    """

    def __init__(
        self,
        store: RecordStore,
        engine: ExpenseQueryEngine,
        reports: ReportGenerator,
        responder: FinanceResponder,
    ):
        self.store = store
        self.engine = engine
        self.reports = reports
        self.responder = responder

    async def execute(self, intent: Intent) -> AssistantReply:
        acknowledgement = await self.responder.acknowledge_question(intent.raw_input, intent.analysis)

        user = await resolve_user(self.store, intent.sender)
        expenses = await self.engine.fetch(user.id, QueryFilter())
        answer = self.reports.render_answer(expenses)

        return AssistantReply(
            type=IntentType.QUESTION,
            message=f"{acknowledgement}\n\n{answer}",
            data={"count": len(expenses), "report": deep_serialize(self.reports.build_report(expenses))},
        )
