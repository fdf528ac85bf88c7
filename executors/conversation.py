from agents.response_agent import FinanceResponder
from core.intent import Intent, IntentType
from executors.base import BaseExecutor
from executors.query import resolve_user
from models.reply import AssistantReply
from services.query_engine import ExpenseQueryEngine
from services.record_store import RecordStore
from services.report_generator import ReportGenerator
from services.utils import deep_serialize


class ConversationExecutor(BaseExecutor):
    """
    Executes conversation-type intents.
    """

    def __init__(self, responder: FinanceResponder):
        self.responder = responder

    async def execute(self, intent: Intent) -> AssistantReply:
        message = await self.responder.converse(intent.raw_input, intent.analysis)
        return AssistantReply(type=IntentType.CONVERSATION, message=message)


class AnalysisExecutor(BaseExecutor):
    """
    Financial analysis over the aggregated expenses of the requested period.
    Falls back to the plain rendered report when the responder has nothing.
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
        params = intent.analysis.parameters
        user = await resolve_user(self.store, intent.sender)
        expenses = await self.engine.fetch_for(user.id, params)

        report = self.reports.build_report(expenses, user.name)
        rendered = self.reports.render_report(expenses, params, user.name, report=report)
        message = await self.responder.analyze(intent.raw_input, intent.analysis, report, fallback=rendered)

        return AssistantReply(
            type=IntentType.ANALYSIS,
            message=message,
            data={
                "analysis_type": params.analysis_type,
                "report": deep_serialize(report),
                "count": len(expenses),
            },
        )
