from core.intent import Intent, IntentType
from executors.base import BaseExecutor
from models.reply import AssistantReply
from services.messaging import help_message


class HelpExecutor(BaseExecutor):
    """
    Fixed help text. Also the landing spot for unknown intents.
    """

    async def execute(self, intent: Intent) -> AssistantReply:
        return AssistantReply(type=IntentType.HELP, message=help_message())
