from abc import ABC, abstractmethod

from core.intent import Intent
from models.reply import AssistantReply


class BaseExecutor(ABC):
    """
    Base contract for all executors.
    Executors take a classified Intent and return one AssistantReply.
    No routing and no classification here.
    """

    @abstractmethod
    async def execute(self, intent: Intent) -> AssistantReply:
        pass
