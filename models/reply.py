# models/reply.py
from typing import Any, Dict

from pydantic import BaseModel, Field

from core.intent import IntentType


class AssistantReply(BaseModel):
    """
    One logical response: the plain text sent to the user plus structured data for API callers.
    """

    type: IntentType
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)
