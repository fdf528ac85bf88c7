# FILE: agents/completion.py
"""
Completion service: one prompt in, free text out.

Wraps a pydantic_ai Agent per instruction text. Nothing here validates the
text; callers treat it as untrusted and parse it themselves.
"""

import logging
from typing import Dict, Optional

from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.providers.google import GoogleProvider

from config import INTENT_MODEL_NAME, PARSING_MODEL_NAME, RESPONSE_MODEL_NAME, get_env_var

logger = logging.getLogger("completion")
logger.setLevel(logging.INFO)
if not logger.handlers:
    fh = logging.FileHandler("completion.log")
    fh.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logger.addHandler(fh)


def build_model(model_name: str) -> GoogleModel:
    """Provider & model setup for the Gemini API."""
    provider = GoogleProvider(api_key=get_env_var("GOOGLE_API_KEY"))
    return GoogleModel(model_name, provider=provider)


class CompletionService:
    """
    Handle to a generative model. Constructed once at startup and injected
    into the classifier, parser and responder; it owns no global state.
    """

    def __init__(self, model: Model | str):
        self.model = model
        self._agents: Dict[str, Agent] = {}

    def _agent_for(self, instructions: str) -> Agent:
        agent = self._agents.get(instructions)
        if agent is None:
            agent = Agent(self.model, system_prompt=instructions, output_type=str)
            self._agents[instructions] = agent
        return agent

    async def complete(
        self,
        instructions: str,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float,
    ) -> str:
        result = await self._agent_for(instructions).run(
            prompt,
            model_settings={"max_tokens": max_tokens, "temperature": temperature},
        )
        return result.output


def build_completion_services() -> Dict[str, Optional[CompletionService]]:
    """One completion service per stage; none at all when the API key is missing."""
    try:
        return {
            "intent": CompletionService(build_model(INTENT_MODEL_NAME)),
            "parsing": CompletionService(build_model(PARSING_MODEL_NAME)),
            "response": CompletionService(build_model(RESPONSE_MODEL_NAME)),
        }
    except RuntimeError as e:
        logger.warning("Completion service disabled, keyword fallbacks only: %s", e)
        return {"intent": None, "parsing": None, "response": None}
