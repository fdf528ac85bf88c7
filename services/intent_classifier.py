# FILE: services/intent_classifier.py
"""
Intent classification: model first, keywords second.

classify() never raises. Any failure of the model path (no service, exception,
empty text, no JSON, schema violation) is logged and replaced by the keyword
fallback, so callers cannot tell which path ran from the result's shape.
"""

import logging
from typing import Iterable, Optional

from pydantic import ValidationError

from agents import intent_agent
from agents.completion import CompletionService
from core.intent import ALL_INTENT_TYPES, IntentAnalysis, IntentType
from core.result import FailureReason, StageResult
from services.keyword_classifier import KeywordFallbackClassifier
from services.utils import extract_json_object

# -----------------------------
# Logging
# -----------------------------
logger = logging.getLogger("intent_classifier")
logger.setLevel(logging.INFO)
if not logger.handlers:
    fh = logging.FileHandler("intent_classifier.log")
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    fh.setFormatter(formatter)
    logger.addHandler(fh)


def parse_intent_completion(text: Optional[str]) -> StageResult[IntentAnalysis]:
    """
    Validate a raw completion as an IntentAnalysis.
    """
    if not text or not text.strip():
        return StageResult.failure(FailureReason.EMPTY_RESPONSE)
    try:
        payload = extract_json_object(text)
        return StageResult.success(IntentAnalysis.model_validate(payload))
    except (ValueError, OverflowError, ValidationError) as e:
        return StageResult.failure(FailureReason.INVALID_PAYLOAD, str(e))


class IntentClassifier:
    def __init__(
        self,
        completion: Optional[CompletionService],
        fallback: Optional[KeywordFallbackClassifier] = None,
        *,
        enabled_types: Iterable[IntentType] = ALL_INTENT_TYPES,
    ):
        self.completion = completion
        self.fallback = fallback or KeywordFallbackClassifier()
        self.enabled_types = frozenset(enabled_types) | {IntentType.UNKNOWN}

    async def classify_with_model(self, message: str) -> StageResult[IntentAnalysis]:
        if self.completion is None:
            return StageResult.failure(FailureReason.UNAVAILABLE)

        prompt = intent_agent.build_intent_prompt(message, self.enabled_types)
        try:
            text = await self.completion.complete(
                intent_agent.SYSTEM_PROMPT,
                prompt,
                max_tokens=intent_agent.MAX_TOKENS,
                temperature=intent_agent.TEMPERATURE,
            )
        except Exception as e:
            logger.warning("[INTENT] completion call failed: %s", e)
            return StageResult.failure(FailureReason.COMPLETION_ERROR, str(e))

        return parse_intent_completion(text)

    async def classify(self, message: str) -> IntentAnalysis:
        outcome = await self.classify_with_model(message)
        if outcome.ok:
            analysis = outcome.value
            source = "model"
        else:
            logger.info(
                "[FALLBACK] intent reason=%s detail=%s",
                outcome.reason.value, (outcome.detail or "")[:200],
            )
            analysis = self.fallback.classify(message)
            source = "keywords"

        analysis = self._restrict(analysis)
        logger.info(
            "[INTENT] source=%s type=%s confidence=%.2f text='%s'",
            source, analysis.type.value, analysis.confidence, message[:100],
        )
        return analysis

    def _restrict(self, analysis: IntentAnalysis) -> IntentAnalysis:
        if analysis.type in self.enabled_types:
            return analysis
        return analysis.model_copy(update={"type": IntentType.UNKNOWN})
