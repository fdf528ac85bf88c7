# FILE: services/expense_parser.py
import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from agents import expense_agent
from agents.completion import CompletionService
from config import USD_TO_BRL_RATE
from core.result import FailureReason, StageResult
from models.expense import (
    CATEGORY_VOCABULARY,
    DEFAULT_CATEGORY,
    DEFAULT_DESCRIPTION,
    ParsedExpense,
    canonical_category,
)
from services.date_resolver import get_today
from services.expense_extractor import ExpenseTextExtractor
from services.utils import extract_json_object

logger = logging.getLogger("expense_parser")
logger.setLevel(logging.INFO)
if not logger.handlers:
    fh = logging.FileHandler("expense_parser.log")
    fh.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logger.addHandler(fh)


class ExpenseExtraction(BaseModel):
    """Wire shape the model is asked to return."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    amount: Decimal = Field(..., ge=0)
    category: Optional[str] = None
    description: Optional[str] = None
    is_valid: bool = Field(True, alias="isValid")


class ExpenseParser:
    """
    Model-backed expense extraction with a regex fallback.
    parse() always returns a ParsedExpense; is_valid=False means "ask the user to rephrase".
    """

    def __init__(
        self,
        completion: Optional[CompletionService],
        fallback: Optional[ExpenseTextExtractor] = None,
        *,
        categories: Sequence[str] = CATEGORY_VOCABULARY,
        usd_rate: float = USD_TO_BRL_RATE,
        today: Optional[Callable[[], date]] = None,
    ):
        self.completion = completion
        self.categories = tuple(categories)
        self.usd_rate = usd_rate
        self.today = today or get_today
        self.fallback = fallback or ExpenseTextExtractor(self.categories, today=self.today)

    async def parse_with_model(self, message: str) -> StageResult[ParsedExpense]:
        if self.completion is None:
            return StageResult.failure(FailureReason.UNAVAILABLE)

        today = self.today()
        prompt = expense_agent.build_expense_prompt(
            message, today=today, categories=self.categories, usd_rate=self.usd_rate,
        )
        try:
            text = await self.completion.complete(
                expense_agent.SYSTEM_PROMPT,
                prompt,
                max_tokens=expense_agent.MAX_TOKENS,
                temperature=expense_agent.TEMPERATURE,
            )
        except Exception as e:
            logger.warning("[EXPENSE] completion call failed: %s", e)
            return StageResult.failure(FailureReason.COMPLETION_ERROR, str(e))

        if not text or not text.strip():
            return StageResult.failure(FailureReason.EMPTY_RESPONSE)

        try:
            extraction = ExpenseExtraction.model_validate(extract_json_object(text))
        except (ValueError, ValidationError) as e:
            return StageResult.failure(FailureReason.INVALID_PAYLOAD, str(e))

        return StageResult.success(self._finalize(extraction, today))

    def _finalize(self, extraction: ExpenseExtraction, today: date) -> ParsedExpense:
        # Expenses are always booked on the invocation date, whatever the model said
        category = canonical_category(extraction.category, self.categories) or DEFAULT_CATEGORY
        description = (extraction.description or "").strip() or DEFAULT_DESCRIPTION
        return ParsedExpense(
            amount=extraction.amount,
            category=category,
            description=description,
            date=today,
            is_valid=extraction.is_valid and extraction.amount > 0,
        )

    async def parse(self, message: str) -> ParsedExpense:
        outcome = await self.parse_with_model(message)
        if outcome.ok:
            parsed = outcome.value
        else:
            logger.info(
                "[FALLBACK] expense reason=%s detail=%s",
                outcome.reason.value, (outcome.detail or "")[:200],
            )
            parsed = self.fallback.extract(message)

        logger.info(
            "[EXPENSE] amount=%s category=%s valid=%s", parsed.amount, parsed.category, parsed.is_valid,
        )
        return parsed
