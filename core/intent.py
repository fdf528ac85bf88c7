# core/intent.py
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Literal, Optional

from dateutil import parser as date_parser
from dateutil.parser import ParserError
from pydantic import BaseModel, ConfigDict, Field, field_validator


class IntentType(str, Enum):
    """
    The closed taxonomy of things a message can ask for.
    """

    EXPENSE = "expense"
    REPORT = "report"
    QUESTION = "question"
    ANALYSIS = "analysis"
    CONVERSATION = "conversation"
    HELP = "help"
    UNKNOWN = "unknown"

    def is_help(self) -> bool:
        return self in {IntentType.HELP, IntentType.UNKNOWN}


ALL_INTENT_TYPES = frozenset(IntentType)

# First-generation taxonomy: register, report, help
BASIC_INTENT_TYPES = frozenset(
    {IntentType.EXPENSE, IntentType.REPORT, IntentType.HELP, IntentType.UNKNOWN}
)

INTENT_PROFILES = {
    "advanced": ALL_INTENT_TYPES,
    "basic": BASIC_INTENT_TYPES,
}

Period = Literal["today", "week", "month", "year", "custom"]
AnalysisType = Literal["health", "trends", "categories", "comparison"]


class IntentParameters(BaseModel):
    """
    Parameters extracted alongside an intent.
    Field aliases follow the camelCase names the model is asked to emit.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    period: Optional[Period] = None
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    specific_date: Optional[date] = Field(None, alias="specificDate")
    category: Optional[str] = None
    amount: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = None
    analysis_type: Optional[AnalysisType] = Field(None, alias="analysisType")

    @field_validator("period", "analysis_type", mode="before")
    @classmethod
    def normalize_choice(cls, v):
        if isinstance(v, str):
            return v.strip().lower() or None
        return v

    @field_validator("category", "description", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("start_date", "end_date", "specific_date", mode="before")
    @classmethod
    def parse_loose_date(cls, v):
        if v is None or isinstance(v, date):
            return v.date() if isinstance(v, datetime) else v
        if isinstance(v, str):
            if not v.strip():
                return None
            # "2025-01-15" and Brazilian "15/01/2025" both parse; garbage raises
            iso_like = v.strip()[:4].isdigit()
            try:
                return date_parser.parse(v, dayfirst=not iso_like).date()
            except (OverflowError, ParserError) as e:
                raise ValueError(f"invalid date: {v!r}") from e
        return v


class IntentAnalysis(BaseModel):
    """
    What the user wants, as decided by the classifier (model or keyword fallback).
    This does NOT execute logic.
    """

    model_config = ConfigDict(frozen=True)

    type: IntentType
    intent: str = ""
    parameters: IntentParameters = Field(default_factory=IntentParameters)
    confidence: float = Field(..., ge=0, le=1)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_unknown_type(cls, v):
        # Types outside the taxonomy route to help, they are not parse failures
        if isinstance(v, str):
            v = v.strip().lower()
            if v not in {t.value for t in IntentType}:
                return IntentType.UNKNOWN
        return v

    @field_validator("parameters", mode="before")
    @classmethod
    def null_parameters(cls, v):
        return {} if v is None else v


class Intent(BaseModel):
    """
    A passive container handed to executors: who sent what, and how it was classified.
    """

    sender: str
    raw_input: str
    analysis: IntentAnalysis
