# models/report.py
from datetime import date
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field


class CategoryBreakdownEntry(BaseModel):
    category: str
    amount: Decimal
    percentage: float = Field(..., ge=0, le=100)


class TopExpense(BaseModel):
    description: str
    amount: Decimal
    date: date


class Report(BaseModel):
    total: Decimal = Decimal("0")
    by_category: List[CategoryBreakdownEntry] = Field(default_factory=list)
    top_expenses: List[TopExpense] = Field(default_factory=list, max_length=3)
    insights: List[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.by_category
