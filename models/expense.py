# models/expense.py
import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Initial vocabulary; "Outros" is the catch-all
DEFAULT_CATEGORY = "Outros"
CATEGORY_VOCABULARY: tuple[str, ...] = (
    "Alimentação",
    "Transporte",
    "Moradia",
    "Lazer",
    "Saúde",
    DEFAULT_CATEGORY,
)

DEFAULT_DESCRIPTION = "Despesa"


def canonical_category(name: Optional[str], vocabulary=CATEGORY_VOCABULARY) -> Optional[str]:
    """
    Case-insensitive lookup of a category name in the vocabulary.
    Returns the vocabulary spelling, or None when there is no match.
    """
    if not name:
        return None
    wanted = name.strip().casefold()
    for candidate in vocabulary:
        if candidate.casefold() == wanted:
            return candidate
    return None


class ParsedExpense(BaseModel):
    amount: Decimal = Field(..., ge=0, description="Expense amount in BRL")
    category: str = Field(default=DEFAULT_CATEGORY, description="Category from the vocabulary")
    description: str = Field(default=DEFAULT_DESCRIPTION, min_length=1)
    date: dt.date = Field(..., description="Always the day the message was processed")
    is_valid: bool = Field(default=False, description="False when the extraction cannot be recorded")


class Category(BaseModel):
    id: str
    name: str


class User(BaseModel):
    id: str
    phone: str
    name: Optional[str] = None


class Expense(BaseModel):
    """
    A stored expense with its category name denormalized.
    Read-only as far as the query and report pipeline is concerned.
    """

    id: str
    user_id: str
    description: str
    category_id: str
    category_name: str = DEFAULT_CATEGORY
    amount: Decimal
    date: date

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v):
        # Prisma hands back DateTime for @db.Date columns
        if isinstance(v, datetime):
            return v.date()
        return v
