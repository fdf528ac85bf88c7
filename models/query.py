# FILE: models/query.py
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# -----------------------------
# Query Filter (Resolver → Engine)
# -----------------------------
class QueryFilter(BaseModel):
    """
    Resolved date/category bounds for selecting a user's expenses.
    Bounds are inclusive. `calendar_month` (first day of a month) means
    "fetch without bounds, keep only that month" and is applied after the fetch.
    """

    model_config = ConfigDict(frozen=True)

    start_date: Optional[date] = Field(None, description="Inclusive lower bound")
    end_date: Optional[date] = Field(None, description="Inclusive upper bound")
    category: Optional[str] = Field(None, description="Vocabulary category name")
    calendar_month: Optional[date] = Field(None, description="Post-fetch month filter")

    def has_bounds(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    def matches_month(self, day: date) -> bool:
        if self.calendar_month is None:
            return True
        return day.year == self.calendar_month.year and day.month == self.calendar_month.month
