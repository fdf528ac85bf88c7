"""
Date Resolver Service

- Converts an intent's period/date/category parameters into a concrete QueryFilter
- Grounds every relative period on the invocation date, never on model output
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Tuple
from zoneinfo import ZoneInfo

from config import TIMEZONE
from core.intent import IntentParameters
from models.expense import CATEGORY_VOCABULARY, canonical_category
from models.query import QueryFilter

WEEK_LOOKBACK_DAYS = 7


def get_today() -> date:
    """Return today's date in the configured timezone."""
    return datetime.now(ZoneInfo(TIMEZONE)).date()


def resolve_date_range(period: Optional[str], today: date) -> Optional[Tuple[date, date]]:
    """
    Resolve a bounded period into (start_date, end_date), both inclusive.
    Returns None for periods that are not range queries.
    """
    if period == "today":
        return today, today

    if period == "week":
        return today - timedelta(days=WEEK_LOOKBACK_DAYS), today

    return None


def resolve_query_filter(
    params: IntentParameters,
    *,
    today: Optional[date] = None,
    categories: Iterable[str] = CATEGORY_VOCABULARY,
) -> QueryFilter:
    """
    Pure mapping from intent parameters to a QueryFilter.

    Precedence: period (today/week/month) > explicit start/end > specific date > full history.
    "month" is NOT a range query: the full history is fetched and the current
    calendar month is kept afterwards.
    An unknown category is dropped silently.
    """
    today = today or get_today()
    category = canonical_category(params.category, tuple(categories))

    date_range = resolve_date_range(params.period, today)
    if date_range:
        start, end = date_range
        return QueryFilter(start_date=start, end_date=end, category=category)

    if params.period == "month":
        return QueryFilter(calendar_month=today.replace(day=1), category=category)

    if params.start_date or params.end_date:
        return QueryFilter(start_date=params.start_date, end_date=params.end_date, category=category)

    if params.specific_date:
        return QueryFilter(start_date=params.specific_date, end_date=params.specific_date, category=category)

    return QueryFilter(category=category)
