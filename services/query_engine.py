# FILE: services/query_engine.py
"""
Expense Query Engine

- Resolves intent parameters into a QueryFilter (services.date_resolver)
- Fetches a user's expenses from the record store with the filter's date bounds
- Applies the calendar-month and category filters in Python (post-fetch)
- Returns expenses most recent first, category names denormalized
"""

import logging
from datetime import date
from typing import Callable, List, Optional

from core.errors import QueryFailure
from core.intent import IntentParameters
from models.expense import CATEGORY_VOCABULARY, Expense
from models.query import QueryFilter
from services.date_resolver import get_today, resolve_query_filter
from services.record_store import RecordStore

logger = logging.getLogger("query_engine")
logger.setLevel(logging.INFO)
if not logger.handlers:
    fh = logging.FileHandler("query_engine.log")
    fh.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logger.addHandler(fh)


# -----------------------------
# Helper: in-memory filters
# -----------------------------
def _apply_post_filters(expenses: List[Expense], query_filter: QueryFilter) -> List[Expense]:
    rows = [e for e in expenses if query_filter.matches_month(e.date)]
    if query_filter.category:
        wanted = query_filter.category.casefold()
        rows = [e for e in rows if e.category_name.casefold() == wanted]
    return rows


class ExpenseQueryEngine:
    def __init__(self, store: RecordStore, today: Optional[Callable[[], date]] = None):
        self.store = store
        self.today = today or get_today

    async def vocabulary(self) -> List[str]:
        """Category names known to the store, plus the built-in vocabulary."""
        names = [c.name for c in await self.store.list_categories()]
        return list(dict.fromkeys([*names, *CATEGORY_VOCABULARY]))

    async def resolve(self, params: IntentParameters) -> QueryFilter:
        try:
            vocabulary = await self.vocabulary()
        except Exception as e:
            logger.exception("[QUERY] category lookup failed")
            raise QueryFailure(f"could not resolve query filter: {e}") from e
        return resolve_query_filter(params, today=self.today(), categories=vocabulary)

    async def fetch(self, user_id: str, query_filter: QueryFilter) -> List[Expense]:
        try:
            expenses = await self.store.find_expenses(
                user_id, query_filter.start_date, query_filter.end_date,
            )
        except Exception as e:
            logger.exception("[QUERY] fetch failed user_id=%s filter=%s", user_id, query_filter)
            raise QueryFailure(f"could not fetch expenses: {e}", user_id=user_id) from e

        rows = _apply_post_filters(expenses, query_filter)
        rows.sort(key=lambda e: e.date, reverse=True)
        logger.info(
            "[QUERY] user_id=%s filter=%s fetched=%d kept=%d",
            user_id, query_filter.model_dump(), len(expenses), len(rows),
        )
        return rows

    async def fetch_for(self, user_id: str, params: IntentParameters) -> List[Expense]:
        """Resolve then fetch; any store error surfaces as QueryFailure."""
        return await self.fetch(user_id, await self.resolve(params))
