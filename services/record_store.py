# FILE: services/record_store.py
"""
Record store: users, categories and expenses.

RecordStore is the contract the pipeline depends on; PrismaRecordStore is the
production implementation over prisma-client-py (see schema.prisma).
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, List, Optional

from models.expense import CATEGORY_VOCABULARY, DEFAULT_CATEGORY, Category, Expense, User

PHONE_MAX_LENGTH = 20


def truncate_phone(phone: str) -> str:
    return (phone or "")[:PHONE_MAX_LENGTH]


class RecordStore(ABC):
    """
    Base contract for the persistence collaborator.
    """

    @abstractmethod
    async def find_expenses(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Expense]:
        """Expenses of one user, most recent first, bounds inclusive."""

    @abstractmethod
    async def create_expense(
        self,
        *,
        user_id: str,
        description: str,
        category_id: str,
        amount: Decimal,
        date: date,
    ) -> Expense:
        pass

    @abstractmethod
    async def list_categories(self) -> List[Category]:
        pass

    @abstractmethod
    async def find_category_by_name(self, name: str) -> Optional[Category]:
        """Case-insensitive lookup."""

    @abstractmethod
    async def create_category(self, name: str) -> Category:
        pass

    @abstractmethod
    async def find_or_create_user_by_phone(self, phone: str, name: Optional[str] = None) -> User:
        pass

    async def find_or_create_category(self, name: str) -> Category:
        category = await self.find_category_by_name(name)
        if category is None:
            category = await self.create_category(name)
        return category

    async def seed_initial_categories(self, names=CATEGORY_VOCABULARY) -> List[Category]:
        return [await self.find_or_create_category(name) for name in names]


# -----------------------------
# Prisma implementation
# -----------------------------
def _expense_from_row(row: Any) -> Expense:
    category = getattr(row, "category", None)
    return Expense(
        id=row.id,
        user_id=row.user_id,
        description=row.description,
        category_id=row.category_id,
        category_name=getattr(category, "name", None) or DEFAULT_CATEGORY,
        amount=Decimal(str(row.amount)),
        date=row.date,
    )


class PrismaRecordStore(RecordStore):
    def __init__(self, prisma_db):
        self.db = prisma_db

    async def find_expenses(self, user_id, start_date=None, end_date=None):
        where: Dict[str, Any] = {"user_id": user_id}
        date_cond: Dict[str, Any] = {}
        if start_date:
            date_cond["gte"] = datetime.combine(start_date, time.min)
        if end_date:
            date_cond["lte"] = datetime.combine(end_date, time.max)
        if date_cond:
            where["date"] = date_cond

        rows = await self.db.expense.find_many(
            where=where,
            include={"category": True},
            order={"date": "desc"},
        )
        return [_expense_from_row(r) for r in rows]

    async def create_expense(self, *, user_id, description, category_id, amount, date):
        row = await self.db.expense.create(
            data={
                "user_id": user_id,
                "description": description,
                "category_id": category_id,
                "amount": amount,
                "date": datetime.combine(date, time.min),
            },
            include={"category": True},
        )
        return _expense_from_row(row)

    async def list_categories(self):
        rows = await self.db.category.find_many(order={"name": "asc"})
        return [Category(id=r.id, name=r.name) for r in rows]

    async def find_category_by_name(self, name):
        row = await self.db.category.find_first(
            where={"name": {"equals": name, "mode": "insensitive"}},
        )
        return Category(id=row.id, name=row.name) if row else None

    async def create_category(self, name):
        row = await self.db.category.create(data={"name": name})
        return Category(id=row.id, name=row.name)

    async def find_or_create_user_by_phone(self, phone, name=None):
        phone = truncate_phone(phone)
        # Unique phone + upsert: concurrent first messages cannot create duplicates
        row = await self.db.user.upsert(
            where={"phone": phone},
            data={
                "create": {"phone": phone, "name": name},
                "update": {},
            },
        )
        return User(id=row.id, phone=row.phone, name=row.name)
