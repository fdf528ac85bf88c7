import asyncio

from prisma import Prisma

from models.expense import CATEGORY_VOCABULARY
from services.record_store import PrismaRecordStore


async def main():
    db = Prisma()
    await db.connect()

    store = PrismaRecordStore(db)
    categories = await store.seed_initial_categories(CATEGORY_VOCABULARY)

    await db.disconnect()
    for category in categories:
        print(f"✅ {category.name} ({category.id})")

if __name__ == "__main__":
    asyncio.run(main())
