import asyncio
import sys

from prisma import Prisma

from agents.completion import build_completion_services
from services.record_store import PrismaRecordStore
from services.router import build_intent_router

DEFAULT_SENDER = "+5500000000000"


async def main(user_text: str, sender: str = DEFAULT_SENDER):
    db = Prisma()
    await db.connect()
    try:
        completions = build_completion_services()
        router = build_intent_router(
            PrismaRecordStore(db),
            intent_completion=completions["intent"],
            parsing_completion=completions["parsing"],
            response_completion=completions["response"],
        )
        reply = await router.handle(sender, user_text)
        print("Intent type:", reply.type.value)
        print("Data:", reply.data)
        print()
        print(reply.message)
    finally:
        await db.disconnect()

if __name__ == "__main__":
    text = " ".join(sys.argv[1:]) or "gastei 45,90 no almoço"
    if sys.platform.startswith("win"):
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(main(text))
