# app.py
import logging
import json
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel
from asyncio import Lock

from config import (
    DATABASE_URL,
    DEBUG,
    INTENT_PROFILE,
    TWILIO_ACCOUNT_SID,
    TWILIO_AUTH_TOKEN,
    TWILIO_WHATSAPP_NUMBER,
)
from prisma import Prisma

from agents.completion import build_completion_services
from core.intent import INTENT_PROFILES
from services.messaging import WHATSAPP_PREFIX, MessagingGateway, TwilioGateway
from services.record_store import PrismaRecordStore
from services.router import IntentRouter, build_intent_router
from services.utils import deep_serialize


# -----------------------------
# Structured Logging Setup
# -----------------------------
class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        return json.dumps(
            {
                "time": self.formatTime(record, self.datefmt),
                "level": record.levelname,
                "name": record.name,
                "message": record.getMessage(),
                "exception": record.exc_text,
            },
            ensure_ascii=False,
        )


logger = logging.getLogger("meubolso_api")
logger.setLevel(logging.INFO)
handler = logging.StreamHandler()
handler.setFormatter(JSONFormatter())
if not logger.handlers:
    logger.addHandler(handler)

# -----------------------------
# FastAPI App
# -----------------------------
app = FastAPI(title="MeuBolso.AI API", version="1.0")

# -----------------------------
# Prisma + Pipeline (Lifecycle managed)
# -----------------------------
db = Prisma()

intent_router: IntentRouter | None = None
messaging_gateway: MessagingGateway | None = None

DB_CONNECTED: bool = False
DB_ERROR: str | None = None
COMPLETION_ENABLED: bool = False

# -----------------------------
# Metrics
# -----------------------------
metrics_lock = Lock()
request_counters = {
    "expense": 0,
    "report": 0,
    "question": 0,
    "analysis": 0,
    "conversation": 0,
    "help": 0,
    "unknown": 0,
    "whatsapp": 0,
    "total": 0,
    "errors": 0,
}


# -----------------------------
# Pydantic Models
# -----------------------------
class UserRequest(BaseModel):
    text: str
    user_id: str


# -----------------------------
# Helpers
# -----------------------------
def _build_gateway() -> MessagingGateway | None:
    if not (TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN):
        logger.warning("Twilio credentials not set; WhatsApp replies disabled.")
        return None
    from twilio.rest import Client

    return TwilioGateway(Client(TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN), TWILIO_WHATSAPP_NUMBER)


def _sender_from_whatsapp(address: str) -> str:
    address = (address or "").strip()
    if address.startswith(WHATSAPP_PREFIX):
        return address[len(WHATSAPP_PREFIX):]
    return address


async def _count(reply_type: str) -> None:
    async with metrics_lock:
        request_counters[reply_type] = request_counters.get(reply_type, 0) + 1


# -----------------------------
# Startup / Shutdown Events
# -----------------------------
@app.on_event("startup")
async def startup():
    global DB_CONNECTED, DB_ERROR, COMPLETION_ENABLED
    global intent_router, messaging_gateway

    messaging_gateway = _build_gateway()

    if not DATABASE_URL:
        logger.warning("DATABASE_URL not set; DB functionality disabled.")
        DB_CONNECTED = False
        DB_ERROR = "DATABASE_URL not set"
        return

    try:
        await db.connect()
        DB_CONNECTED = True
        DB_ERROR = None
        logger.info("✅ Prisma DB connected")

        # Pipeline is created ONLY after DB is ready
        store = PrismaRecordStore(db)
        await store.seed_initial_categories()

        completions = build_completion_services()
        COMPLETION_ENABLED = completions["intent"] is not None
        profile = INTENT_PROFILES.get(INTENT_PROFILE, INTENT_PROFILES["advanced"])
        intent_router = build_intent_router(
            store,
            intent_completion=completions["intent"],
            parsing_completion=completions["parsing"],
            response_completion=completions["response"],
            enabled_types=profile,
        )
        logger.info(f"✅ Pipeline ready profile={INTENT_PROFILE} completion={COMPLETION_ENABLED}")

    except Exception as e:
        DB_CONNECTED = False
        DB_ERROR = str(e)
        logger.exception("❌ Failed to connect Prisma DB")
        if DEBUG:
            raise


@app.on_event("shutdown")
async def shutdown():
    global DB_CONNECTED
    if DB_CONNECTED:
        await db.disconnect()
        DB_CONNECTED = False
        logger.info("✅ Prisma DB disconnected")


# -----------------------------
# API Endpoints
# -----------------------------
@app.get("/")
async def root():
    return {"message": "MeuBolso.AI API is running."}


@app.get("/health")
async def health() -> Dict[str, Any]:
    info = {
        "status": "ok",
        "db_connected": DB_CONNECTED,
        "completion_enabled": COMPLETION_ENABLED,
        "whatsapp_enabled": messaging_gateway is not None,
    }
    if DB_ERROR:
        info["db_error"] = DB_ERROR
    return info


@app.get("/metrics")
async def metrics() -> Dict[str, Any]:
    async with metrics_lock:
        return request_counters.copy()


@app.post("/process")
async def process_request(request: UserRequest):
    await _count("total")

    if intent_router is None:
        raise HTTPException(status_code=503, detail="Pipeline unavailable")

    logger.info(
        f"[REQUEST_START] user_id={request.user_id}, text_length={len(request.text)}"
    )
    try:
        reply = await intent_router.handle(request.user_id, request.text)
    except Exception as e:
        await _count("errors")
        logger.exception(f"[ERROR] user_id={request.user_id}, exception={e}")
        raise HTTPException(
            status_code=500,
            detail=str(e) if DEBUG else "An unexpected error occurred",
        )

    await _count(reply.type.value)
    return {
        "type": reply.type.value,
        "data": deep_serialize(reply.data),
        "message": reply.message,
    }


@app.get("/whatsapp/webhook")
async def verify_webhook():
    return {"status": "ok"}


@app.post("/whatsapp/webhook")
async def whatsapp_webhook(request: Request):
    await _count("whatsapp")

    form = await request.form()
    body = str(form.get("Body", "")).strip()
    from_address = str(form.get("From", "")).strip()
    if not body or not from_address:
        logger.warning("[WEBHOOK] request without Body or From; ignored")
        return {"status": "ok"}

    if intent_router is None:
        raise HTTPException(status_code=503, detail="Pipeline unavailable")

    sender = _sender_from_whatsapp(from_address)
    logger.info(f"[WEBHOOK] from={sender}, text_length={len(body)}")

    try:
        reply = await intent_router.handle(sender, body)
        await _count(reply.type.value)
        if messaging_gateway is not None:
            await messaging_gateway.send_message(from_address, reply.message)
        else:
            logger.warning(f"[WEBHOOK] no gateway; reply to {sender} dropped")
    except Exception as e:
        await _count("errors")
        logger.exception(f"[ERROR] webhook from={sender}, exception={e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")

    return {"status": "ok"}


# -----------------------------
# Entrypoint
# -----------------------------
import uvicorn

from config import PORT

if __name__ == "__main__":
    uvicorn.run("API_LAYER.app:app", host="0.0.0.0", port=PORT, workers=1)
