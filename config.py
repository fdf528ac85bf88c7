import os
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

def get_env_var(name: str) -> str:
    """Get environment variable or raise a clear error if missing."""
    value = os.getenv(name)
    if not value:
        raise RuntimeError(
            f"❌ Missing required environment variable: {name}\n"
            f"👉 Did you copy .env.example to .env and fill in your keys?"
        )
    return value

# Resolved lazily by agents.completion.build_model so imports never fail
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")

# Model selection (intent + free-text replies can use a stronger model than parsing)
GEMINI_MODEL_NAME = os.getenv("GEMINI_MODEL_NAME", "gemini-1.5-flash")
INTENT_MODEL_NAME = os.getenv("INTENT_MODEL_NAME", GEMINI_MODEL_NAME)
RESPONSE_MODEL_NAME = os.getenv("RESPONSE_MODEL_NAME", GEMINI_MODEL_NAME)
PARSING_MODEL_NAME = os.getenv("PARSING_MODEL_NAME", GEMINI_MODEL_NAME)

# Optional vars (with defaults)
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
PORT = int(os.getenv("PORT", "8000"))
TIMEZONE = os.getenv("TIMEZONE", "America/Sao_Paulo")
USD_TO_BRL_RATE = float(os.getenv("USD_TO_BRL_RATE", "5.2"))
MAX_INPUT_LEN = int(os.getenv("MAX_INPUT_LEN", "2000"))

# "advanced" = full taxonomy, "basic" = expense/report/help/unknown only
INTENT_PROFILE = os.getenv("INTENT_PROFILE", "advanced").lower()

DATABASE_URL = os.getenv("DATABASE_URL")

TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_WHATSAPP_NUMBER = os.getenv("TWILIO_WHATSAPP_NUMBER", "whatsapp:+14155238886")
