import json
import re
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

def deep_serialize(obj: Any) -> Any:
    """
    Recursively convert objects to JSON-safe primitives.
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if hasattr(obj, "model_dump"):
        return deep_serialize(obj.model_dump())
    if isinstance(obj, dict):
        return {k: deep_serialize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [deep_serialize(v) for v in obj]
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)


_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def extract_json_object(text: Optional[str]) -> dict:
    """
    Pull the single JSON object out of a model completion.
    Tolerates markdown fences and chatter around the braces; raises ValueError otherwise.
    """
    if not text or not text.strip():
        raise ValueError("empty completion")

    fenced = _FENCE_RE.search(text)
    candidate = fenced.group(1) if fenced else text

    start = candidate.find("{")
    end = candidate.rfind("}")
    if start == -1 or end <= start:
        raise ValueError("no JSON object in completion")

    parsed = json.loads(candidate[start:end + 1])
    if not isinstance(parsed, dict):
        raise ValueError("completion JSON is not an object")
    return parsed


def format_brl(value: Any) -> str:
    """R$ 1.234,56"""
    return f"R$ {float(value):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
