# FILE: services/expense_splitter.py
import re
from typing import List

TRIGGER = "gastei"

# Commas and periods between two digits are decimal marks, not separators
SEPARATORS = (
    re.compile(r"(?<!\d),|,(?!\d)"),
    re.compile(r"(?<!\d)\.|\.(?!\d)"),
    re.compile(r"\n"),
)

SINGLE_EXPENSE_RE = re.compile(r"gastei\s+\d+(?:[.,]\d{2})?\s+[^,.\n]+", re.IGNORECASE)


def split_expenses(message: str) -> List[str]:
    """
    Fragments of a message that each describe one expense.

    "gastei 10 no pão, gastei 20 no leite" -> ["gastei 10 no pão", "gastei 20 no leite"]

    A result with fewer than two fragments means the message is a single expense
    (or none) and should go through normal classification.
    """
    if not message or TRIGGER not in message.lower():
        return []

    for sep in SEPARATORS:
        parts = [p.strip() for p in sep.split(message)]
        if len(parts) < 2:
            continue
        fragments = [p for p in parts if TRIGGER in p.lower()]
        if len(fragments) > 1:
            return fragments

    return [m.strip() for m in SINGLE_EXPENSE_RE.findall(message)]
