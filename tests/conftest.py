# tests/conftest.py
import sys
from datetime import date
from pathlib import Path

# ---------------------------------------------------------
# Ensure project root is on PYTHONPATH BEFORE app imports
# ---------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from tests.fakes import FakeCompletionService, InMemoryRecordStore

TODAY = date(2025, 3, 15)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def completion():
    return FakeCompletionService()
