import sys
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

# ------------------------------------------------------------
# HARD ISOLATION: API tests must NOT load or hit a real DB
# ------------------------------------------------------------
sys.modules["prisma"] = MagicMock()

from API_LAYER.app import app


@pytest.fixture(scope="session")
def client():
    return TestClient(app)
