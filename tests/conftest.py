"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
import sys
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Unit tests use mocks and in-memory stores, so these are just defaults
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("APP_LOG_LEVEL", "WARNING")
os.environ.setdefault("OTEL_LOG_RECORD_FORMAT", "console")

from balance_api.domain.models.transaction import TransactionStatus  # noqa: E402
from tests.fakes import InMemoryStore  # noqa: E402

TEAM_API_KEY = "tk_abc"
OTHER_TEAM_API_KEY = "tk_other"


@pytest.fixture
def mock_session():
    """Mock async database session."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def store() -> InMemoryStore:
    """In-memory store with team T7 (key tk_abc) and team T8 (key tk_other)."""
    store = InMemoryStore()
    store.add_team("T7", "Team Seven", TEAM_API_KEY)
    store.add_team("T8", "Team Eight", OTHER_TEAM_API_KEY)
    store.add_website("W1", "T7", "web1", balance=10000.0)
    store.add_website("W2", "T8", "web-other", balance=500.0)
    return store


@pytest.fixture
def sample_transaction_data() -> dict:
    """A pending withdrawal as returned by the transaction repository."""
    return {
        "id": "X1",
        "team_id": "T7",
        "transaction_id": "TXN-1001",
        "customer_username": "customer01",
        "website_name": "web1",
        "website_id": "W1",
        "bank_name": "SCB",
        "account_number": "1234567890",
        "real_name": "Somchai Jaidee",
        "amount": 1500.0,
        "balance_before": 10000.0,
        "balance_after": 8500.0,
        "status": TransactionStatus.PENDING.value,
        "type": "withdraw",
        "note": None,
        "created_at": datetime(2024, 5, 1, 9, 0, tzinfo=UTC),
        "updated_at": datetime(2024, 5, 1, 9, 0, tzinfo=UTC),
        "created_by": "api",
        "last_modified_by": None,
        "last_modified_by_email": None,
        "last_modified_at": None,
        "completed_at": None,
        "team_name": "Team Seven",
    }
