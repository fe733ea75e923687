import pytest
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from celebration_api.api.deps import get_executor
from celebration_api.main import app


def booking_row(**overrides):
    """A bookings row the way aiomysql hands it back."""
    row = {
        "id": 42,
        "uniqueId": "00042",
        "customerName": "Asha Rao",
        "contactNumber": "9876543210",
        "eventDate": date(2025, 3, 10),
        "eventTime": timedelta(hours=18, minutes=30),
        "branch": "Andheri",
        "selectedPackage": "Gold",
        "amount": Decimal("15000.00"),
        "celebrationType": "Birthday",
    }
    row.update(overrides)
    return row


@pytest.fixture
def executor():
    mock = AsyncMock()
    mock.tx = AsyncMock()

    async def run_transaction(work):
        return await work(mock.tx)

    mock.transaction.side_effect = run_transaction
    return mock


@pytest.fixture
def client(executor):
    app.dependency_overrides[get_executor] = lambda: executor
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_row():
    return booking_row
