"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from lounge.schemas.customer import Customer, MembershipType
from lounge.services.customers import CustomerRepository
from lounge.store.records import InMemoryRecordStore

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class TickingClock:
    """Returns ``start``, then one second later on every call."""

    def __init__(self, start: datetime = NOW):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


def make_form(**overrides) -> dict:
    """Customer form data as the UI submits it (camelCase keys)."""
    data = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "phone": "+44 20 7946 0000",
        "membershipType": "gold",
        "expiryDate": (NOW + timedelta(days=30)).isoformat(),
        "visits": 5,
    }
    data.update(overrides)
    return data


def make_customer(**overrides) -> Customer:
    data = {
        "id": "cust-test-001",
        "first_name": "Grace",
        "last_name": "Hopper",
        "email": "grace@example.com",
        "membership_type": MembershipType.PLATINUM,
        "membership_number": "P123456",
        "expiry_date": NOW + timedelta(days=200),
        "created_at": NOW - timedelta(days=10),
        "visits": 3,
    }
    data.update(overrides)
    return Customer(**data)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def repo(store, clock) -> CustomerRepository:
    return CustomerRepository(store, clock=clock)
