"""
Pytest Configuration and Shared Fixtures

UNIT FIXTURES:
- accounting_config: config pointing at a file-backed SQLite store
- db_manager: real DatabaseManager on that store, 'orders' table created
- sample_order / sample_payload: a fully populated order and its wire bytes
- FakeMessage: stand-in for confluent_kafka.Message

INTEGRATION FIXTURES (testcontainers):
- postgres_container / kafka_container: real services, one per session
"""

import os
from typing import Generator, Optional

import pytest
from sqlalchemy import select

from src.accounting.config import AccountingConfig
from src.accounting.database import DatabaseManager
from src.accounting.models import metadata, orders_table
from src.shared.orders import Address, Money, Order, OrderItem

# ==============================================================================
# FAKE KAFKA MESSAGE
# ==============================================================================


class FakeMessage:
    """Mimics the confluent_kafka.Message accessors used by the consumer."""

    def __init__(
        self,
        value: Optional[bytes],
        key: Optional[bytes] = None,
        partition: int = 0,
        offset: int = 0,
        error=None,
    ):
        self._value = value
        self._key = key
        self._partition = partition
        self._offset = offset
        self._error = error

    def value(self):
        return self._value

    def key(self):
        return self._key

    def partition(self):
        return self._partition

    def offset(self):
        return self._offset

    def error(self):
        return self._error


@pytest.fixture
def fake_message():
    return FakeMessage


# ==============================================================================
# ORDER FIXTURES
# ==============================================================================


@pytest.fixture
def sample_order() -> Order:
    """A fully populated order with two line items."""
    return Order(
        order_id="3a1b7c5e-6f0d-4d8e-9c1a-2b3c4d5e6f70",
        shipping_tracking_id="b5f1c2d3-0a9e-4f7b-8c6d-1e2f3a4b5c6d",
        shipping_cost=Money(currency_code="USD", units=10, nanos=500_000_000),
        shipping_address=Address(
            street_address="1600 Amphitheatre Parkway",
            city="Mountain View",
            state="CA",
            country="United States",
            zip_code="94043",
        ),
        items=[
            OrderItem(
                product_id="OLJCESPC7Z",
                quantity=2,
                cost=Money(currency_code="USD", units=101, nanos=960_000_000),
            ),
            OrderItem(
                product_id="66VCHSJNUP",
                quantity=1,
                cost=Money(currency_code="USD", units=349, nanos=950_000_000),
            ),
        ],
    )


@pytest.fixture
def sample_payload(sample_order) -> bytes:
    return sample_order.to_bytes()


# ==============================================================================
# DATABASE FIXTURES (SQLite)
# ==============================================================================


@pytest.fixture
def accounting_config(tmp_path) -> AccountingConfig:
    return AccountingConfig(
        kafka_addr="localhost:9092",
        postgres_connection_string=f"sqlite:///{tmp_path / 'accounting.db'}",
        loop_delay_ms=0,
        poll_timeout_seconds=0.05,
    )


@pytest.fixture
def db_manager(accounting_config) -> Generator[DatabaseManager, None, None]:
    manager = DatabaseManager(accounting_config)
    metadata.create_all(manager.engine)
    try:
        yield manager
    finally:
        manager.close()


def fetch_rows(manager: DatabaseManager):
    """All accounting rows, in insertion order."""
    with manager.engine.connect() as conn:
        return conn.execute(select(orders_table)).all()


@pytest.fixture
def rows(db_manager):
    """Callable returning the current contents of the 'orders' table."""
    return lambda: fetch_rows(db_manager)


# ==============================================================================
# INTEGRATION FIXTURES (testcontainers)
# ==============================================================================


@pytest.fixture(scope="session")
def postgres_container():
    """PostgreSQL testcontainer for the whole session."""
    from testcontainers.postgres import PostgresContainer

    with PostgresContainer("postgres:16") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def kafka_container():
    """Kafka testcontainer for the whole session."""
    from testcontainers.kafka import KafkaContainer

    with KafkaContainer() as kafka:
        yield kafka


# ==============================================================================
# TEST ENVIRONMENT CONFIGURATION
# ==============================================================================


def pytest_configure(config):
    os.environ["ENVIRONMENT"] = "test"

    config.addinivalue_line(
        "markers", "integration: mark test as integration test (requires containers)"
    )
    config.addinivalue_line("markers", "slow: mark test as slow (takes more than 5 seconds)")
    config.addinivalue_line("markers", "unit: mark test as unit test (no external dependencies)")
