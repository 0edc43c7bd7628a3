"""
Accounting Table Definition

SQLAlchemy Core definition of the 'orders' accounting table.

COLUMN ORDER (fixed, shared with other readers of the table):
    order_id, shipping_tracking_id, shipping_cost_amount, shipping_cost_currency,
    shipping_address, items, message_key, created_at

No primary key and no unique constraint: a redelivered message produces a
second row with the same order_id. Rows are insert-only.
"""

from sqlalchemy import (
    Column,
    DateTime,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
)

metadata = MetaData()


# ==============================================================================
# ORDERS TABLE
# ==============================================================================

orders_table = Table(
    "orders",
    metadata,
    Column("order_id", String(255), nullable=False, comment="Order identifier from the event"),
    Column("shipping_tracking_id", String(255), comment="Carrier tracking identifier"),
    # units + nanos / 1e9 keeps all nine fractional digits
    Column(
        "shipping_cost_amount",
        Numeric(precision=28, scale=9),
        comment="Shipping cost as decimal",
    ),
    Column("shipping_cost_currency", String(3), comment="ISO 4217 currency code"),
    Column("shipping_address", Text, comment="Shipping address as JSON text"),
    Column("items", Text, comment="Line items as JSON array text"),
    Column("message_key", String(255), nullable=True, comment="Kafka message key, NULL if absent"),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        comment="UTC time the row was written (processing time)",
    ),
    comment="Accounting records consumed from the Kafka orders topic",
)

ORDER_COLUMNS = tuple(column.name for column in orders_table.columns)
