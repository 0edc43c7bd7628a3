"""
Accounting Consumer Service Package

Subscribes to the Kafka 'orders' topic, decodes each completed-order event from
its protobuf wire format and writes one accounting row per order into the
PostgreSQL 'orders' table.

ARCHITECTURE:
┌─────────────┐     ┌────────────────────────────────────┐     ┌────────────────┐
│   Kafka     │────▶│ AccountingConsumer                 │────▶│   PostgreSQL   │
│   orders    │     │ fetch → decode_order → OrderWriter │     │  orders table  │
└─────────────┘     └────────────────────────────────────┘     └────────────────┘

DELIVERY:
- Consumer group 'accounting', starts from the earliest offset
- Offsets auto-commit on a timer by default (ENABLE_AUTO_COMMIT=false commits
  after each handled message instead)
- No deduplication: a redelivered message produces a second row

Package components:
- config.py: Configuration from environment variables
- errors.py: Error taxonomy
- broker.py: Orders topic client
- decoder.py: Protobuf payload → Order
- models.py: 'orders' table definition
- database.py: Pooled engine and scoped sessions
- writer.py: Order → accounting row
- consumer.py: Consumption loop and shutdown
- main.py: Entry point with signal handling
"""

__version__ = "1.0.0"

from src.accounting.config import AccountingConfig, load_config

__all__ = [
    "AccountingConfig",
    "load_config",
]
