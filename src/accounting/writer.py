"""
Accounting Row Writer

Persists one decoded Order as one row of the 'orders' table.

ROW MAPPING:
- shipping_cost_amount   = units + nanos / 1_000_000_000 (Decimal)
- shipping_cost_currency = shipping_cost.currency_code
- shipping_address       = address as JSON text
- items                  = line items as JSON array text
- message_key            = Kafka message key, NULL when the message had none
- created_at             = UTC wall clock at call time

Every value is a bound parameter of a single INSERT. No existence check is
made before writing.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from sqlalchemy import Insert, insert

from src.accounting.database import DatabaseManager
from src.accounting.errors import PersistError
from src.accounting.models import orders_table
from src.shared.orders import Order


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OrderWriter:
    """
    Writes accounting rows through a pooled DatabaseManager.

    Attributes:
        db_manager: Source of scoped sessions
        logger: Injected logger
        clock: Returns the current UTC time for created_at
    """

    def __init__(
        self,
        db_manager: DatabaseManager,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db_manager = db_manager
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock

    def build_row(self, order: Order, message_key: Optional[str]) -> Dict[str, Any]:
        """Map an Order onto the accounting row columns, in table order."""
        return {
            "order_id": order.order_id,
            "shipping_tracking_id": order.shipping_tracking_id,
            "shipping_cost_amount": order.shipping_cost.amount,
            "shipping_cost_currency": order.shipping_cost.currency_code,
            "shipping_address": order.shipping_address_json(),
            "items": order.items_json(),
            "message_key": message_key,
            "created_at": self.clock(),
        }

    @staticmethod
    def build_insert(row: Dict[str, Any]) -> Insert:
        return insert(orders_table).values(**row)

    def persist(self, order: Order, message_key: Optional[str] = None) -> None:
        """
        Write one accounting row for ``order``.

        Args:
            order: Decoded order
            message_key: Kafka message key, or None

        Raises:
            PersistError: On any failure (serialization, connection, constraint)
        """
        try:
            row = self.build_row(order, message_key)
            with self.db_manager.get_session() as session:
                session.execute(self.build_insert(row))
        except Exception as e:
            raise PersistError(order.order_id, e) from e

        self.logger.info(
            f"Order {order.order_id} saved to PostgreSQL database",
            extra={"correlation_id": order.order_id, "message_key": message_key},
        )
