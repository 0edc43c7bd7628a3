"""
Kafka Order Publisher

Publishes Orders to the 'orders' topic in the same protobuf wire format the
checkout service uses.

DELIVERY:
- enable.idempotence + acks=all
- produce() is asynchronous; delivery reports arrive through poll()/flush()
- Messages carry no key unless one is passed explicitly
"""

import logging
from functools import partial
from typing import Callable, Optional

from confluent_kafka import KafkaError, KafkaException, Message, Producer

from src.producer.config import ProducerConfig
from src.shared.orders import ORDERS_TOPIC, Order


class OrderPublisher:
    """
    Kafka producer for completed orders.

    Attributes:
        config: Producer configuration
        topic: Target topic (always 'orders')
        producer: confluent_kafka.Producer instance
        delivered: Messages acknowledged by the broker
        failed: Messages whose delivery failed
    """

    def __init__(
        self,
        config: ProducerConfig,
        logger: Optional[logging.Logger] = None,
        producer_factory: Callable[[dict], Producer] = Producer,
    ):
        self.config = config
        self.topic = ORDERS_TOPIC
        self.logger = logger or logging.getLogger(__name__)
        self.delivered = 0
        self.failed = 0

        try:
            self.producer = producer_factory(config.get_kafka_config())
        except KafkaException:
            self.logger.error("Failed to initialize Kafka producer", exc_info=True)
            raise

        self.logger.info(
            "Kafka producer initialized",
            extra={
                "kafka_addr": config.kafka_addr,
                "topic": self.topic,
                "client_id": config.producer_client_id,
            },
        )

    def _on_delivery(self, order_id: str, err: Optional[KafkaError], msg: Message) -> None:
        """Delivery report callback, bound to one order id."""
        if err is not None:
            self.failed += 1
            self.logger.error(
                "Message delivery failed",
                extra={"correlation_id": order_id, "error": err.str(), "error_code": err.code()},
            )
            return

        self.delivered += 1
        self.logger.debug(
            "Message delivered",
            extra={
                "correlation_id": order_id,
                "partition": msg.partition(),
                "offset": msg.offset(),
            },
        )

    def produce_order(self, order: Order, key: Optional[str] = None) -> None:
        """
        Publish one order.

        Args:
            order: Order to publish
            key: Optional message key

        Raises:
            BufferError: Local producer queue is full
            KafkaException: Kafka client error
        """
        self.producer.produce(
            topic=self.topic,
            key=key.encode("utf-8") if key is not None else None,
            value=order.to_bytes(),
            on_delivery=partial(self._on_delivery, order.order_id),
        )
        self.producer.poll(0)

        self.logger.debug(
            "Order published to Kafka",
            extra={"correlation_id": order.order_id, "items_count": len(order.items)},
        )

    def flush(self, timeout: float = 30.0) -> int:
        """
        Wait for outstanding deliveries.

        Returns:
            Number of messages still in queue (0 = all delivered)
        """
        remaining = self.producer.flush(timeout)
        if remaining > 0:
            self.logger.warning(
                "Producer flush timeout",
                extra={"remaining_messages": remaining, "timeout": timeout},
            )
        return remaining
