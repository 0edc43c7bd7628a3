"""
Orders Topic Client

Thin wrapper around the confluent-kafka consumer that owns the subscription to
the 'orders' topic.

FETCH SEMANTICS:
- fetch_next() blocks until a message arrives, polling in short slices
  (poll_timeout_seconds) so that a cancellation event can interrupt it
- End-of-partition notifications are not messages and are skipped
- Broker errors surface as TransientConsumeError; the position is unaffected
- A set cancellation event surfaces as FetchCancelled

OFFSETS:
- Default: enable.auto.commit=true, offsets advance every
  auto.commit.interval.ms regardless of whether the row was written
- ENABLE_AUTO_COMMIT=false: the caller commits each message via commit()
"""

import logging
import threading
from typing import Callable, Optional

from confluent_kafka import Consumer, KafkaError, KafkaException, Message

from src.accounting.config import AccountingConfig
from src.accounting.errors import FetchCancelled, TransientConsumeError
from src.shared.orders import ORDERS_TOPIC


class OrdersTopicClient:
    """
    Kafka subscription to the orders topic.

    Attributes:
        config: Accounting configuration
        topic: Subscribed topic (always 'orders')
        consumer: Confluent Kafka consumer instance
        logger: Injected logger
    """

    def __init__(
        self,
        config: AccountingConfig,
        logger: Optional[logging.Logger] = None,
        consumer_factory: Callable[[dict], Consumer] = Consumer,
    ):
        """
        Create the consumer and subscribe to the orders topic.

        Args:
            config: Accounting configuration
            logger: Logger to use (defaults to this module's logger)
            consumer_factory: Builds the underlying consumer from its config dict

        Raises:
            ConfigurationError: If KAFKA_ADDR is not configured
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.topic = ORDERS_TOPIC
        self._closed = False

        kafka_config = config.get_kafka_config()

        self.consumer = consumer_factory(kafka_config)
        self.consumer.subscribe([self.topic])

        self.logger.info(
            f"Connecting to Kafka: {config.kafka_addr}",
            extra={
                "topic": self.topic,
                "group_id": config.consumer_group_id,
                "enable_auto_commit": config.enable_auto_commit,
            },
        )

    def fetch_next(self, cancel_event: threading.Event) -> Message:
        """
        Block until the next message is available.

        Args:
            cancel_event: Cancellation token checked between poll slices

        Returns:
            The next Kafka message

        Raises:
            TransientConsumeError: Broker or client error while polling
            FetchCancelled: cancel_event was set before a message arrived
        """
        while not cancel_event.is_set():
            try:
                msg = self.consumer.poll(timeout=self.config.poll_timeout_seconds)
            except KafkaException as e:
                error = e.args[0] if e.args else None
                if isinstance(error, KafkaError):
                    raise TransientConsumeError(error.str(), code=error.code()) from e
                raise TransientConsumeError(str(e)) from e

            if msg is None:
                continue

            error = msg.error()
            if error is None:
                return msg

            if error.code() == KafkaError._PARTITION_EOF:
                self.logger.debug(
                    "Reached end of partition",
                    extra={"partition": msg.partition(), "offset": msg.offset()},
                )
                continue

            raise TransientConsumeError(error.str(), code=error.code())

        raise FetchCancelled()

    def commit(self, msg: Message) -> None:
        """
        Synchronously commit the offset following ``msg``.

        Raises:
            TransientConsumeError: If the commit fails
        """
        try:
            self.consumer.commit(message=msg, asynchronous=False)
        except KafkaException as e:
            raise TransientConsumeError(f"Offset commit failed: {e}") from e

    def close(self) -> None:
        """Leave the consumer group and release the connection. Idempotent."""
        if self._closed:
            return
        self._closed = True

        self.logger.info("Closing consumer")
        self.consumer.close()

    @property
    def closed(self) -> bool:
        return self._closed
