"""
Accounting Consumer

Drives the ingestion loop: fetch from the 'orders' topic, decode, persist,
repeat. Single-threaded; messages are handled strictly one at a time, in
partition order.

STATE MACHINE:
    IDLE ──start()──▶ RUNNING ──stop()/cancel──▶ STOPPING ──close()──▶ STOPPED

LOOP ITERATION:
1. Check the stop event
2. fetch_next() (blocks; interrupted by the stop event)
3. decode_order()
4. writer.persist()
5. Commit the offset (only when auto-commit is disabled)
6. Wait loop_delay_ms (ends early when stop is requested)

FAILURE ISOLATION:
- TransientConsumeError: logged, loop continues after the usual delay
- DecodeError: logged, message dropped (no redelivery, no dead-letter)
- PersistError: logged, row dropped (no retry, no dead-letter)
- FetchCancelled / KeyboardInterrupt: orderly shutdown, start() returns
- Anything else: logged, shutdown path runs, exception propagates
"""

import enum
import logging
import threading
import time
from typing import Callable, Optional

from confluent_kafka import Message

from src.accounting.broker import OrdersTopicClient
from src.accounting.config import AccountingConfig
from src.accounting.decoder import decode_order
from src.accounting.errors import DecodeError, FetchCancelled, PersistError, TransientConsumeError
from src.accounting.writer import OrderWriter
from src.shared.logger import CorrelationAdapter
from src.shared.orders import Order


class ConsumerState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


class AccountingConsumer:
    """
    Consumption orchestrator for the accounting service.

    Attributes:
        broker: Orders topic client (owned; closed on shutdown)
        writer: Accounting row writer
        config: Accounting configuration
        logger: Injected logger
        state: Current ConsumerState
        messages_processed: Rows written
        messages_dropped: Payloads that failed to decode
        messages_failed: Orders that failed to persist
        consume_errors: Transient broker errors
    """

    def __init__(
        self,
        broker: OrdersTopicClient,
        writer: OrderWriter,
        config: AccountingConfig,
        logger: Optional[logging.Logger] = None,
        decoder: Callable[[Optional[bytes]], Order] = decode_order,
    ):
        self.broker = broker
        self.writer = writer
        self.config = config
        self.decoder = decoder
        self.logger = logger or logging.getLogger(__name__)

        self.state = ConsumerState.IDLE
        self._stop_event = threading.Event()

        self.messages_processed = 0
        self.messages_dropped = 0
        self.messages_failed = 0
        self.consume_errors = 0

    def start(self) -> None:
        """
        Run the consumer loop until stop() is called.

        Raises:
            RuntimeError: If the consumer was already started
        """
        if self.state is not ConsumerState.IDLE:
            raise RuntimeError(f"Consumer cannot start from state {self.state.value}")

        self.state = ConsumerState.RUNNING
        self.logger.info("Starting consumer loop...")

        try:
            while not self._stop_event.is_set():
                try:
                    msg = self.broker.fetch_next(self._stop_event)
                except TransientConsumeError as e:
                    self.consume_errors += 1
                    self.logger.error(
                        f"Consume error: {e.reason}",
                        extra={"error_code": e.code, "consume_errors": self.consume_errors},
                    )
                    self._stop_event.wait(self.config.loop_delay_ms / 1000)
                    continue

                self._process_message(msg)
                self._stop_event.wait(self.config.loop_delay_ms / 1000)

        except (FetchCancelled, KeyboardInterrupt):
            self.logger.info("Cancellation received, shutting down...")
        except Exception:
            self.logger.error("Fatal error in consumer loop", exc_info=True)
            raise
        finally:
            self._shutdown()

    def stop(self) -> None:
        """
        Request a graceful stop.

        Safe to call from a signal handler or another thread; a pending fetch
        returns within one poll slice.
        """
        if not self._stop_event.is_set():
            self.logger.info("Stopping consumer...")
        self._stop_event.set()

    def _process_message(self, msg: Message) -> None:
        start_time = time.monotonic()
        message_key = self._message_key(msg)

        try:
            order = self.decoder(msg.value())
        except DecodeError as e:
            self.messages_dropped += 1
            self.logger.error(
                "Order parsing failed",
                extra={
                    "reason": e.reason,
                    "partition": msg.partition(),
                    "offset": msg.offset(),
                    "message_key": message_key,
                    "messages_dropped": self.messages_dropped,
                },
            )
            self._commit(msg)
            return

        order_logger = CorrelationAdapter(self.logger, {"correlation_id": order.order_id})
        order_logger.info(
            "Order received",
            extra={
                "shipping_tracking_id": order.shipping_tracking_id,
                "shipping_cost_amount": str(order.shipping_cost.amount),
                "shipping_cost_currency": order.shipping_cost.currency_code,
                "items_count": len(order.items),
                "partition": msg.partition(),
                "offset": msg.offset(),
            },
        )

        try:
            self.writer.persist(order, message_key)
        except PersistError as e:
            self.messages_failed += 1
            order_logger.error(
                "Failed to save order to PostgreSQL",
                exc_info=e.cause,
                extra={
                    "error_type": type(e.cause).__name__,
                    "messages_failed": self.messages_failed,
                },
            )
        else:
            self.messages_processed += 1
            order_logger.debug(
                "Order processed",
                extra={
                    "processing_time_ms": round((time.monotonic() - start_time) * 1000, 2),
                    "messages_processed": self.messages_processed,
                },
            )

        self._commit(msg)

    def _commit(self, msg: Message) -> None:
        """Commit past ``msg`` when offsets are not auto-committed."""
        if self.config.enable_auto_commit:
            return
        try:
            self.broker.commit(msg)
        except TransientConsumeError as e:
            self.consume_errors += 1
            self.logger.error(
                "Failed to commit offset",
                extra={"reason": e.reason, "partition": msg.partition(), "offset": msg.offset()},
            )

    @staticmethod
    def _message_key(msg: Message) -> Optional[str]:
        key = msg.key()
        if key is None:
            return None
        if isinstance(key, bytes):
            return key.decode("utf-8", errors="replace")
        return str(key)

    def _shutdown(self) -> None:
        """
        STOPPING → close the broker client → STOPPED.

        Close failures are logged; the state still reaches STOPPED.
        """
        self.state = ConsumerState.STOPPING
        self.logger.info(
            "Consumer shutting down",
            extra={
                "messages_processed": self.messages_processed,
                "messages_dropped": self.messages_dropped,
                "messages_failed": self.messages_failed,
                "consume_errors": self.consume_errors,
            },
        )

        try:
            self.broker.close()
        except Exception:
            self.logger.error("Error closing Kafka consumer", exc_info=True)

        self.state = ConsumerState.STOPPED
        self.logger.info("Consumer shutdown complete")
