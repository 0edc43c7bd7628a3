"""
Order Publisher - Main Entry Point

Publishes mock completed orders to the 'orders' topic for local runs of the
accounting consumer.

USAGE:
    python -m src.producer.main
    python -m src.producer.main --count 500 --rate 50
    python -m src.producer.main --count 0          # until Ctrl+C
    python -m src.producer.main --key-by-order-id --log-format text
"""

import argparse
import signal
import sys
import threading
import time
from typing import List, Optional

from pydantic import ValidationError

from src.producer.config import ProducerConfig
from src.producer.mock_data import MockOrderGenerator
from src.producer.producer import OrderPublisher
from src.shared.logger import setup_logger


def run_producer(config: ProducerConfig, stop_event: threading.Event) -> int:
    """
    Publish orders at ``producer_rate`` until ``producer_count`` is reached or
    ``stop_event`` is set.

    Returns:
        Exit code (0 = every order delivered, 1 = some failed)
    """
    logger = setup_logger(
        name="src.producer",
        service_name="order-producer",
        log_level=config.log_level,
        log_format=config.log_format,
    )

    generator = MockOrderGenerator(seed=config.mock_seed)
    try:
        publisher = OrderPublisher(config, logger=logger.getChild("publisher"))
    except Exception:
        logger.error("Failed to create Kafka producer", exc_info=True)
        return 1

    sleep_interval = 1.0 / config.producer_rate
    published = 0
    start_time = time.monotonic()

    logger.info(
        "Starting order production",
        extra={"rate": config.producer_rate, "count": config.producer_count or "infinite"},
    )

    try:
        while not stop_event.is_set():
            if config.producer_count and published >= config.producer_count:
                break

            order = generator.generate_order()
            key = order.order_id if config.key_by_order_id else None
            try:
                publisher.produce_order(order, key=key)
            except BufferError:
                logger.warning("Producer queue full, draining", extra={"correlation_id": order.order_id})
                publisher.producer.poll(1.0)
                continue

            published += 1
            if published % 100 == 0:
                logger.info("Production progress", extra={"orders_published": published})

            stop_event.wait(sleep_interval)
    finally:
        remaining = publisher.flush(timeout=30.0)
        logger.info(
            "Producer shutdown complete",
            extra={
                "orders_published": published,
                "delivered": publisher.delivered,
                "failed": publisher.failed,
                "undelivered": remaining,
                "elapsed_seconds": round(time.monotonic() - start_time, 2),
            },
        )

    return 0 if publisher.failed == 0 and remaining == 0 else 1


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments (override environment variables)."""
    parser = argparse.ArgumentParser(
        description="Publish mock completed orders to the Kafka 'orders' topic",
    )
    parser.add_argument("--kafka-addr", type=str, help="Kafka bootstrap address")
    parser.add_argument("--rate", type=int, help="Orders per second (1-1000)")
    parser.add_argument("--count", type=int, help="Orders to publish (0 = until stopped)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible orders")
    parser.add_argument(
        "--key-by-order-id",
        action="store_true",
        default=None,
        help="Use the order id as message key",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument("--log-format", type=str, choices=["json", "text"], help="Log format")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ProducerConfig:
    """Apply command-line overrides on top of the environment configuration."""
    overrides = {
        "kafka_addr": args.kafka_addr,
        "producer_rate": args.rate,
        "producer_count": args.count,
        "mock_seed": args.seed,
        "key_by_order_id": args.key_by_order_id,
        "log_level": args.log_level,
        "log_format": args.log_format,
    }
    # Init kwargs take precedence over environment values and get the same validation
    return ProducerConfig(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        config = build_config(args)
    except ValidationError as e:
        print(f"ERROR: Invalid configuration: {e}", file=sys.stderr)
        return 1

    stop_event = threading.Event()

    def handle_signal(signum, frame):
        stop_event.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    return run_producer(config, stop_event)


if __name__ == "__main__":
    sys.exit(main())
