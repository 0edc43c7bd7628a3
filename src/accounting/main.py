"""
Accounting Consumer Service - Main Entry Point

USAGE:
    python -m src.accounting.main
    accounting-consumer

No command-line flags; everything comes from the environment (see
src/accounting/config.py):
    KAFKA_ADDR                   Kafka bootstrap address (required)
    POSTGRES_CONNECTION_STRING   Store connection string (required)
    ENABLE_AUTO_COMMIT           Timer-based offset commits (default: true)
    LOOP_DELAY_MS                Delay between messages (default: 10)
    LOG_LEVEL / LOG_FORMAT       Logging (default: INFO / json)

EXIT CODES:
    0  Stopped by SIGINT/SIGTERM after a graceful shutdown
    1  Invalid or missing configuration, or a fatal error in the loop
"""

import logging
import signal
import sys

from pydantic import ValidationError

from src.accounting.broker import OrdersTopicClient
from src.accounting.config import load_config
from src.accounting.consumer import AccountingConsumer
from src.accounting.database import init_database
from src.accounting.errors import ConfigurationError
from src.accounting.writer import OrderWriter
from src.shared.logger import setup_logger

SERVICE_NAME = "accounting"


def install_signal_handlers(consumer: AccountingConsumer, logger: logging.Logger) -> None:
    """Route SIGINT and SIGTERM to consumer.stop()."""

    def handle_signal(signum: int, frame) -> None:
        logger.info(f"Received {signal.Signals(signum).name}, initiating graceful shutdown...")
        consumer.stop()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)


def main() -> int:
    """
    Main entry point for the accounting consumer.

    STARTUP SEQUENCE:
    1. Load configuration from environment
    2. Set up structured logging for the src.accounting logger tree
    3. Initialize the pooled database connection
    4. Create the orders topic client
    5. Register signal handlers
    6. Run the consumer loop until shutdown

    Returns:
        Exit code (0 = success, 1 = error)
    """
    try:
        config = load_config()
    except ValidationError as e:
        print(f"ERROR: Failed to load configuration: {e}", file=sys.stderr)
        return 1

    logger = setup_logger(
        name="src.accounting",
        service_name=SERVICE_NAME,
        log_level=config.log_level,
        log_format=config.log_format,
    )

    logger.info(
        "Starting Accounting Service",
        extra={
            "kafka_addr": config.kafka_addr,
            "consumer_group": config.consumer_group_id,
            "enable_auto_commit": config.enable_auto_commit,
            "log_level": config.log_level,
            "log_format": config.log_format,
        },
    )

    try:
        db_manager = init_database(config, logger=logger.getChild("database"))
    except ConfigurationError as e:
        logger.critical(f"Invalid configuration: {e}")
        return 1

    try:
        broker = OrdersTopicClient(config, logger=logger.getChild("broker"))
    except ConfigurationError as e:
        logger.critical(f"Invalid configuration: {e}")
        db_manager.close()
        return 1

    writer = OrderWriter(db_manager, logger=logger.getChild("writer"))
    consumer = AccountingConsumer(broker, writer, config, logger=logger.getChild("consumer"))

    install_signal_handlers(consumer, logger)

    try:
        consumer.start()
        logger.info("Consumer stopped")
        return 0
    except Exception:
        logger.error("Fatal error in consumer", exc_info=True)
        return 1
    finally:
        db_manager.close()


if __name__ == "__main__":
    sys.exit(main())
