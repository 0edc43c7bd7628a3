"""
Producer Configuration Module

Settings for the development order publisher, loaded from environment
variables (and an optional .env file) with Pydantic validation.

CONFIGURATION SOURCES (priority order):
1. Command-line flags (src/producer/main.py)
2. Environment variables
3. .env file (loaded by python-dotenv)
4. Default values
"""

from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

load_dotenv()


class ProducerConfig(BaseSettings):
    """
    Order publisher configuration with validation.

    Attributes:
        kafka_addr: Kafka bootstrap address
        producer_client_id: Producer identifier
        producer_rate: Orders per second to publish
        producer_count: Number of orders to publish (0 = until stopped)
        mock_seed: Seed for reproducible mock orders
    """

    # === KAFKA CONNECTION ===
    kafka_addr: str = Field(
        default="localhost:9092",
        description="Kafka bootstrap address",
    )

    producer_client_id: str = Field(
        default="order-producer",
        description="Producer client identifier",
    )

    # === PRODUCER SETTINGS ===
    producer_rate: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Number of orders to publish per second (1-1000)",
    )

    producer_count: int = Field(
        default=100,
        ge=0,
        description="Number of orders to publish (0 = run until stopped)",
    )

    producer_compression: Literal["none", "gzip", "snappy", "lz4", "zstd"] = Field(
        default="snappy",
        description="Compression algorithm",
    )

    enable_idempotence: bool = Field(
        default=True,
        description="Enable idempotent producer",
    )

    key_by_order_id: bool = Field(
        default=False,
        description="Use the order id as message key (checkout publishes without a key)",
    )

    # === MOCK DATA SETTINGS ===
    mock_seed: int = Field(
        default=42,
        description="Random seed for reproducible mock orders",
    )

    # === LOGGING ===
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"
        frozen = True

    def get_kafka_config(self) -> dict:
        """Get the confluent-kafka producer configuration dictionary."""
        return {
            "bootstrap.servers": self.kafka_addr,
            "client.id": self.producer_client_id,
            "compression.type": self.producer_compression,
            "enable.idempotence": self.enable_idempotence,
            "acks": "all",
            "linger.ms": 10,
        }


def load_config() -> ProducerConfig:
    """Load and validate producer configuration."""
    return ProducerConfig()
