"""
Order Publisher Package

Development tool that publishes mock completed orders to the Kafka 'orders'
topic in the protobuf wire format read by the accounting consumer.

Package components:
- config.py: Publisher configuration from environment variables
- mock_data.py: Seeded mock order generator (Faker)
- producer.py: Kafka publisher with delivery callbacks
- main.py: CLI entry point

USAGE:
    python -m src.producer.main --count 100 --rate 10
"""

__version__ = "1.0.0"

from src.producer.config import ProducerConfig, load_config

__all__ = [
    "ProducerConfig",
    "load_config",
]
