"""
Unit Tests for the Order Publisher

The confluent-kafka producer is replaced through ``producer_factory``.

TEST STRATEGY:
- Orders go to 'orders' as OrderResult bytes, keyless unless asked
- Delivery callbacks update counters
- Command-line overrides are validated like environment values
- run_producer publishes the configured count and honours the stop event
"""

import threading

import pytest
from confluent_kafka import KafkaError

from src.accounting.decoder import decode_order
from src.producer import main as producer_main
from src.producer.config import ProducerConfig
from src.producer.producer import OrderPublisher


class RecordingProducer:
    def __init__(self, config):
        self.config = config
        self.produced = []
        self.pending = []

    def produce(self, topic, key=None, value=None, on_delivery=None):
        self.produced.append({"topic": topic, "key": key, "value": value})
        self.pending.append(on_delivery)

    def poll(self, timeout=None):
        return 0

    def flush(self, timeout=None):
        for callback in self.pending:
            callback(None, _DeliveredMessage())
        self.pending = []
        return 0


class _DeliveredMessage:
    def partition(self):
        return 0

    def offset(self):
        return 0


@pytest.fixture
def publisher():
    return OrderPublisher(ProducerConfig(), producer_factory=RecordingProducer)


# ==============================================================================
# PUBLISHING
# ==============================================================================


@pytest.mark.unit
def test_produce_order_wire_format(publisher, sample_order):
    publisher.produce_order(sample_order)

    produced = publisher.producer.produced[0]
    assert produced["topic"] == "orders"
    assert produced["key"] is None
    assert decode_order(produced["value"]) == sample_order


@pytest.mark.unit
def test_produce_order_with_key(publisher, sample_order):
    publisher.produce_order(sample_order, key=sample_order.order_id)

    assert publisher.producer.produced[0]["key"] == sample_order.order_id.encode("utf-8")


@pytest.mark.unit
def test_delivery_callbacks(publisher, sample_order):
    publisher.produce_order(sample_order)
    publisher.produce_order(sample_order)
    publisher._on_delivery(sample_order.order_id, KafkaError(KafkaError._MSG_TIMED_OUT), None)

    assert publisher.flush() == 0
    assert publisher.delivered == 2
    assert publisher.failed == 1


# ==============================================================================
# COMMAND LINE
# ==============================================================================


@pytest.mark.unit
def test_build_config_overrides(monkeypatch):
    monkeypatch.delenv("KAFKA_ADDR", raising=False)
    args = producer_main.parse_args(["--kafka-addr", "kafka:9092", "--count", "5", "--key-by-order-id"])

    config = producer_main.build_config(args)

    assert config.kafka_addr == "kafka:9092"
    assert config.producer_count == 5
    assert config.key_by_order_id is True
    assert config.producer_rate == 10


@pytest.mark.unit
def test_main_rejects_invalid_rate(capsys):
    assert producer_main.main(["--rate", "0"]) == 1
    assert "Invalid configuration" in capsys.readouterr().err


# ==============================================================================
# RUN LOOP
# ==============================================================================


@pytest.mark.unit
def test_run_producer_publishes_count(monkeypatch):
    created = []

    def factory(config, logger=None):
        publisher = OrderPublisher(config, logger=logger, producer_factory=RecordingProducer)
        created.append(publisher)
        return publisher

    monkeypatch.setattr(producer_main, "OrderPublisher", factory)
    config = ProducerConfig(producer_count=5, producer_rate=1000, key_by_order_id=True)

    exit_code = producer_main.run_producer(config, threading.Event())

    assert exit_code == 0
    produced = created[0].producer.produced
    assert len(produced) == 5
    assert all(p["key"] is not None for p in produced)
    assert created[0].delivered == 5


@pytest.mark.unit
def test_run_producer_stops_on_event(monkeypatch):
    created = []

    def factory(config, logger=None):
        publisher = OrderPublisher(config, logger=logger, producer_factory=RecordingProducer)
        created.append(publisher)
        return publisher

    monkeypatch.setattr(producer_main, "OrderPublisher", factory)
    stop_event = threading.Event()
    stop_event.set()

    assert producer_main.run_producer(ProducerConfig(producer_count=0), stop_event) == 0
    assert created[0].producer.produced == []
