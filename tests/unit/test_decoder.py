"""
Unit Tests for the Order Decoder

TEST STRATEGY:
- Valid OrderResult payloads decode field-for-field
- Every malformed payload surfaces as DecodeError, never anything else
- Decoding is pure: the same bytes always give the same Order
"""

import pytest

from src.accounting.decoder import decode_order
from src.accounting.errors import AccountingError, DecodeError
from src.shared import order_pb

# ==============================================================================
# VALID PAYLOADS
# ==============================================================================


@pytest.mark.unit
def test_decode_order_fields(sample_order, sample_payload):
    order = decode_order(sample_payload)

    assert order.order_id == sample_order.order_id
    assert order.shipping_tracking_id == sample_order.shipping_tracking_id
    assert order.shipping_cost.currency_code == "USD"
    assert order.shipping_cost.units == 10
    assert order.shipping_cost.nanos == 500_000_000
    assert order.shipping_address.city == "Mountain View"
    assert order.shipping_address.zip_code == "94043"
    assert [item.product_id for item in order.items] == ["OLJCESPC7Z", "66VCHSJNUP"]
    assert [item.quantity for item in order.items] == [2, 1]
    assert order.items[1].cost.units == 349


@pytest.mark.unit
def test_decode_order_is_deterministic(sample_payload):
    assert decode_order(sample_payload) == decode_order(sample_payload)


@pytest.mark.unit
def test_decode_minimal_order():
    """Only order_id set: every other field takes its zero value."""
    payload = order_pb.OrderResult(order_id="o-1").SerializeToString()

    order = decode_order(payload)

    assert order.order_id == "o-1"
    assert order.shipping_tracking_id == ""
    assert order.shipping_cost.units == 0
    assert order.shipping_cost.nanos == 0
    assert order.shipping_address.street_address == ""
    assert order.items == []


@pytest.mark.unit
def test_decode_accepts_bytearray(sample_payload, sample_order):
    assert decode_order(bytearray(sample_payload)).order_id == sample_order.order_id


@pytest.mark.unit
def test_decode_wire_built_by_hand():
    """A payload built directly from the generated classes, as checkout does."""
    msg = order_pb.OrderResult(order_id="o-2", shipping_tracking_id="t-2")
    msg.shipping_cost.currency_code = "EUR"
    msg.shipping_cost.units = 3
    msg.shipping_cost.nanos = 250_000_000
    item = msg.items.add()
    item.item.product_id = "L9ECAV7KIM"
    item.item.quantity = 4
    item.cost.currency_code = "EUR"
    item.cost.units = 14

    order = decode_order(msg.SerializeToString())

    assert order.items[0].product_id == "L9ECAV7KIM"
    assert order.items[0].quantity == 4
    assert str(order.shipping_cost.amount) == "3.25"


# ==============================================================================
# MALFORMED PAYLOADS
# ==============================================================================


@pytest.mark.unit
def test_decode_truncated_payload():
    """Field 1 declares 5 bytes but only 2 follow."""
    with pytest.raises(DecodeError):
        decode_order(b"\x0a\x05ab")


@pytest.mark.unit
def test_decode_truncated_real_payload(sample_payload):
    with pytest.raises(DecodeError):
        decode_order(sample_payload[: len(sample_payload) // 2])


@pytest.mark.unit
def test_decode_empty_payload():
    """An empty payload is a valid message with every field at its default."""
    order = decode_order(b"")

    assert order.order_id == ""
    assert order.shipping_tracking_id == ""
    assert order.items == []


@pytest.mark.unit
def test_decode_order_without_id():
    payload = order_pb.OrderResult(shipping_tracking_id="t-1").SerializeToString()

    order = decode_order(payload)

    assert order.order_id == ""
    assert order.shipping_tracking_id == "t-1"


@pytest.mark.unit
def test_decode_invalid_utf8_string_field():
    """Field 2 (shipping_tracking_id) carries bytes that are not UTF-8."""
    payload = order_pb.OrderResult(order_id="o-1").SerializeToString() + b"\x12\x02\xff\xfe"

    with pytest.raises(DecodeError):
        decode_order(payload)


@pytest.mark.unit
def test_decode_none_payload():
    with pytest.raises(DecodeError) as exc_info:
        decode_order(None)

    assert "no payload" in exc_info.value.reason


@pytest.mark.unit
def test_decode_text_payload():
    with pytest.raises(DecodeError):
        decode_order("not bytes")


@pytest.mark.unit
def test_decode_error_is_accounting_error():
    with pytest.raises(AccountingError) as exc_info:
        decode_order(b"\xff\xff\xff")

    assert str(exc_info.value).startswith("Order parsing failed")
