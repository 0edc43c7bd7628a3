"""
Order Message Decoder

Converts a raw 'orders' topic payload into an Order. Pure: no I/O, no shared
state. Every failure (truncated or malformed protobuf, invalid UTF-8 in a string
field, missing payload) is reported as DecodeError. A message that parses
cleanly is an order even when its fields, order_id included, are empty.
"""

from typing import Optional

from google.protobuf.message import DecodeError as ProtobufDecodeError
from pydantic import ValidationError

from src.accounting.errors import DecodeError
from src.shared.order_pb import OrderResult
from src.shared.orders import Order


def decode_order(payload: Optional[bytes]) -> Order:
    """
    Decode an ``OrderResult`` protobuf payload.

    Args:
        payload: Raw message value (None for tombstones)

    Returns:
        The decoded Order

    Raises:
        DecodeError: If the payload is not a valid order
    """
    if payload is None:
        raise DecodeError("message has no payload")

    try:
        msg = OrderResult.FromString(bytes(payload))
    except (ProtobufDecodeError, TypeError, ValueError) as e:
        raise DecodeError(str(e) or type(e).__name__) from e

    try:
        return Order.from_proto(msg)
    except ValidationError as e:
        raise DecodeError(str(e)) from e
