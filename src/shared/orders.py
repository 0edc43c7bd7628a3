"""
Order Record

In-flight representation of one completed order between decoding and
persistence. Built from the ``OrderResult`` protobuf by the decoder and turned
back into protobuf by the development publisher.

MONEY:
The wire format carries money as a fixed-point triple (units, nanos,
currency_code). It stays a triple here; ``Money.amount`` converts to Decimal
only when the accounting row is built:

    amount = units + nanos / 1_000_000_000
"""

import json
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from src.shared import order_pb

ORDERS_TOPIC = "orders"

NANOS_PER_UNIT = 1_000_000_000


class Money(BaseModel):
    """Fixed-point monetary amount."""

    model_config = ConfigDict(frozen=True)

    currency_code: str = Field(default="", description="ISO 4217 currency code, e.g. USD")
    units: int = Field(default=0, description="Whole units of the amount")
    nanos: int = Field(default=0, description="Nano (10^-9) units of the amount")

    @property
    def amount(self) -> Decimal:
        """
        Decimal value of the triple.

        Example:
            >>> Money(currency_code="USD", units=10, nanos=500_000_000).amount
            Decimal('10.5')
        """
        return Decimal(self.units) + Decimal(self.nanos) / Decimal(NANOS_PER_UNIT)

    @classmethod
    def from_proto(cls, msg) -> "Money":
        return cls(currency_code=msg.currency_code, units=msg.units, nanos=msg.nanos)

    def to_proto(self):
        return order_pb.Money(currency_code=self.currency_code, units=self.units, nanos=self.nanos)


class Address(BaseModel):
    """Shipping address."""

    model_config = ConfigDict(frozen=True)

    street_address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    zip_code: str = ""

    @classmethod
    def from_proto(cls, msg) -> "Address":
        return cls(
            street_address=msg.street_address,
            city=msg.city,
            state=msg.state,
            country=msg.country,
            zip_code=msg.zip_code,
        )

    def to_proto(self):
        return order_pb.Address(
            street_address=self.street_address,
            city=self.city,
            state=self.state,
            country=self.country,
            zip_code=self.zip_code,
        )


class OrderItem(BaseModel):
    """One line item: product, quantity and its cost."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    quantity: int
    cost: Money

    @classmethod
    def from_proto(cls, msg) -> "OrderItem":
        # The wire nests product and quantity inside a CartItem
        return cls(
            product_id=msg.item.product_id,
            quantity=msg.item.quantity,
            cost=Money.from_proto(msg.cost),
        )

    def to_proto(self):
        msg = order_pb.OrderItem()
        msg.item.product_id = self.product_id
        msg.item.quantity = self.quantity
        msg.cost.CopyFrom(self.cost.to_proto())
        return msg


class Order(BaseModel):
    """
    Completed order as received from the 'orders' topic.

    Attributes:
        order_id: Order identifier (natural key, not unique in storage)
        shipping_tracking_id: Carrier tracking identifier
        shipping_cost: Shipping cost as a money triple
        shipping_address: Destination address
        items: Line items in wire order
    """

    model_config = ConfigDict(frozen=True)

    order_id: str
    shipping_tracking_id: str = ""
    shipping_cost: Money = Field(default_factory=Money)
    shipping_address: Address = Field(default_factory=Address)
    items: List[OrderItem] = Field(default_factory=list)

    @classmethod
    def from_proto(cls, msg) -> "Order":
        """Build an Order from an ``OrderResult`` protobuf message."""
        return cls(
            order_id=msg.order_id,
            shipping_tracking_id=msg.shipping_tracking_id,
            shipping_cost=Money.from_proto(msg.shipping_cost),
            shipping_address=Address.from_proto(msg.shipping_address),
            items=[OrderItem.from_proto(item) for item in msg.items],
        )

    def to_proto(self):
        """Build the ``OrderResult`` protobuf message for this order."""
        msg = order_pb.OrderResult(
            order_id=self.order_id,
            shipping_tracking_id=self.shipping_tracking_id,
        )
        msg.shipping_cost.CopyFrom(self.shipping_cost.to_proto())
        msg.shipping_address.CopyFrom(self.shipping_address.to_proto())
        for item in self.items:
            msg.items.add().CopyFrom(item.to_proto())
        return msg

    def to_bytes(self) -> bytes:
        """Serialize to the binary wire format."""
        return self.to_proto().SerializeToString()

    def shipping_address_json(self) -> str:
        return self.shipping_address.model_dump_json()

    def items_json(self) -> str:
        return json.dumps([item.model_dump() for item in self.items])

    def __str__(self) -> str:
        return (
            f"Order {self.order_id} - {len(self.items)} items - "
            f"shipping {self.shipping_cost.amount} {self.shipping_cost.currency_code}"
        )
