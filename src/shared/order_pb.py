"""
Protobuf Wire Schema for Order Events

Checkout publishes every completed order to the 'orders' topic as a serialized
``oteldemo.OrderResult`` protobuf message. This module registers the message
types in a private descriptor pool and exposes the generated message classes.

WIRE LAYOUT (proto3):

    message Money {
        string currency_code = 1;
        int64  units = 2;
        int32  nanos = 3;
    }

    message Address {
        string street_address = 1;
        string city = 2;
        string state = 3;
        string country = 4;
        string zip_code = 5;
    }

    message CartItem {
        string product_id = 1;
        int32  quantity = 2;
    }

    message OrderItem {
        CartItem item = 1;
        Money    cost = 2;
    }

    message OrderResult {
        string             order_id = 1;
        string             shipping_tracking_id = 2;
        Money              shipping_cost = 3;
        Address            shipping_address = 4;
        repeated OrderItem items = 5;
    }

USAGE:
    >>> from src.shared.order_pb import OrderResult
    >>> msg = OrderResult.FromString(payload)
    >>> msg.shipping_cost.units
    10
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PACKAGE = "oteldemo"

_Field = descriptor_pb2.FieldDescriptorProto


def _add_field(message, name: str, number: int, field_type: int, type_name: str = "",
               repeated: bool = False) -> None:
    field = message.field.add(
        name=name,
        number=number,
        type=field_type,
        label=_Field.LABEL_REPEATED if repeated else _Field.LABEL_OPTIONAL,
    )
    if type_name:
        field.type_name = f".{PACKAGE}.{type_name}"


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    """Describe the order messages as a proto3 file."""
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="oteldemo/orders.proto",
        package=PACKAGE,
        syntax="proto3",
    )

    money = file_proto.message_type.add(name="Money")
    _add_field(money, "currency_code", 1, _Field.TYPE_STRING)
    _add_field(money, "units", 2, _Field.TYPE_INT64)
    _add_field(money, "nanos", 3, _Field.TYPE_INT32)

    address = file_proto.message_type.add(name="Address")
    _add_field(address, "street_address", 1, _Field.TYPE_STRING)
    _add_field(address, "city", 2, _Field.TYPE_STRING)
    _add_field(address, "state", 3, _Field.TYPE_STRING)
    _add_field(address, "country", 4, _Field.TYPE_STRING)
    _add_field(address, "zip_code", 5, _Field.TYPE_STRING)

    cart_item = file_proto.message_type.add(name="CartItem")
    _add_field(cart_item, "product_id", 1, _Field.TYPE_STRING)
    _add_field(cart_item, "quantity", 2, _Field.TYPE_INT32)

    order_item = file_proto.message_type.add(name="OrderItem")
    _add_field(order_item, "item", 1, _Field.TYPE_MESSAGE, "CartItem")
    _add_field(order_item, "cost", 2, _Field.TYPE_MESSAGE, "Money")

    order_result = file_proto.message_type.add(name="OrderResult")
    _add_field(order_result, "order_id", 1, _Field.TYPE_STRING)
    _add_field(order_result, "shipping_tracking_id", 2, _Field.TYPE_STRING)
    _add_field(order_result, "shipping_cost", 3, _Field.TYPE_MESSAGE, "Money")
    _add_field(order_result, "shipping_address", 4, _Field.TYPE_MESSAGE, "Address")
    _add_field(order_result, "items", 5, _Field.TYPE_MESSAGE, "OrderItem", repeated=True)

    return file_proto


# Private pool: keeps these names out of the process-wide default pool
_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file_descriptor().SerializeToString())


def _message_class(name: str):
    return message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.{name}"))


Money = _message_class("Money")
Address = _message_class("Address")
CartItem = _message_class("CartItem")
OrderItem = _message_class("OrderItem")
OrderResult = _message_class("OrderResult")

__all__ = ["Money", "Address", "CartItem", "OrderItem", "OrderResult"]
