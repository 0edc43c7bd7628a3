"""
Mock Order Generator

Generates realistic completed orders for exercising the accounting consumer
locally and in integration tests.

DATA GENERATION STRATEGY:
1. Fixed product catalogue (product id + unit price)
2. Faker for addresses, order ids and tracking ids
3. Seeded: the same seed yields the same sequence of orders

ORDER STRUCTURE (see src/shared/orders.py):
    Order(
        order_id="0e8f4a6b-...",
        shipping_tracking_id="9a3c...",
        shipping_cost=Money(currency_code="USD", units=8, nanos=990000000),
        shipping_address=Address(street_address="...", city="...", ...),
        items=[OrderItem(product_id="OLJCESPC7Z", quantity=2, cost=Money(...))],
    )
"""

import random
from typing import List, Tuple

from faker import Faker

from src.shared.orders import Address, Money, Order, OrderItem

RANDOM_SEED = 42

# (product_id, unit price units, unit price nanos)
PRODUCT_CATALOG: List[Tuple[str, int, int]] = [
    ("OLJCESPC7Z", 101, 960000000),
    ("66VCHSJNUP", 349, 950000000),
    ("1YMWWN1N4O", 109, 990000000),
    ("L9ECAV7KIM", 14, 990000000),
    ("2ZYFJ3GM2N", 209, 950000000),
    ("0PUK6V6EV0", 129, 990000000),
    ("LS4PSXUNUM", 8, 990000000),
    ("9SIQT8TOJO", 5, 490000000),
    ("6E92ZMYYFZ", 3, 990000000),
    ("HQTGWGPNH4", 199, 990000000),
]


class MockOrderGenerator:
    """
    Generates mock orders.

    Attributes:
        seed: Seed used for both random and Faker
        currency_code: Currency of every generated amount
    """

    def __init__(self, seed: int = RANDOM_SEED, currency_code: str = "USD"):
        self.seed = seed
        self.currency_code = currency_code
        self.random = random.Random(seed)
        self.fake = Faker()
        self.fake.seed_instance(seed)

    def generate_address(self) -> Address:
        return Address(
            street_address=self.fake.street_address(),
            city=self.fake.city(),
            state=self.fake.state_abbr(),
            country="United States",
            zip_code=self.fake.postcode(),
        )

    def generate_items(self, min_items: int = 1, max_items: int = 4) -> List[OrderItem]:
        """
        Pick distinct products with a quantity of 1-3 each.

        Item cost is the unit price of the product.
        """
        num_items = self.random.randint(min_items, max_items)
        products = self.random.sample(PRODUCT_CATALOG, num_items)

        return [
            OrderItem(
                product_id=product_id,
                quantity=self.random.randint(1, 3),
                cost=Money(currency_code=self.currency_code, units=units, nanos=nanos),
            )
            for product_id, units, nanos in products
        ]

    def generate_shipping_cost(self) -> Money:
        # Whole cents only, as checkout quotes them
        return Money(
            currency_code=self.currency_code,
            units=self.random.randint(0, 20),
            nanos=self.random.randint(0, 99) * 10_000_000,
        )

    def generate_order(self) -> Order:
        """Generate one complete mock order."""
        return Order(
            order_id=self.fake.uuid4(),
            shipping_tracking_id=self.fake.uuid4(),
            shipping_cost=self.generate_shipping_cost(),
            shipping_address=self.generate_address(),
            items=self.generate_items(),
        )
