# storefront/data/seed.py
from decimal import Decimal

from storefront.domain.schemas import Product

DEMO_PRODUCTS = [
    Product(
        id="p1",
        name="Solar Panel 320W",
        description="High-efficiency monocrystalline panel",
        price=Decimal("189.00"),
        image="images/product1.jpg",
        featured=True,
    ),
    Product(
        id="p2",
        name="Hybrid Inverter",
        description="Smart inverter with battery support",
        price=Decimal("499.00"),
        image="images/product2.jpg",
        featured=True,
    ),
    Product(
        id="p3",
        name="4K Security Camera",
        description="Weatherproof 4K camera with night vision",
        price=Decimal("129.00"),
        image="images/product3.jpg",
        featured=True,
    ),
    Product(
        id="p4",
        name="Battery 10kWh",
        description="Reliable energy storage for solar systems",
        price=Decimal("899.00"),
        image="images/product1.jpg",
        featured=False,
    ),
]
