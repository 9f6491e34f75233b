from decimal import Decimal
from typing import Iterable, List, Optional

from shared.utils import NotFoundException
from storefront.models import Product

IMAGE_URL = "https://images.unsplash.com/photo-{}?w=500&h=500&fit=crop"

SEED_PRODUCTS = [
    Product(id="1", name="Wireless Headphones", price=Decimal("129.99"),
            image=IMAGE_URL.format("1505740420928-5e560c06d30e"),
            description="Premium wireless headphones with noise cancellation",
            category="Electronics", stock=50),
    Product(id="2", name="Smart Watch", price=Decimal("299.99"),
            image=IMAGE_URL.format("1523275335684-37898b6baf30"),
            description="Feature-rich smartwatch with fitness tracking",
            category="Electronics", stock=30),
    Product(id="3", name="Leather Backpack", price=Decimal("89.99"),
            image=IMAGE_URL.format("1553062407-98eeb64c6a62"),
            description="Durable leather backpack perfect for daily use",
            category="Accessories", stock=25),
    Product(id="4", name="Sunglasses", price=Decimal("149.99"),
            image=IMAGE_URL.format("1572635196237-14b3f281503f"),
            description="Classic aviator sunglasses with UV protection",
            category="Accessories", stock=40),
    Product(id="5", name="Running Shoes", price=Decimal("119.99"),
            image=IMAGE_URL.format("1542291026-7eec264c27ff"),
            description="Comfortable running shoes with superior cushioning",
            category="Footwear", stock=60),
    Product(id="6", name="Coffee Maker", price=Decimal("79.99"),
            image=IMAGE_URL.format("1517668808822-9ebb02f2a0e6"),
            description="Programmable coffee maker for perfect brew every time",
            category="Home", stock=35),
    Product(id="7", name="Yoga Mat", price=Decimal("34.99"),
            image=IMAGE_URL.format("1601925260368-ae2f83cf8b7f"),
            description="Non-slip yoga mat with extra cushioning",
            category="Fitness", stock=100),
    Product(id="8", name="Desk Lamp", price=Decimal("45.99"),
            image=IMAGE_URL.format("1507473885765-e6ed057f782c"),
            description="LED desk lamp with adjustable brightness",
            category="Home", stock=45),
    Product(id="9", name="Bluetooth Speaker", price=Decimal("69.99"),
            image=IMAGE_URL.format("1608043152269-423dbba4e7e1"),
            description="Portable speaker with 360-degree sound",
            category="Electronics", stock=55),
    Product(id="10", name="Water Bottle", price=Decimal("24.99"),
            image=IMAGE_URL.format("1602143407151-7111542de6e8"),
            description="Insulated stainless steel water bottle",
            category="Fitness", stock=80),
    Product(id="11", name="Notebook Set", price=Decimal("19.99"),
            image=IMAGE_URL.format("1531346878377-a5be20888e57"),
            description="Premium notebook set for journaling",
            category="Stationery", stock=70),
    Product(id="12", name="Plant Pot", price=Decimal("29.99"),
            image=IMAGE_URL.format("1485955900006-10f4d324d411"),
            description="Ceramic plant pot with drainage",
            category="Home", stock=90),
]


class Catalog:
    """Read-only product lookup, in seed order."""

    def __init__(self, products: Iterable[Product] = SEED_PRODUCTS):
        self._products = list(products)
        self._by_id = {p.id: p for p in self._products}

    def __len__(self) -> int:
        return len(self._products)

    def list_products(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
    ) -> List[Product]:
        products = self._products

        if category:
            wanted = category.lower()
            products = [p for p in products if p.category.lower() == wanted]

        if search:
            needle = search.lower()
            products = [
                p for p in products
                if needle in p.name.lower() or needle in p.description.lower()
            ]

        if min_price is not None:
            products = [p for p in products if p.price >= min_price]
        if max_price is not None:
            products = [p for p in products if p.price <= max_price]

        return list(products)

    def get(self, product_id: str) -> Optional[Product]:
        return self._by_id.get(product_id)

    def require(self, product_id: str) -> Product:
        product = self.get(product_id)
        if product is None:
            raise NotFoundException("Product not found")
        return product

    def categories(self) -> List[str]:
        # dict keeps first-seen order
        return list(dict.fromkeys(p.category for p in self._products))
