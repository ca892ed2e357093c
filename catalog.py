# catalog.py
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


# -----------------------------
# Product
# -----------------------------
@dataclass(frozen=True)
class Product:
    id: str
    name: str
    description: str
    price: int  # smallest currency unit
    stock: int
    category: str
    images: Tuple[str, ...]
    subscription_price: Optional[int] = None
    features: Tuple[str, ...] = field(default_factory=tuple)
    is_subscription: bool = False

    def __repr__(self):
        return f"<Product {self.id} - {self.name}>"

    @property
    def in_stock(self) -> bool:
        return (self.stock or 0) > 0

    # convenience for display / JSON
    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": int(self.price),
            "subscription_price": self.subscription_price,
            "stock": int(self.stock or 0),
            "category": self.category,
            "images": list(self.images),
            "features": list(self.features),
            "is_subscription": self.is_subscription,
        }


# Static catalog. Relative image paths are served from /static.
PRODUCTS: List[Product] = [
    Product(
        id="1",
        name="Single Origin Coffee Beans",
        description="Light roast beans from a single Ethiopian estate, roasted to order.",
        price=1800,
        subscription_price=1500,
        stock=25,
        category="Coffee",
        images=(
            "/static/images/coffee-beans-1.svg",
            "/static/images/coffee-beans-2.svg",
            "/static/images/coffee-beans-3.svg",
        ),
        features=("Roasted within 48 hours", "Floral, citrus notes", "200g resealable bag"),
        is_subscription=True,
    ),
    Product(
        id="2",
        name="Ceramic Pour-Over Dripper",
        description="Hand-glazed dripper for one to two cups.",
        price=3200,
        stock=8,
        category="Equipment",
        images=(
            "/static/images/dripper-1.svg",
            "/static/images/dripper-2.svg",
        ),
        features=("Fits standard #2 filters", "Dishwasher safe"),
    ),
    Product(
        id="3",
        name="Monthly Tea Selection",
        description="Three seasonal loose-leaf teas picked by our buyers each month.",
        price=2400,
        stock=40,
        category="Tea",
        images=("https://images.example.com/tea-selection.jpg",),
        is_subscription=True,
    ),
    Product(
        id="4",
        name="Limited Edition Mug",
        description="Stoneware mug from our spring collaboration. Sold out for now.",
        price=2800,
        stock=0,
        category="Equipment",
        images=("/static/images/mug-1.svg",),
    ),
]


def get_all_products():
    return list(PRODUCTS)


def find_product(product_id, products=None) -> Optional[Product]:
    """Return the product whose id equals ``product_id``, or None."""
    for product in PRODUCTS if products is None else products:
        if product.id == product_id:
            return product
    return None
