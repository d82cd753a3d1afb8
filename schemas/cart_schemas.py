from decimal import Decimal
from typing import Optional
from pydantic import TypeAdapter
from schemas.base import CamelModel
from schemas.product_schemas import ProductImageResponse


class CartLine(CamelModel):
    """
    One product in the shopper's cart: a snapshot of the product taken
    when it was first added, plus the quantity.
    """
    id: int
    name: str
    price: Decimal
    sale_price: Optional[Decimal] = None
    images: list[ProductImageResponse] = []
    quantity: int = 1

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


# Persisted form of the cart: a JSON array of lines
cart_snapshot = TypeAdapter(list[CartLine])
