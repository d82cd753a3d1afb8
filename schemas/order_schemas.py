from datetime import datetime
from decimal import Decimal
from typing import Optional
from schemas.base import CamelModel
from schemas.product_schemas import ProductResponse


# Request fields are all optional on purpose: presence is checked by the
# order service so a missing field is a 400 with a readable message.

class OrderItemInput(CamelModel):
    product_id: Optional[int] = None
    quantity: Optional[int] = None
    price: Optional[Decimal] = None


class CreateOrderRequest(CamelModel):
    customer_name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    total_amount: Optional[Decimal] = None
    items: Optional[list[OrderItemInput]] = None


class DirectOrderRequest(CamelModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    governorate: Optional[str] = None
    product_id: Optional[int] = None
    quantity: Optional[int] = None
    price: Optional[Decimal] = None


class OrderItemResponse(CamelModel):
    id: int
    product_id: int
    quantity: int
    price: float
    # None once the product has been deleted
    product: Optional[ProductResponse] = None


class OrderResponse(CamelModel):
    id: int
    customer_name: str
    phone_number: str
    address: str
    total_amount: float
    status: str
    user_id: Optional[int] = None
    items: list[OrderItemResponse] = []
    created_at: datetime


class DirectOrderResponse(CamelModel):
    success: bool
    order: OrderResponse
