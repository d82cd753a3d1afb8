from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import Field, field_validator
from schemas.base import CamelModel


class ProductImageResponse(CamelModel):
    id: int
    url: str
    position: str
    is_main: bool


class ProductResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    sale_price: Optional[float] = None
    category: str
    collaborateur: Optional[str] = None
    sizes: list[str] = []
    show_in_home: bool
    show_in_promo: bool
    show_in_top_sales: bool
    priority: int
    view_count: int
    order_count: int
    images: list[ProductImageResponse] = []
    created_at: datetime
    updated_at: datetime

    @field_validator('sizes', mode='before')
    @classmethod
    def null_sizes(cls, value):
        return value or []


class ProductImageInput(CamelModel):
    url: str
    position: Optional[str] = None
    is_main: Optional[bool] = None


class ProductUpdateRequest(CamelModel):
    """
    Admin edit. Only the fields present in the body are written; the
    image list is always replaced (an omitted list clears the images).
    """
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    sale_price: Optional[Decimal] = Field(default=None, ge=0)
    category: Optional[str] = None
    collaborateur: Optional[str] = None
    sizes: Optional[list[str]] = None
    show_in_home: Optional[bool] = None
    show_in_promo: Optional[bool] = None
    show_in_top_sales: Optional[bool] = None
    priority: Optional[int] = None
    view_count: Optional[int] = None
    order_count: Optional[int] = None
    images: list[ProductImageInput] = []


class ProductCreateRequest(ProductUpdateRequest):
    name: str
    price: Decimal = Field(ge=0)
    category: str


class StockResponse(CamelModel):
    id: int
    product_id: int
    size: Optional[str] = None
    color_id: Optional[int] = None
    in_stock: bool
