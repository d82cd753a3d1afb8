from core.database import Base
from sqlalchemy import (Column, Integer, String, Text, Numeric, Boolean, JSON)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin, UpdatedAtMixin

class Product(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "products"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #relationships
    # Order items are intentionally not linked here: deleting a product
    # leaves historical order lines pointing at a missing id.
    images = relationship("ProductImage", back_populates="product",
                          cascade="all, delete-orphan", order_by="ProductImage.id")
    stocks = relationship("Stock", back_populates="product",
                          cascade="all, delete-orphan", order_by="Stock.id")

    name = Column(String, nullable=False)
    description = Column(Text, default="")
    price = Column(Numeric(10, 2), nullable=False)
    sale_price = Column(Numeric(10, 2), nullable=True)
    category = Column(String, index=True, nullable=False)
    collaborateur = Column(String, nullable=True)
    sizes = Column(JSON, default=list)

    # Storefront placement
    show_in_home = Column(Boolean, default=False, nullable=False)
    show_in_promo = Column(Boolean, default=False, nullable=False)
    show_in_top_sales = Column(Boolean, default=False, nullable=False)
    priority = Column(Integer, default=0, nullable=False)

    view_count = Column(Integer, default=0, nullable=False)
    order_count = Column(Integer, default=0, nullable=False)
