from core.database import Base
from sqlalchemy import (Column, Integer, ForeignKey, Numeric)
from sqlalchemy.orm import relationship

class OrderItem(Base):
    __tablename__ = "order_items"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    # No FK constraint: the line survives deletion of its product
    product_id = Column(Integer, nullable=False, index=True)

    #relationships
    order = relationship("Order", back_populates="items")
    product = relationship(
        "Product",
        primaryjoin="foreign(OrderItem.product_id) == Product.id",
        viewonly=True
    )

    quantity = Column(Integer, nullable=False)
    # Unit price captured when the order was placed
    price = Column(Numeric(10, 2), nullable=False)
