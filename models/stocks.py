from core.database import Base
from sqlalchemy import (Column, Integer, String, Boolean, ForeignKey)
from sqlalchemy.orm import relationship

class Stock(Base):
    """Availability of one (product, size, color) combination."""
    __tablename__ = "stocks"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    #relationships
    product = relationship("Product", back_populates="stocks")

    size = Column(String, nullable=True)
    color_id = Column(Integer, nullable=True)
    in_stock = Column(Boolean, default=True, nullable=False)
