from core.database import Base
from sqlalchemy import (Column, Integer, String, Boolean, ForeignKey)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin

IMAGE_POSITIONS = ("front", "back", "side")

class ProductImage(Base, CreatedAtMixin):
    __tablename__ = "product_images"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    #relationships
    product = relationship("Product", back_populates="images")

    url = Column(String, nullable=False)
    position = Column(String, default="front", nullable=False)
    is_main = Column(Boolean, default=False, nullable=False)
