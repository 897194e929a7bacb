from core.database import Base
from sqlalchemy import (Column, Integer, String, Numeric, Text)
from .mixins import CreatedAtMixin, UpdatedAtMixin

class Product(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "products"

    #pk
    product_id = Column(Integer, primary_key=True, index=True)

    name = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    category = Column(String(100), index=True)
    tags = Column(String(255))
    what_event = Column(String(100))
    image_url = Column(String(500))
    price = Column(Numeric(10, 2), nullable=False)
    # Percentage, 0-100
    discount_rate = Column(Numeric(5, 2), default=0, nullable=False)
    final_price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, default=0, nullable=False)
