from core.database import Base
from sqlalchemy.orm import relationship
from sqlalchemy import (Column, Integer, ForeignKey, Numeric, String, JSON)
from .mixins import CreatedAtMixin

class Order(Base, CreatedAtMixin):
    __tablename__ = "orders"

    #pk
    order_id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)

    #relationships
    user = relationship("User", back_populates="orders")
    payments = relationship("Payment", back_populates="order")

    total_price = Column(Numeric(10, 2), nullable=False)
    discount_amount = Column(Numeric(10, 2), default=0, nullable=False)
    delivery_address = Column(String(255), nullable=False)
    # Line items as submitted: [{"product_id", "product_name", "quantity", "price"}]
    order_items = Column(JSON, nullable=False)
    status = Column(String(20), default="PENDING", nullable=False)
