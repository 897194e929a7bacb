from core.database import Base
from sqlalchemy.orm import relationship
from sqlalchemy import (Column, Integer, ForeignKey, Numeric, String, DateTime)
from utils.verification import utcnow

class Payment(Base):
    __tablename__ = "payments"

    #pk
    payment_id = Column(Integer, primary_key=True, index=True)

    #fk
    order_id = Column(Integer, ForeignKey("orders.order_id"), nullable=False, index=True)

    #relationships
    order = relationship("Order", back_populates="payments")

    amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(50), nullable=False)
    payment_status = Column(String(20), default="SUCCESS", nullable=False)
    paid_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
