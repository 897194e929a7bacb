from core.database import Base
from sqlalchemy import Column, DateTime, String, Integer, ForeignKey
from sqlalchemy.orm import relationship
from models.mixins import CreatedAtMixin

class VerificationCode(Base, CreatedAtMixin):
    """
    One-time code mailed to an address, used for signup confirmation and
    password reset. Consumed (deleted) on successful verification.
    """
    __tablename__ = "email_verification"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    #relationships
    user = relationship("User", back_populates="verification_codes")

    email = Column(String(255), nullable=False, index=True)
    code = Column(String(64), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
