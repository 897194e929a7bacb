from core.database import Base
from sqlalchemy import (Column, Integer, String, Boolean)
from sqlalchemy.orm import relationship
from models.mixins import CreatedAtMixin, UpdatedAtMixin

class User(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "users"

    #pk
    user_id = Column(Integer, primary_key=True, index=True)

    #relationships
    orders = relationship("Order", back_populates="user")
    verification_codes = relationship("VerificationCode", back_populates="user")
    refresh_tokens = relationship("RefreshToken", back_populates="user")

    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(100))
    # Placeholder rows carry utils.hashing.UNUSABLE_PASSWORD until signup completes
    password_hash = Column(String(255), nullable=False)
    address = Column(String(255))
    building_name = Column(String(255))
    phone_number = Column(String(32))
    is_active = Column(Boolean, default=False, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
