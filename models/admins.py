from core.database import Base
from sqlalchemy import (Column, Integer, String)
from sqlalchemy.orm import relationship
from models.mixins import CreatedAtMixin, UpdatedAtMixin

class Admin(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "admins"

    #pk
    admin_id = Column(Integer, primary_key=True, index=True)

    #relationships
    refresh_tokens = relationship("RefreshToken", back_populates="admin")

    username = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
