from core.database import Base
from sqlalchemy import Column, Boolean, DateTime, String, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from models.mixins import CreatedAtMixin

class RefreshToken(Base, CreatedAtMixin):
    """
    Stores refresh tokens for users and admins.

    Refresh tokens are long-lived (7 days) and database-backed so that logout
    can revoke them. Only a SHA-256 hash of the signed token is stored.
    Exactly one of user_id / admin_id is set, selected by is_admin.
    """
    __tablename__ = "refresh_tokens"
    __table_args__ = (
        CheckConstraint(
            "(is_admin AND admin_id IS NOT NULL AND user_id IS NULL) OR "
            "(NOT is_admin AND user_id IS NOT NULL AND admin_id IS NULL)",
            name="ck_refresh_tokens_single_owner",
        ),
    )

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=True, index=True)
    admin_id = Column(Integer, ForeignKey("admins.admin_id", ondelete="CASCADE"), nullable=True, index=True)

    #relationships
    user = relationship("User", back_populates="refresh_tokens")
    admin = relationship("Admin", back_populates="refresh_tokens")

    is_admin = Column(Boolean, default=False, nullable=False)
    token_hash = Column(String(255), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
