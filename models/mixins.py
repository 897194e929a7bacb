from sqlalchemy import Column, DateTime
from utils.verification import utcnow


class CreatedAtMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

class UpdatedAtMixin:
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
