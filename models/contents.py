from core.database import Base
from sqlalchemy import (Column, Integer, String, Text, DateTime)

class Content(Base):
    __tablename__ = "rbb_contents"

    #pk
    content_id = Column(Integer, primary_key=True, index=True)

    title = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    link = Column(String(500))
    thumbnail_url = Column(String(500))
    published_date = Column(DateTime(timezone=True), nullable=False, index=True)
