from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from core.config import settings
from core.exceptions import AuthenticationError, DatabaseError
from models.contents import Content
from utils.logger import get_logger

logger = get_logger(__name__)

CONTENTS_PER_PAGE = 10

SORTABLE_FIELDS = {
    "title": Content.title,
    "published_date": Content.published_date,
    "content_id": Content.content_id,
}


class ContentService:
    """Google sign-in and the paged contents feed."""

    @staticmethod
    def verify_google_token(token: str) -> dict:
        """
        Verifies a Google ID token against GOOGLE_CLIENT_ID.

        Returns:
            {"email", "name", "picture"} taken from the token payload

        Raises:
            AuthenticationError: missing, expired or foreign token
        """
        if not token:
            raise AuthenticationError("Google token is required.")

        try:
            payload = id_token.verify_oauth2_token(
                token, google_requests.Request(), settings.GOOGLE_CLIENT_ID
            )
        except ValueError as e:
            logger.warning("Google token rejected", extra={"error": str(e)})
            raise AuthenticationError("Google authentication failed.") from e

        return {
            "email": payload.get("email"),
            "name": payload.get("name"),
            "picture": payload.get("picture"),
        }

    @staticmethod
    def fetch_contents(db: Session, search: str | None = None, sort_field: str = "published_date",
                       sort_order: str = "DESC", page: int = 1) -> dict:
        """
        One page of contents, optionally filtered by title.

        Unknown sort fields or orders fall back to newest first.
        """
        column = SORTABLE_FIELDS.get(sort_field)
        direction = (sort_order or "").upper()
        if column is None or direction not in ("ASC", "DESC"):
            order_by = Content.published_date.desc()
        else:
            order_by = column.asc() if direction == "ASC" else column.desc()

        query = db.query(Content)
        count_query = db.query(func.count(Content.content_id))
        if search:
            query = query.filter(Content.title.contains(search, autoescape=True))
            count_query = count_query.filter(Content.title.contains(search, autoescape=True))

        try:
            total = count_query.scalar()
            contents = query.order_by(order_by).limit(CONTENTS_PER_PAGE).offset(
                (page - 1) * CONTENTS_PER_PAGE
            ).all()
        except SQLAlchemyError as e:
            logger.error("Failed to fetch contents", exc_info=True)
            raise DatabaseError("Failed to fetch contents.") from e

        return {"contents": contents, "total": total}
