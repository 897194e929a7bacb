from fastapi import APIRouter, Query
from schemas.content_schemas import ContentPage, GoogleSessionResponse, GoogleTokenRequest
from services.content_service import ContentService
from utils.deps import db_dependency
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/rbb",
    tags=["contents"]
)


@router.post("/users/login", response_model=GoogleSessionResponse)
async def google_login(body: GoogleTokenRequest):
    user = ContentService.verify_google_token(body.token)

    logger.info("Google login", extra={"email": user["email"]})

    return {"message": "Login successful", "user": user}


@router.post("/users/logout")
async def google_logout():
    # Nothing is kept server side; the client drops its Google token
    return {"message": "Logged out successfully"}


@router.post("/users/verify-login", response_model=GoogleSessionResponse)
async def verify_login(body: GoogleTokenRequest):
    """
    Without a token the caller is simply not logged in; a token that is
    present must verify.
    """
    if not body.token:
        return {"message": "Not logged in", "user": None}

    user = ContentService.verify_google_token(body.token)
    return {"message": "Login verified", "user": user}


@router.get("/contents", response_model=ContentPage)
async def fetch_contents(
    db: db_dependency,
    searchTerm: str | None = None,
    sortField: str = "published_date",
    sortOrder: str = "DESC",
    page: int = Query(default=1, ge=1)
):
    return ContentService.fetch_contents(db, searchTerm, sortField, sortOrder, page)
