from core.database import SessionLocal
from typing import Annotated, Optional
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from jose import JWTError
from core.config import settings
from core.exceptions import AuthenticationError, AuthorizationError
from core.principal import Principal
from services.token_service import TokenService
from utils.logger import get_logger

logger = get_logger(__name__)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

db_dependency = Annotated[Session, Depends(get_db)]

bearer_scheme = HTTPBearer(auto_error=False)


def get_access_principal(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]
) -> Principal:
    """
    Missing bearer token -> 401, invalid or expired token -> 403.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token is required.")

    try:
        principal = TokenService.decode_access_token(credentials.credentials)
    except (JWTError, ValueError):
        logger.warning("Access token rejected", extra={"path": request.url.path})
        raise AuthorizationError("Invalid or expired access token.")

    request.state.principal = principal
    return principal


def get_refresh_token(request: Request) -> str:
    token = request.cookies.get(settings.REFRESH_COOKIE_NAME)
    if not token:
        raise AuthenticationError("Refresh token is required.")
    return token


def get_refresh_principal(
    request: Request,
    token: Annotated[str, Depends(get_refresh_token)]
) -> Principal:
    """Same contract as get_access_principal, for the refresh cookie."""
    try:
        principal = TokenService.decode_refresh_token(token)
    except (JWTError, ValueError):
        logger.warning("Refresh token rejected", extra={"path": request.url.path})
        raise AuthorizationError("Invalid or expired refresh token.")

    request.state.principal = principal
    return principal


def require_admin(principal: Annotated[Principal, Depends(get_access_principal)]) -> Principal:
    if not principal.is_admin:
        raise AuthorizationError("Admin privileges required.")
    return principal


def require_user(principal: Annotated[Principal, Depends(get_access_principal)]) -> Principal:
    if principal.is_admin:
        raise AuthorizationError("This action is only available to users.")
    return principal


access_dependency = Annotated[Principal, Depends(get_access_principal)]
refresh_dependency = Annotated[Principal, Depends(get_refresh_principal)]
refresh_token_dependency = Annotated[str, Depends(get_refresh_token)]
admin_dependency = Annotated[Principal, Depends(require_admin)]
user_dependency = Annotated[Principal, Depends(require_user)]
