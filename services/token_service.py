import secrets
import hashlib
from dataclasses import dataclass
from datetime import datetime, timedelta
from sqlalchemy.orm import Session
from jose import jwt
from models.refresh_tokens import RefreshToken
from core.config import settings
from core.principal import Principal
from utils.logger import get_logger
from utils.verification import utcnow

logger = get_logger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class RefreshTokenCheck:
    is_valid: bool
    is_admin: bool | None = None


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


class TokenService:
    """
    Handles token operations: signing, decoding, persistence and revocation.

    Access tokens are stateless and cannot be revoked before they expire.
    Refresh tokens are also stored in the database so logout can revoke them.
    """

    @staticmethod
    def _sign(principal: Principal, secret: str, lifetime: timedelta, issued_at: datetime | None,
              extra: dict | None = None) -> str:
        if principal.id is None:
            field = "admin_id" if principal.is_admin else "user_id"
            raise ValueError(f"Cannot issue a token without a value for '{field}'")

        issued_at = issued_at or utcnow()
        payload = {
            **principal.to_claims(),
            "iat": issued_at,
            "exp": issued_at + lifetime,
        }
        if extra:
            payload.update(extra)

        return jwt.encode(payload, secret, algorithm=settings.ALGORITHM)

    @staticmethod
    def generate_access_token(principal: Principal, expires_delta: timedelta = None,
                              issued_at: datetime = None) -> str:
        """
        Creates a signed access token (default lifetime 15 minutes).

        Raises:
            ValueError: if the principal has no id
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        return TokenService._sign(principal, settings.ACCESS_TOKEN_SECRET, expires_delta, issued_at)

    @staticmethod
    def generate_refresh_token(principal: Principal, expires_delta: timedelta = None,
                               issued_at: datetime = None) -> str:
        """
        Creates a signed refresh token (default lifetime 7 days).

        A random jti keeps tokens from two logins in the same second distinct.
        """
        if expires_delta is None:
            expires_delta = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

        return TokenService._sign(
            principal, settings.REFRESH_TOKEN_SECRET, expires_delta, issued_at,
            extra={"jti": secrets.token_urlsafe(16)}
        )

    @staticmethod
    def decode_access_token(token: str) -> Principal:
        """
        Raises:
            JWTError: bad signature, malformed token or expired token
            ValueError: claims without an id
        """
        payload = jwt.decode(token, settings.ACCESS_TOKEN_SECRET, algorithms=[settings.ALGORITHM])
        return Principal.from_claims(payload)

    @staticmethod
    def decode_refresh_token(token: str) -> Principal:
        payload = jwt.decode(token, settings.REFRESH_TOKEN_SECRET, algorithms=[settings.ALGORITHM])
        return Principal.from_claims(payload)

    @staticmethod
    def save_refresh_token(db: Session, principal: Principal, refresh_token: str) -> RefreshToken:
        """
        Persist a refresh token for the principal with a server-side 7 day expiry.
        """
        owner = {"admin_id": principal.id} if principal.is_admin else {"user_id": principal.id}

        db_token = RefreshToken(
            **owner,
            is_admin=principal.is_admin,
            token_hash=hash_token(refresh_token),
            created_at=utcnow(),
            expires_at=utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
        )
        db.add(db_token)
        db.commit()

        return db_token

    @staticmethod
    def invalidate_refresh_tokens(db: Session, principal: Principal) -> int:
        """
        Deletes every refresh token of the principal (logout from all devices).

        Returns:
            Number of rows removed
        """
        if principal.is_admin:
            owner_filter = RefreshToken.admin_id == principal.id
        else:
            owner_filter = RefreshToken.user_id == principal.id

        deleted = db.query(RefreshToken).filter(
            owner_filter,
            RefreshToken.is_admin == principal.is_admin
        ).delete(synchronize_session=False)
        db.commit()

        logger.info(
            "Refresh tokens invalidated",
            extra={"principal_id": principal.id, "is_admin": principal.is_admin, "count": deleted}
        )
        return deleted

    @staticmethod
    def verify_refresh_token_in_database(db: Session, refresh_token: str) -> RefreshTokenCheck:
        """
        Checks that the token is stored and not past its stored expiry.

        The signature is not checked here; decode_refresh_token does that.
        """
        db_token = db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_token(refresh_token),
            RefreshToken.expires_at > utcnow()
        ).first()

        if not db_token:
            return RefreshTokenCheck(is_valid=False)

        return RefreshTokenCheck(is_valid=True, is_admin=db_token.is_admin)

    @staticmethod
    def issue_token_pair(db: Session, principal: Principal) -> TokenPair:
        """
        Creates access + refresh tokens and stores the refresh token.
        """
        access_token = TokenService.generate_access_token(principal)
        refresh_token = TokenService.generate_refresh_token(principal)

        TokenService.save_refresh_token(db, principal, refresh_token)

        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    @staticmethod
    def cleanup_expired(db: Session) -> int:
        deleted = db.query(RefreshToken).filter(
            RefreshToken.expires_at < utcnow()
        ).delete(synchronize_session=False)
        db.commit()
        return deleted
