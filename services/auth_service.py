from datetime import timedelta
from fastapi import BackgroundTasks
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from core.config import settings
from core.database import scoped_transaction
from core.exceptions import (AuthenticationError, AuthorizationError, CooldownError, DatabaseError,
                             NotFoundError, ResourceConflictError, ValidationError)
from core.principal import Principal
from core.results import Found, LookupResult, NotFound, StoreError
from models.admins import Admin
from models.users import User
from models.verification_codes import VerificationCode
from schemas.auth_schemas import SignupRequest
from services.email_service import send_email, verification_email, password_reset_email
from services.token_service import TokenPair, TokenService
from services.verification_service import CodeCooldown, VerificationService
from utils.hashing import UNUSABLE_PASSWORD, get_password_hash, is_password_usable, verify_password
from utils.logger import get_logger
from utils.verification import utcnow

logger = get_logger(__name__)


def unwrap(result: LookupResult, not_found_message: str):
    """Return the row of a lookup or raise the matching application error."""
    if isinstance(result, Found):
        return result.row
    if isinstance(result, StoreError):
        raise DatabaseError(context={"cause": repr(result.cause)}) from result.cause
    raise NotFoundError(not_found_message)


def unwrap_or_none(result: LookupResult):
    if isinstance(result, StoreError):
        raise DatabaseError() from result.cause
    return result.row if isinstance(result, Found) else None


def is_registered(user: User) -> bool:
    """Anything but a placeholder: active, or deactivated but holding a real password."""
    return bool(user.is_active) or is_password_usable(user.password_hash)


def user_info(principal: Principal, record) -> dict:
    return {
        "id": principal.id,
        "email": record.email,
        "username": record.username,
        "isAdmin": principal.is_admin
    }


class AuthService:

    # ---- lookups ---------------------------------------------------------

    @staticmethod
    def _lookup(db: Session, query, what: str, **log_extra) -> LookupResult:
        try:
            row = query.first()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"{what} lookup failed", extra=log_extra, exc_info=True)
            return StoreError(e)

        return Found(row) if row is not None else NotFound()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> LookupResult:
        query = db.query(User).filter(func.lower(User.email) == email.lower())
        return AuthService._lookup(db, query, "User", email=email)

    @staticmethod
    def get_admin_by_email(db: Session, email: str) -> LookupResult:
        query = db.query(Admin).filter(func.lower(Admin.email) == email.lower())
        return AuthService._lookup(db, query, "Admin", email=email)

    @staticmethod
    def get_principal_record(db: Session, principal: Principal) -> LookupResult:
        if principal.is_admin:
            query = db.query(Admin).filter(Admin.admin_id == principal.id)
        else:
            query = db.query(User).filter(User.user_id == principal.id)
        return AuthService._lookup(db, query, "Principal", principal_id=principal.id,
                                   is_admin=principal.is_admin)

    @staticmethod
    def check_email_availability(db: Session, email: str) -> bool:
        count = db.query(func.count(User.user_id)).filter(
            func.lower(User.email) == email.lower()
        ).scalar()
        return count == 0

    @staticmethod
    def check_email_verified(db: Session, email: str) -> bool:
        is_verified = db.query(User.is_verified).filter(
            func.lower(User.email) == email.lower()
        ).scalar()
        return bool(is_verified)

    # ---- signup ----------------------------------------------------------

    @staticmethod
    def create_temp_user(db: Session, email: str) -> int:
        """
        Creates the placeholder row that a verification code hangs off.

        A previous placeholder for the same address is reused. An address that
        already belongs to an account, active or deactivated, is a conflict.
        """
        existing = unwrap_or_none(AuthService.get_user_by_email(db, email))

        if existing is not None:
            if is_registered(existing):
                logger.warning("Verification requested for registered email", extra={"email": email})
                raise ResourceConflictError("Email already registered")

            if existing.email != email:
                existing.email = email
                db.commit()
            return existing.user_id

        model = User(
            email=email,
            password_hash=UNUSABLE_PASSWORD,
            is_active=False,
            is_verified=False
        )
        try:
            db.add(model)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to create placeholder user", extra={"email": email}, exc_info=True)
            raise DatabaseError("Failed to start email verification.") from e

        db.refresh(model)
        logger.info("Placeholder user created", extra={"user_id": model.user_id, "email": email})
        return model.user_id

    @staticmethod
    def send_verification_email(db: Session, email: str, bg: BackgroundTasks) -> None:
        user_id = AuthService.create_temp_user(db, email)

        result = VerificationService.issue(db, email, user_id)
        if isinstance(result, CodeCooldown):
            raise CooldownError(result.message)

        subject, body = verification_email(result.code)
        bg.add_task(send_email, to_email=email, subject=subject, body=body)

    @staticmethod
    def verify_email_code(db: Session, email: str, code: str) -> None:
        if not VerificationService.verify(db, email, code):
            raise ValidationError("Invalid verification code")

    @staticmethod
    def complete_signup(db: Session, body: SignupRequest) -> User:
        """
        Promotes a verified placeholder to a full account.

        Checks:
        - The address has been verified
        - The submitted address is exactly the one that was verified
        - The account is not already registered
        """
        if not AuthService.check_email_verified(db, body.email):
            logger.warning("Signup attempted before verification", extra={"email": body.email})
            raise ValidationError("Email verification must be completed first.")

        user = unwrap(AuthService.get_user_by_email(db, body.email), "User not found")

        if user.email != body.email:
            logger.warning(
                "Signup email differs from verified email",
                extra={"email": body.email, "verified_email": user.email}
            )
            raise ValidationError("The email address has changed. Please verify the new address.")

        if is_registered(user):
            logger.warning("Signup attempted for registered email", extra={"user_id": user.user_id})
            raise ResourceConflictError("Email already registered")

        user.username = body.username
        user.password_hash = get_password_hash(body.password)
        user.address = body.address
        user.building_name = body.building_name
        user.phone_number = body.phone_number
        user.is_active = True
        user.is_verified = True

        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to complete signup", extra={"email": body.email}, exc_info=True)
            raise DatabaseError("Failed to complete signup.") from e

        db.refresh(user)
        return user

    @staticmethod
    def cancel_signup(db: Session, email: str) -> None:
        """
        Deletes the codes and, if still unverified, the placeholder for email.

        Codes go first because they reference the user row.
        """
        try:
            with scoped_transaction(db):
                db.query(VerificationCode).filter(
                    VerificationCode.email == email.lower()
                ).delete(synchronize_session=False)
                db.query(User).filter(
                    func.lower(User.email) == email.lower(),
                    User.is_verified == False
                ).delete(synchronize_session=False)
        except SQLAlchemyError as e:
            logger.error("Failed to cancel signup", extra={"email": email}, exc_info=True)
            raise DatabaseError("Failed to cancel signup.") from e

    # ---- login / session -------------------------------------------------

    @staticmethod
    def authenticate(db: Session, email: str, password: str, is_admin: bool):
        """
        Returns (principal, record) for valid credentials.

        Raises:
            AuthenticationError: unknown email, wrong password, or a user row
                that is not verified and active
        """
        if is_admin:
            result = AuthService.get_admin_by_email(db, email)
        else:
            result = AuthService.get_user_by_email(db, email)

        if isinstance(result, StoreError):
            raise DatabaseError() from result.cause

        if isinstance(result, NotFound):
            logger.warning("Login failed - account not found", extra={"email": email, "is_admin": is_admin})
            raise AuthenticationError("Invalid email or password.")

        record = result.row

        if not is_admin and not (record.is_verified and record.is_active):
            logger.warning(
                "Login failed - account not registered",
                extra={"user_id": record.user_id, "email": email}
            )
            raise AuthenticationError("Invalid email or password.")

        if not verify_password(password, record.password_hash):
            logger.warning("Login failed - invalid password", extra={"email": email, "is_admin": is_admin})
            raise AuthenticationError("Invalid email or password.")

        principal = Principal.admin(record.admin_id) if is_admin else Principal.user(record.user_id)

        logger.debug(
            "Authenticated",
            extra={"principal_id": principal.id, "is_admin": principal.is_admin}
        )
        return principal, record

    @staticmethod
    def login(db: Session, email: str, password: str, is_admin: bool) -> tuple[TokenPair, dict]:
        principal, record = AuthService.authenticate(db, email, password, is_admin)

        tokens = TokenService.issue_token_pair(db, principal)

        logger.info(
            "Logged in",
            extra={"principal_id": principal.id, "is_admin": principal.is_admin}
        )
        return tokens, user_info(principal, record)

    @staticmethod
    def logout(db: Session, principal: Principal) -> None:
        TokenService.invalidate_refresh_tokens(db, principal)

    @staticmethod
    def refresh_access_token(db: Session, refresh_token: str, principal: Principal) -> str:
        check = TokenService.verify_refresh_token_in_database(db, refresh_token)

        if not check.is_valid or check.is_admin != principal.is_admin:
            logger.warning(
                "Refresh rejected - token not stored or expired",
                extra={"principal_id": principal.id, "is_admin": principal.is_admin}
            )
            raise AuthorizationError("Invalid refresh token.")

        record = unwrap_or_none(AuthService.get_principal_record(db, principal))
        if record is None or (not principal.is_admin and not record.is_active):
            logger.warning(
                "Refresh rejected - account missing or deactivated",
                extra={"principal_id": principal.id, "is_admin": principal.is_admin}
            )
            raise AuthorizationError("Account is not active.")

        return TokenService.generate_access_token(principal)

    @staticmethod
    def check_auth(db: Session, principal: Principal) -> dict:
        record = unwrap(AuthService.get_principal_record(db, principal), "User not found")
        return user_info(principal, record)

    @staticmethod
    def find_email(db: Session, name: str, phone: str) -> str:
        email = db.query(User.email).filter(
            User.username == name,
            User.phone_number == phone
        ).scalar()

        if not email:
            raise NotFoundError("No user matches that name and phone number.")
        return email

    # ---- password reset --------------------------------------------------

    @staticmethod
    def _registered_user(db: Session, email: str) -> User:
        user = unwrap(AuthService.get_user_by_email(db, email), "User does not exist.")
        if not (user.is_active and user.is_verified):
            raise NotFoundError("User does not exist.")
        return user

    @staticmethod
    def request_password_reset(db: Session, email: str, bg: BackgroundTasks) -> None:
        user = AuthService._registered_user(db, email)

        result = VerificationService.issue(db, user.email, user.user_id)
        if isinstance(result, CodeCooldown):
            raise CooldownError(result.message)

        subject, body = password_reset_email(result.code)
        bg.add_task(send_email, to_email=user.email, subject=subject, body=body)

        logger.info("Password reset code sent", extra={"user_id": user.user_id})

    @staticmethod
    def reset_password(db: Session, email: str, code: str, new_password: str) -> None:
        user = AuthService._registered_user(db, email)

        if not VerificationService.verify(db, user.email, code):
            raise ValidationError("Invalid verification code")

        user.password_hash = get_password_hash(new_password)
        db.commit()

        # Existing sessions must log in again with the new password
        TokenService.invalidate_refresh_tokens(db, Principal.user(user.user_id))

        logger.info("Password reset", extra={"user_id": user.user_id})

    @staticmethod
    def cancel_password_reset(db: Session, email: str) -> None:
        user = unwrap(AuthService.get_user_by_email(db, email), "User does not exist.")

        try:
            VerificationService.delete_codes(db, user.email, user.user_id)
        except SQLAlchemyError as e:
            logger.error("Failed to cancel password reset", extra={"email": email}, exc_info=True)
            raise DatabaseError("Failed to cancel password reset.") from e

    # ---- maintenance -----------------------------------------------------

    @staticmethod
    def cleanup_temp_users(db: Session, older_than_hours: int | None = None) -> int:
        """Deletes placeholders that never completed verification."""
        hours = older_than_hours if older_than_hours is not None else settings.TEMP_USER_RETENTION_HOURS
        cutoff = utcnow() - timedelta(hours=hours)

        stale_ids = select(User.user_id).where(
            User.is_verified == False,
            User.is_active == False,
            User.created_at < cutoff
        )

        with scoped_transaction(db):
            db.query(VerificationCode).filter(
                VerificationCode.user_id.in_(stale_ids)
            ).delete(synchronize_session=False)
            deleted = db.query(User).filter(
                User.is_verified == False,
                User.is_active == False,
                User.created_at < cutoff
            ).delete(synchronize_session=False)

        return deleted
