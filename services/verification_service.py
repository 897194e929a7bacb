from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.orm import Session

from core.config import settings
from core.database import scoped_transaction
from models.users import User
from models.verification_codes import VerificationCode
from utils.logger import get_logger
from utils.verification import generate_verification_code, get_code_expiry_time, utcnow

logger = get_logger(__name__)


@dataclass(frozen=True)
class CodeIssued:
    code: str


@dataclass(frozen=True)
class CodeCooldown:
    message: str


IssueResult = CodeIssued | CodeCooldown


class VerificationService:
    """
    Issues and checks one-time email codes.

    Store errors propagate to the caller as-is.
    """

    @staticmethod
    def issue(db: Session, email: str, user_id: int) -> IssueResult:
        """
        Create a new code for email unless one was created within the cooldown window.

        The cooldown check and the insert are separate statements, so two
        concurrent requests for the same address can both pass the check.
        """
        email = email.lower()
        now = utcnow()
        cooldown_start = now - timedelta(minutes=settings.VERIFICATION_COOLDOWN_MINUTES)

        recent = db.query(VerificationCode.id).filter(
            VerificationCode.email == email,
            VerificationCode.created_at > cooldown_start
        ).first()

        if recent:
            logger.warning(
                "Verification code requested during cooldown",
                extra={"email": email}
            )
            return CodeCooldown(
                f"A new code can be requested {settings.VERIFICATION_COOLDOWN_MINUTES} minutes after the previous one."
            )

        code = generate_verification_code()
        db.add(VerificationCode(
            user_id=user_id,
            email=email,
            code=code,
            created_at=now,
            expires_at=get_code_expiry_time(settings.VERIFICATION_CODE_EXPIRE_MINUTES, now=now)
        ))
        db.commit()

        logger.info("Verification code issued", extra={"email": email, "user_id": user_id})
        return CodeIssued(code)

    @staticmethod
    def verify(db: Session, email: str, code: str) -> bool:
        """
        Consume a live code for email.

        On a match every code for the address is deleted and the user the
        code was issued to is flagged verified, in one transaction. Wrong and
        expired codes are indistinguishable to the caller.
        """
        email = email.lower()
        match = db.query(VerificationCode.user_id).filter(
            VerificationCode.email == email,
            VerificationCode.code == code,
            VerificationCode.expires_at > utcnow()
        ).first()

        if not match:
            logger.warning("Verification code rejected", extra={"email": email})
            return False

        with scoped_transaction(db):
            db.query(VerificationCode).filter(
                VerificationCode.email == email
            ).delete(synchronize_session=False)
            db.query(User).filter(User.user_id == match.user_id).update(
                {User.is_verified: True}, synchronize_session=False
            )

        logger.info("Verification code consumed", extra={"email": email, "user_id": match.user_id})
        return True

    @staticmethod
    def delete_codes(db: Session, email: str, user_id: int | None = None) -> int:
        email = email.lower()
        with scoped_transaction(db):
            query = db.query(VerificationCode).filter(VerificationCode.email == email)
            if user_id is not None:
                query = query.filter(VerificationCode.user_id == user_id)
            deleted = query.delete(synchronize_session=False)

        return deleted

    @staticmethod
    def cleanup_expired(db: Session) -> int:
        deleted = db.query(VerificationCode).filter(
            VerificationCode.expires_at < utcnow()
        ).delete(synchronize_session=False)
        db.commit()
        return deleted
