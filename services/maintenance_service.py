import time
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from core.exceptions import DatabaseError
from services.auth_service import AuthService
from services.token_service import TokenService
from services.verification_service import VerificationService
from utils.logger import get_logger, log_database_query

logger = get_logger(__name__)


def _timed(table: str, cleanup, db: Session) -> int:
    start = time.time()
    deleted = cleanup(db)
    log_database_query(
        logger,
        query_type="DELETE",
        table=table,
        duration_ms=(time.time() - start) * 1000,
        rows_affected=deleted
    )
    return deleted


class MaintenanceService:

    @staticmethod
    def cleanup(db: Session) -> dict:
        """
        Purges expired refresh tokens, expired verification codes and
        placeholder users that never finished signup.
        """
        try:
            report = {
                "expired_refresh_tokens": _timed("refresh_tokens", TokenService.cleanup_expired, db),
                "expired_verification_codes": _timed("email_verification", VerificationService.cleanup_expired, db),
                "stale_temp_users": _timed("users", AuthService.cleanup_temp_users, db),
            }
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Maintenance cleanup failed", exc_info=True)
            raise DatabaseError("Maintenance cleanup failed.") from e

        logger.info("Maintenance cleanup finished", extra=report)
        return report
