from datetime import timedelta
from core.principal import Principal
from models.refresh_tokens import RefreshToken
from models.users import User
from models.verification_codes import VerificationCode
from services.auth_service import AuthService
from services.maintenance_service import MaintenanceService
from services.token_service import TokenService
from services.verification_service import VerificationService
from utils.hashing import UNUSABLE_PASSWORD
from utils.verification import utcnow


def make_placeholder(session, email, age_hours):
    user = User(
        email=email,
        password_hash=UNUSABLE_PASSWORD,
        is_active=False,
        is_verified=False,
        created_at=utcnow() - timedelta(hours=age_hours)
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def test_cleanup_temp_users_respects_age(session, verified_user):
    stale = make_placeholder(session, "stale@example.com", age_hours=72)
    VerificationService.issue(session, stale.email, stale.user_id)
    make_placeholder(session, "fresh@example.com", age_hours=1)

    assert AuthService.cleanup_temp_users(session) == 1

    emails = {email for (email,) in session.query(User.email).all()}
    assert emails == {verified_user.email, "fresh@example.com"}
    assert session.query(VerificationCode).count() == 0


def test_cleanup_report(session, verified_user):
    principal = Principal.user(verified_user.user_id)
    TokenService.issue_token_pair(session, principal)
    TokenService.issue_token_pair(session, principal)
    session.query(RefreshToken).filter(RefreshToken.id == 1).update(
        {RefreshToken.expires_at: utcnow() - timedelta(days=1)},
        synchronize_session=False
    )
    session.commit()

    make_placeholder(session, "stale@example.com", age_hours=72)

    report = MaintenanceService.cleanup(session)

    assert report == {
        "expired_refresh_tokens": 1,
        "expired_verification_codes": 0,
        "stale_temp_users": 1,
    }
    assert session.query(RefreshToken).count() == 1
