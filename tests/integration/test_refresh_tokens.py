from datetime import timedelta
import pytest
from sqlalchemy.exc import IntegrityError
from core.principal import Principal
from models.refresh_tokens import RefreshToken
from services.token_service import TokenService, hash_token
from utils.verification import utcnow


def test_issue_token_pair_stores_hash_only(session, verified_user):
    principal = Principal.user(verified_user.user_id)

    tokens = TokenService.issue_token_pair(session, principal)

    db_token = session.query(RefreshToken).one()
    assert db_token.token_hash == hash_token(tokens.refresh_token)
    assert db_token.token_hash != tokens.refresh_token
    assert db_token.user_id == verified_user.user_id
    assert db_token.admin_id is None
    assert db_token.is_admin is False


def test_admin_token_is_stored_against_admin(session, admin_user):
    tokens = TokenService.issue_token_pair(session, Principal.admin(admin_user.admin_id))

    db_token = session.query(RefreshToken).one()
    assert db_token.admin_id == admin_user.admin_id
    assert db_token.user_id is None
    assert TokenService.verify_refresh_token_in_database(session, tokens.refresh_token).is_admin is True


def test_stored_token_verifies(session, verified_user):
    tokens = TokenService.issue_token_pair(session, Principal.user(verified_user.user_id))

    check = TokenService.verify_refresh_token_in_database(session, tokens.refresh_token)

    assert check.is_valid is True
    assert check.is_admin is False


def test_unknown_token_does_not_verify(session):
    check = TokenService.verify_refresh_token_in_database(session, "never-issued")

    assert check.is_valid is False
    assert check.is_admin is None


def test_invalidate_then_verify_is_invalid(session, verified_user):
    principal = Principal.user(verified_user.user_id)
    first = TokenService.issue_token_pair(session, principal)
    second = TokenService.issue_token_pair(session, principal)

    assert TokenService.invalidate_refresh_tokens(session, principal) == 2

    assert TokenService.verify_refresh_token_in_database(session, first.refresh_token).is_valid is False
    assert TokenService.verify_refresh_token_in_database(session, second.refresh_token).is_valid is False


def test_invalidate_only_touches_matching_kind(session, verified_user, admin_user):
    # user 1 and admin 1 share the numeric id but not the token rows
    user_tokens = TokenService.issue_token_pair(session, Principal.user(verified_user.user_id))
    admin_tokens = TokenService.issue_token_pair(session, Principal.admin(admin_user.admin_id))

    TokenService.invalidate_refresh_tokens(session, Principal.admin(admin_user.admin_id))

    assert TokenService.verify_refresh_token_in_database(session, user_tokens.refresh_token).is_valid is True
    assert TokenService.verify_refresh_token_in_database(session, admin_tokens.refresh_token).is_valid is False


def test_expired_stored_token_does_not_verify(session, verified_user):
    tokens = TokenService.issue_token_pair(session, Principal.user(verified_user.user_id))
    session.query(RefreshToken).update(
        {RefreshToken.expires_at: utcnow() - timedelta(seconds=1)},
        synchronize_session=False
    )
    session.commit()

    assert TokenService.verify_refresh_token_in_database(session, tokens.refresh_token).is_valid is False
    assert TokenService.cleanup_expired(session) == 1


def test_token_row_needs_exactly_one_owner(session, verified_user):
    session.add(RefreshToken(
        user_id=None,
        admin_id=None,
        is_admin=False,
        token_hash=hash_token("orphan"),
        expires_at=utcnow() + timedelta(days=7)
    ))

    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()
