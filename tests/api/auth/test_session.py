from datetime import timedelta
from conftest import bearer, refresh_cookie
from core.principal import Principal
from models.refresh_tokens import RefreshToken
from services.token_service import TokenService
from utils.verification import utcnow
from jose import jwt
from core.config import settings


def login_tokens(session, principal):
    return TokenService.issue_token_pair(session, principal)


async def test_refresh_returns_new_access_token(client, verified_user, session):
    tokens = login_tokens(session, Principal.user(verified_user.user_id))

    response = await client.get("/auth/refresh-token", headers=refresh_cookie(tokens.refresh_token))

    assert response.status_code == 200
    payload = jwt.decode(
        response.json()["accessToken"],
        settings.ACCESS_TOKEN_SECRET,
        algorithms=[settings.ALGORITHM]
    )
    assert payload["id"] == verified_user.user_id
    assert payload["isAdmin"] is False


async def test_refresh_without_cookie(client):
    response = await client.get("/auth/refresh-token")

    assert response.status_code == 401


async def test_refresh_with_tampered_cookie(client, verified_user, session):
    tokens = login_tokens(session, Principal.user(verified_user.user_id))

    response = await client.get("/auth/refresh-token", headers=refresh_cookie(tokens.refresh_token + "x"))

    assert response.status_code == 403


async def test_refresh_with_access_token_as_cookie(client, verified_user, session):
    tokens = login_tokens(session, Principal.user(verified_user.user_id))

    response = await client.get("/auth/refresh-token", headers=refresh_cookie(tokens.access_token))

    assert response.status_code == 403


async def test_refresh_with_expired_cookie(client, verified_user):
    token = TokenService.generate_refresh_token(
        Principal.user(verified_user.user_id),
        issued_at=utcnow() - timedelta(days=8)
    )

    response = await client.get("/auth/refresh-token", headers=refresh_cookie(token))

    assert response.status_code == 403


async def test_refresh_with_unstored_token(client, verified_user):
    """A validly signed token that was never persisted is refused."""
    token = TokenService.generate_refresh_token(Principal.user(verified_user.user_id))

    response = await client.get("/auth/refresh-token", headers=refresh_cookie(token))

    assert response.status_code == 403


async def test_logout_revokes_and_clears_cookie(client, verified_user, session):
    principal = Principal.user(verified_user.user_id)
    tokens = login_tokens(session, principal)
    login_tokens(session, principal)  # a second device

    response = await client.post("/auth/logout", headers=refresh_cookie(tokens.refresh_token))

    assert response.status_code == 200
    assert session.query(RefreshToken).count() == 0

    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith('refreshToken=""') or set_cookie.startswith("refreshToken=;")
    assert "Max-Age=0" in set_cookie

    # The revoked token no longer refreshes
    response = await client.get("/auth/refresh-token", headers=refresh_cookie(tokens.refresh_token))
    assert response.status_code == 403


async def test_logout_needs_refresh_cookie_not_access_token(client, verified_user, session):
    tokens = login_tokens(session, Principal.user(verified_user.user_id))

    response = await client.post("/auth/logout", headers=bearer(tokens.access_token))

    assert response.status_code == 401


async def test_admin_logout_leaves_user_tokens(client, verified_user, admin_user, session):
    login_tokens(session, Principal.user(verified_user.user_id))
    admin_tokens = login_tokens(session, Principal.admin(admin_user.admin_id))

    response = await client.post("/auth/logout", headers=refresh_cookie(admin_tokens.refresh_token))

    assert response.status_code == 200
    remaining = session.query(RefreshToken).one()
    assert remaining.user_id == verified_user.user_id


async def test_check_auth(client, verified_user, session):
    tokens = login_tokens(session, Principal.user(verified_user.user_id))

    response = await client.post("/auth/check-auth", headers=refresh_cookie(tokens.refresh_token))

    assert response.status_code == 200
    assert response.json() == {
        "id": verified_user.user_id,
        "email": verified_user.email,
        "username": verified_user.username,
        "isAdmin": False
    }


async def test_check_auth_admin(client, admin_user, session):
    tokens = login_tokens(session, Principal.admin(admin_user.admin_id))

    response = await client.post("/auth/check-auth", headers=refresh_cookie(tokens.refresh_token))

    assert response.status_code == 200
    assert response.json()["isAdmin"] is True
    assert response.json()["email"] == admin_user.email


async def test_check_auth_deleted_principal(client, session):
    token = TokenService.generate_refresh_token(Principal.user(999))

    response = await client.post("/auth/check-auth", headers=refresh_cookie(token))

    assert response.status_code == 404


async def test_request_id_header(client):
    response = await client.get("/health", headers={"X-Request-ID": "trace-123"})

    assert response.status_code == 200
    assert response.json() == {"status": "Healthy"}
    assert response.headers["X-Request-ID"] == "trace-123"


async def test_error_responses_keep_their_status(client):
    """Mapped errors reach the client with their own status and code, not a 500."""
    missing = await client.get("/user/me")
    garbage = await client.get("/user/me", headers=bearer("garbage"))
    no_cookie = await client.post("/auth/logout")

    assert (missing.status_code, garbage.status_code, no_cookie.status_code) == (401, 403, 401)
    assert set(missing.json()) == {"detail", "code"}
    assert missing.json()["code"] == "AUTH_ERROR"
    assert garbage.json()["code"] == "AUTHORIZATION_ERROR"
    assert no_cookie.json()["code"] == "AUTH_ERROR"
    assert "X-Request-ID" in no_cookie.headers


async def test_refresh_for_deactivated_user(client, verified_user, session):
    tokens = login_tokens(session, Principal.user(verified_user.user_id))
    verified_user.is_active = False
    session.commit()

    response = await client.get("/auth/refresh-token", headers=refresh_cookie(tokens.refresh_token))

    assert response.status_code == 403
