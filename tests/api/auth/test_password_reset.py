from conftest import TEST_PASSWORD
from core.principal import Principal
from models.refresh_tokens import RefreshToken
from models.verification_codes import VerificationCode
from services.token_service import TokenService


def reset_code(session, email):
    return session.query(VerificationCode.code).filter(VerificationCode.email == email).scalar()


async def test_password_reset_flow(client, verified_user, session):
    TokenService.issue_token_pair(session, Principal.user(verified_user.user_id))

    response = await client.post("/auth/password-reset/request", json={"email": verified_user.email})
    assert response.status_code == 200

    response = await client.post("/auth/password-reset/verify", json={
        "email": verified_user.email,
        "code": reset_code(session, verified_user.email),
        "newPassword": "BrandNewPass123"
    })
    assert response.status_code == 200

    # Old sessions are gone
    assert session.query(RefreshToken).count() == 0

    old = await client.post("/auth/login", json={"email": verified_user.email, "password": TEST_PASSWORD})
    new = await client.post("/auth/login", json={"email": verified_user.email, "password": "BrandNewPass123"})
    assert old.status_code == 401
    assert new.status_code == 200


async def test_password_reset_unknown_email(client):
    response = await client.post("/auth/password-reset/request", json={"email": "ghost@example.com"})

    assert response.status_code == 404


async def test_password_reset_cooldown(client, verified_user):
    await client.post("/auth/password-reset/request", json={"email": verified_user.email})
    response = await client.post("/auth/password-reset/request", json={"email": verified_user.email})

    assert response.status_code == 429


async def test_password_reset_wrong_code(client, verified_user):
    await client.post("/auth/password-reset/request", json={"email": verified_user.email})

    response = await client.post("/auth/password-reset/verify", json={
        "email": verified_user.email,
        "code": "a" * 32,
        "newPassword": "BrandNewPass123"
    })

    assert response.status_code == 400


async def test_password_reset_weak_password(client, verified_user, session):
    await client.post("/auth/password-reset/request", json={"email": verified_user.email})

    response = await client.post("/auth/password-reset/verify", json={
        "email": verified_user.email,
        "code": reset_code(session, verified_user.email),
        "newPassword": "short"
    })

    assert response.status_code == 400
    # The code was not consumed
    assert reset_code(session, verified_user.email) is not None


async def test_password_reset_cancel(client, verified_user, session):
    await client.post("/auth/password-reset/request", json={"email": verified_user.email})

    response = await client.post("/auth/password-reset/cancel", json={"email": verified_user.email})

    assert response.status_code == 200
    assert session.query(VerificationCode).count() == 0


async def test_password_reset_cancel_unknown_email(client):
    response = await client.post("/auth/password-reset/cancel", json={"email": "ghost@example.com"})

    assert response.status_code == 404
