from datetime import timedelta
from conftest import bearer
from core.principal import Principal
from models.orders import Order
from services.token_service import TokenService
from utils.verification import utcnow


async def test_get_me(client, verified_user, user_headers):
    response = await client.get("/user/me", headers=user_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == verified_user.user_id
    assert data["email"] == verified_user.email
    assert data["phone_number"] == "+821012345678"
    assert "password_hash" not in data


async def test_get_me_without_token(client):
    response = await client.get("/user/me")

    assert response.status_code == 401


async def test_get_me_with_invalid_token(client):
    response = await client.get("/user/me", headers=bearer("not-a-jwt"))

    assert response.status_code == 403
    assert response.json()["code"] == "AUTHORIZATION_ERROR"


async def test_get_me_with_expired_token(client, verified_user):
    token = TokenService.generate_access_token(
        Principal.user(verified_user.user_id),
        issued_at=utcnow() - timedelta(minutes=16)
    )

    response = await client.get("/user/me", headers=bearer(token))

    assert response.status_code == 403


async def test_get_me_with_refresh_token(client, verified_user):
    token = TokenService.generate_refresh_token(Principal.user(verified_user.user_id))

    response = await client.get("/user/me", headers=bearer(token))

    assert response.status_code == 403


async def test_get_me_as_admin(client, admin_headers):
    response = await client.get("/user/me", headers=admin_headers)

    assert response.status_code == 403


async def test_update_me(client, verified_user, user_headers, session):
    response = await client.put("/user/me", headers=user_headers, json={
        "address": "99 Hangang-daero, Seoul",
        "phone_number": "010-9876-5432"
    })

    assert response.status_code == 200
    data = response.json()
    assert data["address"] == "99 Hangang-daero, Seoul"
    assert data["phone_number"] == "+821098765432"
    # Untouched fields keep their value
    assert data["username"] == verified_user.username


async def test_update_me_cannot_change_email(client, verified_user, user_headers):
    response = await client.put("/user/me", headers=user_headers, json={"email": "other@example.com"})

    assert response.status_code == 200
    assert response.json()["email"] == verified_user.email


async def test_update_me_invalid_phone(client, user_headers):
    response = await client.put("/user/me", headers=user_headers, json={"phone_number": "12"})

    assert response.status_code == 400


async def test_my_orders_empty(client, user_headers):
    response = await client.get("/user/me/orders", headers=user_headers)

    assert response.status_code == 404


async def test_my_orders(client, verified_user, user_headers, session):
    session.add(Order(
        user_id=verified_user.user_id,
        total_price=30000,
        discount_amount=0,
        delivery_address="12 Teheran-ro",
        order_items=[{"product_id": 1, "product_name": "Rose Oil", "quantity": 2, "price": 15000}]
    ))
    session.commit()

    response = await client.get("/user/me/orders", headers=user_headers)

    assert response.status_code == 200
    orders = response.json()
    assert len(orders) == 1
    assert orders[0]["status"] == "PENDING"
    assert orders[0]["order_items"][0]["product_name"] == "Rose Oil"
