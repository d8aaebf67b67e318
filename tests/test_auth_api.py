import uuid

from moodfeed.core.security import create_refresh_token, get_password_hash
from moodfeed.models.user import User

REGISTRATION = {
    "email": "Maya@Example.com",
    "password": "correct-horse",
    "name": "Maya Lind",
    "timezone": "Europe/Stockholm",
}


async def test_register_creates_profile(client):
    response = await client.post("/api/v1/auth/register", json=REGISTRATION)
    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    user = body["user"]
    assert user["name"] == "Maya Lind"
    assert user["handle"].startswith("mayalind#")
    assert user["region"] == "EU"
    assert user["location"] == "Stockholm"
    assert user["settings"]["private_account"] is True
    assert user["friends"] == []


async def test_duplicate_registration(client):
    await client.post("/api/v1/auth/register", json=REGISTRATION)
    response = await client.post("/api/v1/auth/register", json={**REGISTRATION, "email": "maya@example.com"})
    assert response.status_code == 409
    assert response.json()["kind"] == "ALREADY_REGISTERED"


async def test_login(client):
    await client.post("/api/v1/auth/register", json=REGISTRATION)
    response = await client.post(
        "/api/v1/auth/login", json={"email": "maya@example.com", "password": "correct-horse"}
    )
    assert response.status_code == 200
    token = response.json()["access_token"]
    me = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["name"] == "Maya Lind"


async def test_bad_login(client):
    await client.post("/api/v1/auth/register", json=REGISTRATION)
    response = await client.post("/api/v1/auth/login", json={"email": "maya@example.com", "password": "wrong-pass"})
    assert response.status_code == 401
    assert response.json()["kind"] == "INVALID_LOGIN"
    assert response.headers["www-authenticate"] == "Bearer"


async def test_login_provisions_missing_profile(client, db):
    db.add(User(email="orphan@example.com", password_hash=get_password_hash("orphan-pass")))
    await db.commit()

    response = await client.post("/api/v1/auth/login", json={"email": "orphan@example.com", "password": "orphan-pass"})
    assert response.status_code == 200
    profile = response.json()["user"]
    assert profile["name"] == "orphan"
    assert profile["handle"].startswith("orphan#")


async def test_refresh(client):
    registered = (await client.post("/api/v1/auth/register", json=REGISTRATION)).json()
    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": registered["refresh_token"]})
    assert response.status_code == 200
    assert response.json()["user"]["id"] == registered["user"]["id"]


async def test_refresh_rejects_access_token(client):
    registered = (await client.post("/api/v1/auth/register", json=REGISTRATION)).json()
    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": registered["access_token"]})
    assert response.status_code == 401
    assert response.json()["kind"] == "INVALID_TOKEN"


async def test_refresh_for_unknown_user(client):
    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": create_refresh_token(uuid.uuid4())})
    assert response.status_code == 401
