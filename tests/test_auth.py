from .conftest import as_user, register


async def test_register_returns_user_without_password(client):
    response = await client.post("/auth/register", json={"username": "alice", "password": "secret123"})
    assert response.status_code == 201, response.text
    data = response.json()
    assert data["username"] == "alice"
    assert data["id"]
    assert data["accessToken"]
    assert "password" not in data
    assert "hashedPassword" not in data


async def test_register_duplicate_username_is_case_insensitive(client):
    await register(client, "Alice")
    response = await client.post("/auth/register", json={"username": "aLiCe", "password": "other-pass"})
    assert response.status_code == 409


async def test_register_rejects_short_username_and_password(client):
    response = await client.post("/auth/register", json={"username": "al", "password": "secret123"})
    assert response.status_code == 400

    response = await client.post("/auth/register", json={"username": "alice", "password": "123"})
    assert response.status_code == 400


async def test_login_returns_registered_user(client):
    user = await register(client, "alice")
    response = await client.post("/auth/login", json={"username": "ALICE", "password": "secret123"})
    assert response.status_code == 200
    assert response.json()["id"] == user["id"]


async def test_login_failures_do_not_reveal_usernames(client):
    await register(client, "alice")

    wrong_password = await client.post("/auth/login", json={"username": "alice", "password": "nope-nope"})
    unknown_user = await client.post("/auth/login", json={"username": "mallory", "password": "secret123"})

    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


async def test_me_resolves_identity_header_and_bearer_token(client):
    user = await register(client, "alice")

    response = await client.get("/auth/me", headers=as_user(user["id"]))
    assert response.status_code == 200
    assert response.json()["username"] == "alice"

    response = await client.get("/auth/me", headers={"Authorization": f"Bearer {user['accessToken']}"})
    assert response.status_code == 200
    assert response.json()["id"] == user["id"]


async def test_me_rejects_missing_or_invalid_identity(client):
    assert (await client.get("/auth/me")).status_code == 401
    assert (await client.get("/auth/me", headers=as_user("undefined"))).status_code == 401
    assert (await client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})).status_code == 401
