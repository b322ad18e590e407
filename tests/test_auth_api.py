"""Integration tests for register, login, token refresh and logout."""

from storefront.security.utils import decode_token


def _register(client, email="new@example.com", password="s3cret-pass"):
    return client.post("/auth/register", json={"email": email, "password": password, "first_name": "New"})


def _login(client, email="new@example.com", password="s3cret-pass"):
    return client.post("/auth/login", json={"email": email, "password": password})


class TestRegisterAndLogin:
    def test_register_then_login(self, client):
        created = _register(client)
        assert created.status_code == 201
        assert created.json()["role"] == "customer"

        response = _login(client)
        assert response.status_code == 200
        claims = decode_token(response.json()["access_token"])
        assert claims["sub"] == created.json()["id"]
        assert claims["email"] == "new@example.com"
        assert claims["role"] == "customer"
        assert claims["type"] == "access"

    def test_duplicate_email(self, client):
        _register(client)

        response = _register(client)

        assert response.status_code == 409
        assert response.json() == {"error": "Email already registered"}

    def test_wrong_password(self, client):
        _register(client)

        response = _login(client, password="wrong-password")

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"

    def test_access_token_opens_account(self, client):
        _register(client)
        token = _login(client).json()["access_token"]

        profile = client.get("/v1/account", headers={"Authorization": f"Bearer {token}"}).json()

        assert profile["email"] == "new@example.com"
        assert profile["first_name"] == "New"


class TestRefresh:
    def test_refresh_rotates_token(self, client):
        _register(client)
        pair = _login(client).json()

        rotated = client.post("/auth/refresh", json={"refresh_token": pair["refresh_token"]})
        assert rotated.status_code == 200
        assert rotated.json()["refresh_token"] != pair["refresh_token"]

        reused = client.post("/auth/refresh", json={"refresh_token": pair["refresh_token"]})
        assert reused.status_code == 401

    def test_access_token_is_not_a_refresh_token(self, client):
        _register(client)
        pair = _login(client).json()

        response = client.post("/auth/refresh", json={"refresh_token": pair["access_token"]})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token type"

    def test_logout_revokes(self, client):
        _register(client)
        pair = _login(client).json()

        assert client.post("/auth/logout", json={"refresh_token": pair["refresh_token"]}).status_code == 200
        assert client.post("/auth/refresh", json={"refresh_token": pair["refresh_token"]}).status_code == 401

    def test_garbage_token(self, client):
        response = client.post("/auth/refresh", json={"refresh_token": "garbage"})

        assert response.status_code == 401
