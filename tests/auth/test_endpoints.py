"""Tests for authentication endpoints.

Tests registration, login and the bearer-protected profile endpoint.
"""

import jwt as pyjwt

REGISTER_URL = "/api/AuthManagement/Register"
LOGIN_URL = "/api/AuthManagement/Login"
ME_URL = "/api/AuthManagement/Me"


# ============================================================================
# Registration Endpoint
# ============================================================================


class TestRegister:
    """Tests for POST /api/AuthManagement/Register."""

    def test_register_success(self, client):
        response = client.post(
            REGISTER_URL,
            json={"username": "u1", "email": "u1@x.com", "password": "Passw0rd!"},
        )
        assert response.status_code == 200

        data = response.get_json()
        assert data["result"] is True
        assert data["token_type"] == "bearer"
        assert data["token"]
        assert data["user"]["username"] == "u1"
        assert data["user"]["email"] == "u1@x.com"
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]

    def test_register_token_claims_match_principal(self, client):
        response = client.post(
            REGISTER_URL,
            json={"username": "u1", "email": "u1@x.com", "password": "Passw0rd!"},
        )
        data = response.get_json()

        payload = pyjwt.decode(data["token"], options={"verify_signature": False})
        assert payload["sub"] == "u1@x.com"
        assert payload["email"] == "u1@x.com"
        assert payload["id"] == data["user"]["id"]

    def test_register_duplicate_username(self, registered_client):
        client, _body = registered_client
        response = client.post(
            REGISTER_URL,
            json={"username": "u1", "email": "another@x.com", "password": "Passw0rd!"},
        )
        assert response.status_code == 409

        data = response.get_json()
        assert data["error"]["type"] == "ConflictError"
        assert data["error"]["message"] == "Username already exists"

    def test_register_duplicate_email(self, registered_client):
        client, _body = registered_client
        response = client.post(
            REGISTER_URL,
            json={"username": "u2", "email": "U1@x.com", "password": "Passw0rd!"},
        )
        assert response.status_code == 409
        assert response.get_json()["error"]["message"] == "Email already exists"

    def test_register_weak_password(self, client):
        response = client.post(
            REGISTER_URL,
            json={"username": "u1", "email": "u1@x.com", "password": "weak"},
        )
        assert response.status_code == 400

        data = response.get_json()
        assert data["error"]["type"] == "ValidationError"
        assert data["error"]["details"]["model"] == "UserRegistration"
        fields = [e["field"] for e in data["error"]["details"]["errors"]]
        assert "password" in fields

    def test_register_error_does_not_echo_password(self, client):
        response = client.post(
            REGISTER_URL,
            json={"username": "u1", "email": "bad-email", "password": "Passw0rd!"},
        )
        assert response.status_code == 400

        received = response.get_json()["error"]["details"]["received"]
        assert received["password"] == "***"
        assert received["email"] == "bad-email"

    def test_register_missing_fields(self, client):
        response = client.post(REGISTER_URL, json={"username": "u1"})
        assert response.status_code == 400

        fields = [e["field"] for e in response.get_json()["error"]["details"]["errors"]]
        assert "email" in fields
        assert "password" in fields


# ============================================================================
# Login Endpoint
# ============================================================================


class TestLogin:
    """Tests for POST /api/AuthManagement/Login."""

    def test_login_success(self, registered_client):
        client, registered = registered_client
        response = client.post(LOGIN_URL, json={"username": "u1", "password": "Passw0rd!"})
        assert response.status_code == 200

        data = response.get_json()
        assert data["result"] is True
        assert data["token"]
        assert data["token"] != registered["token"]
        assert data["user"]["id"] == registered["user"]["id"]

    def test_login_with_email(self, registered_client):
        client, _body = registered_client
        response = client.post(LOGIN_URL, json={"username": "u1@x.com", "password": "Passw0rd!"})
        assert response.status_code == 200

    def test_login_case_insensitive_identifier(self, registered_client):
        client, _body = registered_client
        response = client.post(LOGIN_URL, json={"username": "U1", "password": "Passw0rd!"})
        assert response.status_code == 200

    def test_login_wrong_password(self, registered_client):
        client, _body = registered_client
        response = client.post(LOGIN_URL, json={"username": "u1", "password": "wrong"})
        assert response.status_code == 401

        data = response.get_json()
        assert data["error"]["type"] == "AuthenticationError"
        assert data["error"]["message"] == "Invalid credentials."

    def test_wrong_password_and_unknown_user_get_same_response(self, registered_client):
        client, _body = registered_client
        wrong_password = client.post(LOGIN_URL, json={"username": "u1", "password": "wrong"})
        unknown_user = client.post(LOGIN_URL, json={"username": "ghost", "password": "Passw0rd!"})

        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.get_json() == unknown_user.get_json()

    def test_login_missing_fields(self, client):
        response = client.post(LOGIN_URL, json={"username": "u1"})
        assert response.status_code == 400
        assert response.get_json()["error"]["type"] == "ValidationError"

    def test_login_accepts_form_data(self, registered_client):
        client, _body = registered_client
        response = client.post(LOGIN_URL, data={"username": "u1", "password": "Passw0rd!"})
        assert response.status_code == 200


# ============================================================================
# Profile Endpoint
# ============================================================================


class TestMe:
    """Tests for GET /api/AuthManagement/Me."""

    def test_me_with_valid_token(self, registered_client, auth_headers):
        client, registered = registered_client
        response = client.get(ME_URL, headers=auth_headers)
        assert response.status_code == 200

        data = response.get_json()
        assert data["user"]["id"] == registered["user"]["id"]
        assert data["claims"]["sub"] == "u1@x.com"
        assert data["claims"]["exp"] - data["claims"]["iat"] == 4 * 60 * 60

    def test_me_without_token(self, client):
        response = client.get(ME_URL)
        assert response.status_code == 401

        data = response.get_json()
        assert data["error"]["type"] == "AuthenticationError"
        assert data["error"]["details"]["code"] == "missing_auth"

    def test_me_with_tampered_token(self, registered_client, auth_headers):
        client, _body = registered_client
        header, payload, signature = auth_headers["Authorization"][7:].split(".")
        flipped = "A" if signature[0] != "A" else "B"
        tampered = f"{header}.{payload}.{flipped}{signature[1:]}"

        response = client.get(ME_URL, headers={"Authorization": f"Bearer {tampered}"})
        assert response.status_code == 401

        data = response.get_json()
        assert data["error"]["type"] == "TokenError"
        assert data["error"]["details"]["code"] == "invalid_token"

    def test_me_user_deleted(self, app, registered_client, auth_headers):
        client, _body = registered_client
        from jwtbasic.db import get_core

        with get_core(app.config["DATABASE_PATH"]) as core:
            core._conn.execute("DELETE FROM users")

        response = client.get(ME_URL, headers=auth_headers)
        assert response.status_code == 401
        assert response.get_json()["error"]["details"]["code"] == "unknown_user"
