from fastapi.testclient import TestClient

from src.session_voting_backend.services.security import JWTHandler
from tests.constants import TEST_VOTER, TEST_VOTING_PASSWORD


class TestAuthAPI:
    """
    Tests for the authentication API endpoints (/auth).
    Any name may log in; only the shared password is checked.
    """

    def test_login_success(self, client: TestClient):
        response = client.post(
            "/auth/login",
            data={"username": TEST_VOTER, "password": TEST_VOTING_PASSWORD}
        )

        assert response.status_code == 200, response.json()
        token_data = response.json()
        assert "access_token" in token_data
        assert token_data["token_type"] == "bearer"
        assert token_data["username"] == TEST_VOTER

        payload = JWTHandler.decode_token(token_data["access_token"])
        assert payload.sub == TEST_VOTER

    def test_login_strips_username(self, client: TestClient):
        response = client.post(
            "/auth/login",
            data={"username": f"  {TEST_VOTER}  ", "password": TEST_VOTING_PASSWORD}
        )
        assert response.status_code == 200, response.json()
        assert response.json()["username"] == TEST_VOTER

    def test_login_wrong_password(self, client: TestClient):
        response = client.post(
            "/auth/login",
            data={"username": TEST_VOTER, "password": "not-the-password"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid password"

    def test_login_blank_username(self, client: TestClient):
        response = client.post(
            "/auth/login",
            data={"username": "   ", "password": TEST_VOTING_PASSWORD}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Username cannot be empty"

    def test_login_username_too_long(self, client: TestClient):
        response = client.post(
            "/auth/login",
            data={"username": "x" * 51, "password": TEST_VOTING_PASSWORD}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Username too long"

    def test_login_username_at_limit(self, client: TestClient):
        response = client.post(
            "/auth/login",
            data={"username": "x" * 50, "password": TEST_VOTING_PASSWORD}
        )
        assert response.status_code == 200, response.json()
