"""Tests for authentication router."""

from datetime import datetime

from fastapi.testclient import TestClient

from store_ratings.core.security import decode_access_token, verify_password
from store_ratings.models.user import User

SIGNUP_DATA = {
    "name": "Alexandra Catherine Smith",
    "email": "Test@Example.com",
    "password": "Secret#Pass1",
    "address": "12 Market Street, Springfield",
}


def test_signup_success(test_client: TestClient, test_db_session):
    """Test successful user signup."""
    response = test_client.post("/signup", json=SIGNUP_DATA)

    assert response.status_code == 201
    assert response.headers["content-type"] == "application/json"

    data = response.json()
    assert data["email"] == "test@example.com"
    assert data["name"] == "Alexandra Catherine Smith"
    assert data["role"] == "normal"
    assert isinstance(data["id"], int)
    assert "password" not in data
    assert "password_hash" not in data
    datetime.fromisoformat(data["created_at"].replace("Z", "+00:00"))

    # Signup logs the caller in
    payload = decode_access_token(data["token"])
    assert payload["sub"] == str(data["id"])
    assert payload["role"] == "normal"

    user = test_db_session.query(User).filter(User.email == "test@example.com").first()
    assert user is not None
    assert verify_password("Secret#Pass1", user.password_hash) is True


def test_signup_with_owner_alias(test_client: TestClient):
    response = test_client.post("/signup", json={**SIGNUP_DATA, "role": "storeowner"})

    assert response.status_code == 201
    assert response.json()["role"] == "store_owner"


def test_signup_duplicate_email(test_client: TestClient, test_db_session):
    """Test signup with duplicate email returns 409."""
    response1 = test_client.post("/signup", json=SIGNUP_DATA)
    assert response1.status_code == 201

    response2 = test_client.post("/signup", json={**SIGNUP_DATA, "email": "TEST@example.COM"})
    assert response2.status_code == 409
    assert response2.json() == {"message": "Email already exists."}

    assert test_db_session.query(User).count() == 1


def test_signup_short_name(test_client: TestClient, test_db_session):
    response = test_client.post("/signup", json={**SIGNUP_DATA, "name": "Test User"})

    assert response.status_code == 400
    assert response.json() == {"message": "Name must be between 20 and 60 characters."}
    assert test_db_session.query(User).count() == 0


def test_signup_weak_password(test_client: TestClient):
    response = test_client.post("/signup", json={**SIGNUP_DATA, "password": "testpassword123"})

    assert response.status_code == 400
    assert "Password must be 8-16 characters" in response.json()["message"]


def test_signup_invalid_email(test_client: TestClient):
    response = test_client.post("/signup", json={**SIGNUP_DATA, "email": "invalid-email"})

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid email address."}


def test_signup_missing_fields(test_client: TestClient):
    for field in ("name", "email", "password", "address"):
        payload = {key: value for key, value in SIGNUP_DATA.items() if key != field}
        response = test_client.post("/signup", json=payload)

        assert response.status_code == 400
        assert response.json() == {"message": "All fields are required."}


def test_signup_wrong_type_is_bad_request(test_client: TestClient):
    response = test_client.post("/signup", json={**SIGNUP_DATA, "name": ["not", "a", "string"]})

    assert response.status_code == 400
    assert "message" in response.json()


def test_login_success(test_client: TestClient, create_user):
    """Test successful user login."""
    user, _ = create_user(email="login@example.com", role="store_owner")

    response = test_client.post("/login", json={"email": "Login@Example.com", "password": "Secret#Pass1"})

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"] == {
        "id": user.id,
        "name": user.name,
        "email": "login@example.com",
        "address": user.address,
        "role": "store_owner",
        "created_at": data["user"]["created_at"],
    }

    token_payload = decode_access_token(data["token"])
    assert token_payload["sub"] == str(user.id)
    assert token_payload["role"] == "store_owner"
    assert isinstance(token_payload["exp"], (int, float))


def test_login_invalid_email(test_client: TestClient):
    response = test_client.post("/login", json={"email": "nonexistent@example.com", "password": "Secret#Pass1"})

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid credentials."}


def test_login_invalid_password(test_client: TestClient, create_user):
    create_user(email="login@example.com")

    response = test_client.post("/login", json={"email": "login@example.com", "password": "Wrong#Pass1"})

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid credentials."}


def test_login_missing_fields(test_client: TestClient):
    response1 = test_client.post("/login", json={"password": "Secret#Pass1"})
    assert response1.status_code == 400
    assert response1.json() == {"message": "Email and password required."}

    response2 = test_client.post("/login", json={"email": "test@example.com", "password": ""})
    assert response2.status_code == 400
