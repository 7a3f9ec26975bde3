"""Tests for stores router."""

from fastapi.testclient import TestClient

from store_ratings.models.store import Store


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_admin_creates_store(test_client: TestClient, create_user, test_db_session):
    _, admin_token = create_user(email="admin@example.com", role="admin")
    owner, _ = create_user(email="owner@example.com", role="store_owner")

    response = test_client.post(
        "/stores",
        json={"name": " Corner Grocery ", "address": "1 Main Road", "owner_id": owner.id, "email": "Shop@Example.com"},
        headers=_auth(admin_token),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Corner Grocery"
    assert data["owner_id"] == owner.id
    assert data["email"] == "shop@example.com"
    assert test_db_session.query(Store).count() == 1


def test_create_store_missing_fields(test_client: TestClient, create_user):
    _, admin_token = create_user(email="admin@example.com", role="admin")

    response = test_client.post("/stores", json={"name": "Corner Grocery"}, headers=_auth(admin_token))

    assert response.status_code == 400
    assert response.json() == {"message": "All fields are required."}


def test_create_store_invalid_email(test_client: TestClient, create_user):
    admin, admin_token = create_user(email="admin@example.com", role="admin")

    response = test_client.post(
        "/stores",
        json={"name": "Corner Grocery", "address": "1 Main Road", "owner_id": admin.id, "email": "nope"},
        headers=_auth(admin_token),
    )

    assert response.status_code == 400


def test_non_admin_cannot_create_store(test_client: TestClient, create_user):
    owner, token = create_user(email="owner@example.com", role="store_owner")

    response = test_client.post(
        "/stores",
        json={"name": "Corner Grocery", "address": "1 Main Road", "owner_id": owner.id},
        headers=_auth(token),
    )

    assert response.status_code == 403


def test_create_store_unauthenticated(test_client: TestClient):
    response = test_client.post("/stores", json={"name": "Corner Grocery", "address": "1 Main Road", "owner_id": 1})

    assert response.status_code == 401


def test_list_stores(test_client: TestClient, create_user, create_store):
    owner, token = create_user(email="owner@example.com", role="store_owner")
    other, _ = create_user(email="other@example.com", role="store_owner")
    create_store(owner, name="Zebra Books", address="North Street")
    create_store(owner, name="Apple Market", address="South Street")
    create_store(other, name="Mango Market", address="North Avenue")

    response = test_client.get(
        "/stores",
        params={"owner_id": owner.id, "sortBy": "name"},
        headers=_auth(token),
    )

    assert response.status_code == 200
    assert [store["name"] for store in response.json()] == ["Apple Market", "Zebra Books"]

    markets = test_client.get("/stores", params={"name": "MARKET", "order": "desc"}, headers=_auth(token))
    assert [store["name"] for store in markets.json()] == ["Mango Market", "Apple Market"]


def test_list_stores_requires_token(test_client: TestClient):
    response = test_client.get("/stores")

    assert response.status_code == 401


def test_stores_with_own_ratings(test_client: TestClient, create_user, create_store):
    owner, _ = create_user(email="owner@example.com", role="store_owner")
    me, token = create_user(email="me@example.com")
    first = create_store(owner, name="First Store")
    create_store(owner, name="Second Store")

    test_client.post("/ratings", json={"store_id": first.id, "rating": 4}, headers=_auth(token))

    response = test_client.get(f"/stores/user/{me.id}", headers=_auth(token))

    assert response.status_code == 200
    data = response.json()
    assert [store["name"] for store in data] == ["First Store", "Second Store"]
    assert data[0]["avg_rating"] == 4.0
    assert data[0]["total_ratings"] == 1
    assert data[0]["user_rating"]["rating"] == 4
    assert data[1]["avg_rating"] is None
    assert data[1]["total_ratings"] == 0
    assert data[1]["user_rating"] is None


def test_stores_with_other_users_ratings_forbidden(test_client: TestClient, create_user):
    someone, _ = create_user(email="someone@example.com")
    _, token = create_user(email="me@example.com")

    response = test_client.get(f"/stores/user/{someone.id}", headers=_auth(token))

    assert response.status_code == 403


def test_average_rating_is_public(test_client: TestClient, create_user, create_store):
    owner, _ = create_user(email="owner@example.com", role="store_owner")
    store = create_store(owner)

    empty = test_client.get(f"/stores/{store.id}/average-rating")
    assert empty.status_code == 200
    assert empty.json() == {"avg_rating": None, "total_ratings": 0}

    for index, value in enumerate([5, 4, 4]):
        _, token = create_user(email=f"rater{index}@example.com")
        test_client.post("/ratings", json={"store_id": store.id, "rating": value}, headers=_auth(token))

    response = test_client.get(f"/stores/{store.id}/average-rating")
    assert response.json() == {"avg_rating": 4.33, "total_ratings": 3}
