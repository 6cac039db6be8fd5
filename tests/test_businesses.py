import pytest
from fastapi.testclient import TestClient

from leadhub.app.db.base import Base
from leadhub.app.db.session import engine
from leadhub.app.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def headers():
    client = TestClient(app)
    client.post("/auth/register", json={"email": "biz@example.com", "password": "secret1"})
    token = client.post("/auth/login", json={"email": "biz@example.com", "password": "secret1"}).json()["token"]
    return {"Authorization": f"Bearer {token}"}


def test_businesses_require_session():
    client = TestClient(app)
    assert client.get("/businesses").status_code == 401
    assert client.post("/businesses", json={"name": "Acme"}).status_code == 401


def test_create_and_read_business(headers):
    client = TestClient(app)
    response = client.post(
        "/businesses",
        json={"name": "Acme", "email": "hello@acme.com", "city": "Austin", "website": "https://acme.example/about"},
        headers=headers,
    )
    assert response.status_code == 201
    business = response.json()
    assert business["name"] == "Acme"
    assert business["website"] == "https://acme.example/about"
    assert business["phone"] is None

    fetched = client.get(f"/businesses/{business['id']}", headers=headers)
    assert fetched.status_code == 200
    assert fetched.json()["city"] == "Austin"


def test_create_business_validation(headers):
    client = TestClient(app)
    response = client.post("/businesses", json={"email": "bad", "website": "not a url"}, headers=headers)
    assert response.status_code == 400
    fields = {entry["field"] for entry in response.json()["errors"]}
    assert fields == {"name", "email", "website"}


def test_list_businesses_newest_first(headers):
    client = TestClient(app)
    client.post("/businesses", json={"name": "Older"}, headers=headers)
    client.post("/businesses", json={"name": "Newer"}, headers=headers)
    names = [b["name"] for b in client.get("/businesses", headers=headers).json()]
    assert names == ["Newer", "Older"]


def test_partial_update_business(headers):
    client = TestClient(app)
    original = client.post("/businesses", json={"name": "Acme", "city": "Austin"}, headers=headers).json()

    response = client.put(f"/businesses/{original['id']}", json={"phone": "555-0111"}, headers=headers)
    assert response.status_code == 200
    updated = response.json()
    assert updated["phone"] == "555-0111"
    assert updated["name"] == "Acme"
    assert updated["city"] == "Austin"
    assert updated["updated_at"] > original["updated_at"]


def test_update_missing_business_returns_404(headers):
    client = TestClient(app)
    assert client.put("/businesses/42", json={"name": "Ghost"}, headers=headers).status_code == 404


def test_delete_business_with_clients_is_refused(headers):
    client = TestClient(app)
    business_id = client.post("/businesses", json={"name": "Busy"}, headers=headers).json()["id"]
    client.post("/clients", json={"full_name": "Assigned", "business_id": business_id})

    response = client.delete(f"/businesses/{business_id}", headers=headers)
    assert response.status_code == 400
    assert "assigned clients" in response.json()["error"]
    assert client.get(f"/businesses/{business_id}", headers=headers).status_code == 200


def test_delete_unused_business(headers):
    client = TestClient(app)
    business_id = client.post("/businesses", json={"name": "Idle"}, headers=headers).json()["id"]
    client.put("/auth/default-business", json={"business_id": business_id}, headers=headers)

    response = client.delete(f"/businesses/{business_id}", headers=headers)
    assert response.status_code == 200
    assert client.get(f"/businesses/{business_id}", headers=headers).status_code == 404


def test_delete_missing_business_returns_404(headers):
    client = TestClient(app)
    assert client.delete("/businesses/999", headers=headers).status_code == 404
