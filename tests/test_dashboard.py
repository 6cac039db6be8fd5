from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from leadhub.app.api.dashboard import _month_before
from leadhub.app.core.time import timestamp, utc_now
from leadhub.app.db.base import Base
from leadhub.app.db.gateway import Gateway
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
    client.post("/auth/register", json={"email": "dash@example.com", "password": "secret1"})
    token = client.post("/auth/login", json={"email": "dash@example.com", "password": "secret1"}).json()["token"]
    return {"Authorization": f"Bearer {token}"}


def backdate(client_id: int, days: int) -> None:
    Gateway(engine).exec_write(
        "UPDATE clients SET created_at = :created_at WHERE id = :id",
        {"created_at": timestamp(utc_now() - timedelta(days=days)), "id": client_id},
    )


def test_metrics_empty_database(headers):
    client = TestClient(app)
    response = client.get("/dashboard/metrics", headers=headers)
    assert response.status_code == 200
    assert response.json() == {
        "signupsToday": 0,
        "signupsThisWeek": 0,
        "signupsThisMonth": 0,
        "totalClients": 0,
        "clientsByStatus": {},
        "clientsBySource": {},
        "lastSignups": [],
    }


def test_metrics_counts_by_period_status_and_source(headers):
    client = TestClient(app)
    today = client.post("/clients", json={"full_name": "Today", "tags": ["hot"]}).json()["client"]["id"]
    week = client.post("/clients", json={"full_name": "This Week", "status": "active", "source": "ads"}).json()["client"]["id"]
    month = client.post("/clients", json={"full_name": "This Month", "status": "active"}).json()["client"]["id"]
    old = client.post("/clients", json={"full_name": "Old", "source": "referral"}).json()["client"]["id"]
    backdate(week, 3)
    backdate(month, 20)
    backdate(old, 90)

    data = client.get("/dashboard/metrics", headers=headers).json()
    assert data["signupsToday"] == 1
    assert data["signupsThisWeek"] == 2
    assert data["signupsThisMonth"] == 3
    assert data["totalClients"] == 4
    assert data["clientsByStatus"] == {"new": 2, "active": 2}
    assert data["clientsBySource"] == {"website": 2, "ads": 1, "referral": 1}
    assert [c["id"] for c in data["lastSignups"]] == [today, week, month, old]
    assert data["lastSignups"][0]["tags"] == ["hot"]


def test_metrics_filtered_by_business(headers):
    client = TestClient(app)
    business_id = client.post("/businesses", json={"name": "Acme"}, headers=headers).json()["id"]
    client.post("/clients", json={"full_name": "Inside", "business_id": business_id})
    client.post("/clients", json={"full_name": "Outside"})

    scoped = client.get("/dashboard/metrics", params={"business_id": business_id}, headers=headers).json()
    assert scoped["totalClients"] == 1
    assert [c["full_name"] for c in scoped["lastSignups"]] == ["Inside"]

    unscoped = client.get("/dashboard/metrics", params={"business_id": "null"}, headers=headers).json()
    assert unscoped["totalClients"] == 2


def test_metrics_rejects_non_numeric_business_id(headers):
    client = TestClient(app)
    client.post("/clients", json={"full_name": "Anyone"})

    response = client.get("/dashboard/metrics", params={"business_id": "abc"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "business_id", "message": "business_id must be an integer"}]


def test_month_window_is_one_calendar_month():
    assert _month_before(datetime(2024, 5, 15, tzinfo=timezone.utc)) == datetime(2024, 4, 15, tzinfo=timezone.utc)
    assert _month_before(datetime(2024, 1, 10, tzinfo=timezone.utc)) == datetime(2023, 12, 10, tzinfo=timezone.utc)
    assert _month_before(datetime(2024, 3, 31, tzinfo=timezone.utc)) == datetime(2024, 2, 29, tzinfo=timezone.utc)


def test_last_signups_capped_at_twenty(headers):
    client = TestClient(app)
    for i in range(22):
        client.post("/clients", json={"full_name": f"Lead {i}"})
    data = client.get("/dashboard/metrics", headers=headers).json()
    assert data["totalClients"] == 22
    assert len(data["lastSignups"]) == 20


def test_timeline_newest_first(headers):
    client = TestClient(app)
    lead_id = client.post("/clients", json={"full_name": "Timeline"}).json()["client"]["id"]
    client.put(f"/clients/{lead_id}", json={"status": "contacted"}, headers=headers)

    response = client.get(f"/dashboard/client/{lead_id}/timeline", headers=headers)
    assert response.status_code == 200
    events = response.json()
    assert [e["event_type"] for e in events] == ["updated", "signup"]
    assert events[0]["payload"] == {"updated_fields": ["status"]}


def test_dashboard_requires_session():
    client = TestClient(app)
    assert client.get("/dashboard/metrics").status_code == 401
    assert client.get("/dashboard/client/1/timeline").status_code == 401
