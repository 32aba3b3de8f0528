"""API tests: items, alerts, analytics, households and users through FastAPI, plus the app lifespan."""

import pytest
from fastapi.testclient import TestClient

import app.main as main_module
from app.core.constants import ALERT_SWEEP_JOB_ID
from app.db.session import get_db
from app.main import app
from app.models.freshness_rule import FreshnessRule


@pytest.fixture
def client(session_factory, db):
    """TestClient on the test database. Lifespan (scheduler) is not started."""

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def member(make_household):
    household, users = make_household(members=(("alice", True, True), ("bob", True, True)))
    return {"household": household, "headers": {"X-User-Id": str(users[0].id)}, "users": users}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_requires_known_user(client, member):
    assert client.get("/api/items").status_code == 401
    assert client.get("/api/items", headers={"X-User-Id": "abc"}).status_code == 401
    assert client.get("/api/items", headers={"X-User-Id": "9999"}).status_code == 401


def test_user_without_household_is_forbidden(client, db):
    from app.models.user import User

    user = User(email="loner@stillgood.local", name="Loner")
    db.add(user)
    db.commit()
    response = client.get("/api/items", headers={"X-User-Id": str(user.id)})
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "NO_HOUSEHOLD"


def test_item_lifecycle(client, member):
    headers = member["headers"]
    created = client.post(
        "/api/items",
        json={"name": "Milk", "category": "Dairy", "quantity": "1 L"},
        headers=headers,
    )
    assert created.status_code == 201
    item = created.json()["item"]
    assert item["category"] == "dairy"
    assert item["status"] == "FRESH"
    assert item["days_remaining"] == 7
    assert item["opened"] is False

    listed = client.get("/api/items", headers=headers).json()["items"]
    assert [i["id"] for i in listed] == [item["id"]]

    opened = client.post(f"/api/items/{item['id']}/open", headers=headers)
    assert opened.status_code == 200
    assert opened.json()["item"]["opened"] is True
    assert opened.json()["item"]["days_remaining"] == 4

    patched = client.patch(f"/api/items/{item['id']}", json={"opened": None}, headers=headers)
    assert patched.status_code == 200
    assert patched.json()["item"]["opened"] is None
    assert patched.json()["item"]["confidence"] == 0.75

    consumed = client.post(f"/api/items/{item['id']}/consume", headers=headers)
    assert consumed.status_code == 200
    assert consumed.json()["item"]["archived_at"] is not None

    again = client.post(f"/api/items/{item['id']}/consume", headers=headers)
    assert again.status_code == 400
    assert again.json()["detail"]["code"] == "ITEM_ARCHIVED"

    assert client.get("/api/items", headers=headers).json()["items"] == []
    archived = client.get("/api/items", params={"status": "archived"}, headers=headers).json()["items"]
    assert [i["id"] for i in archived] == [item["id"]]

    assert client.delete(f"/api/items/{item['id']}", headers=headers).status_code == 204
    assert client.delete(f"/api/items/{item['id']}", headers=headers).status_code == 404


def test_create_validation(client, member):
    headers = member["headers"]
    bad = [
        {"name": "", "category": "dairy", "quantity": "1"},
        {"name": "Milk", "category": "d", "quantity": "1"},
        {"name": "Milk", "category": "dairy", "quantity": "1", "custom_fresh_days": 0},
        {"name": "Milk", "category": "dairy", "quantity": "1", "custom_fresh_days": 91},
    ]
    for body in bad:
        assert client.post("/api/items", json=body, headers=headers).status_code == 422


def test_empty_patch_is_rejected(client, member):
    headers = member["headers"]
    item = client.post("/api/items", json={"name": "Milk", "category": "dairy", "quantity": "1"}, headers=headers)
    response = client.patch(f"/api/items/{item.json()['item']['id']}", json={}, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "EMPTY_UPDATE"


def test_alerts_run_list_and_read(client, member):
    headers = member["headers"]
    client.post(
        "/api/items",
        json={"name": "Ham", "category": "meat", "quantity": "200 g", "date_added": "2020-01-01T00:00:00Z"},
        headers=headers,
    )
    run = client.post("/api/alerts/run", headers=headers)
    assert run.status_code == 200
    assert run.json()["result"] == {"scanned_items": 1, "alerts_created": 2, "failed_items": 0}

    alerts = client.get("/api/alerts", headers=headers).json()["alerts"]
    assert len(alerts) == 1
    assert alerts[0]["type"] == "EXPIRED"
    assert alerts[0]["message"] == "Ham has expired."
    assert alerts[0]["item"]["status"] == "EXPIRED"

    read = client.post(f"/api/alerts/{alerts[0]['id']}/read", headers=headers)
    assert read.status_code == 200
    assert read.json()["alert"]["read"] is True

    bob_headers = {"X-User-Id": str(member["users"][1].id)}
    assert client.post(f"/api/alerts/{alerts[0]['id']}/read", headers=bob_headers).status_code == 404

    rerun = client.post("/api/alerts/run", headers=headers).json()["result"]
    assert rerun["alerts_created"] == 1


def test_analytics_and_rules(client, member):
    headers = member["headers"]
    client.post("/api/items", json={"name": "Milk", "category": "dairy", "quantity": "1"}, headers=headers)
    summary = client.get("/api/analytics/summary", headers=headers).json()
    assert summary["items_added_this_week"] == 1
    events = client.get("/api/analytics/events", params={"range": "month"}, headers=headers).json()
    assert events["range"] == "month"
    assert client.get("/api/analytics/events", params={"range": "year"}, headers=headers).status_code == 422

    rules = client.get("/api/rules").json()["rules"]
    assert {r["category"] for r in rules} == {"dairy", "produce", "meat", "leftovers"}


def test_household_onboarding_flow(client):
    alice = client.post("/api/users", json={"email": "Alice@Example.com", "name": "Alice"})
    assert alice.status_code == 201
    assert alice.json()["user"]["email"] == "alice@example.com"
    alice_headers = {"X-User-Id": str(alice.json()["user"]["id"])}
    assert client.post("/api/users", json={"email": "alice@example.com", "name": "Al"}).status_code == 409
    assert client.post("/api/users", json={"email": "not-an-email", "name": "Al"}).status_code == 422

    assert client.get("/api/households/me", headers=alice_headers).json() == {"household": None}
    assert client.get("/api/items", headers=alice_headers).status_code == 403

    created = client.post("/api/households", json={"name": "Flat"}, headers=alice_headers)
    assert created.status_code == 201
    code = created.json()["household"]["invite_code"]
    again = client.post("/api/households", json={"name": "Cabin"}, headers=alice_headers)
    assert again.json()["detail"]["code"] == "ALREADY_IN_HOUSEHOLD"

    bob = client.post("/api/users", json={"email": "bob@example.com", "name": "Bob", "prefs_email": False})
    bob_id = bob.json()["user"]["id"]
    bob_headers = {"X-User-Id": str(bob_id)}
    bad = client.post("/api/households/join", json={"invite_code": "ZZZZ99"}, headers=bob_headers)
    assert bad.status_code == 404
    assert bad.json()["detail"]["code"] == "INVALID_INVITE_CODE"
    joined = client.post("/api/households/join", json={"invite_code": code.lower()}, headers=bob_headers)
    assert joined.status_code == 201

    me = client.get("/api/users/me", headers=bob_headers).json()
    assert me["user"]["prefs_email"] is False
    assert me["household"]["role"] == "MEMBER"

    members = client.get("/api/households/members", headers=alice_headers).json()["members"]
    assert [m["role"] for m in members] == ["OWNER", "MEMBER"]

    denied = client.post("/api/households/invite", headers=bob_headers)
    assert denied.status_code == 403
    assert denied.json()["detail"]["code"] == "OWNER_REQUIRED"
    new_code = client.post("/api/households/invite", headers=alice_headers).json()["invite_code"]
    assert new_code != code

    self_removal = client.delete(f"/api/households/members/{alice.json()['user']['id']}", headers=alice_headers)
    assert self_removal.json()["detail"]["code"] == "INVALID_MEMBER_REMOVAL"
    assert client.delete(f"/api/households/members/{bob_id}", headers=alice_headers).status_code == 204
    assert client.get("/api/items", headers=bob_headers).status_code == 403


def test_update_preferences(client, member):
    headers = member["headers"]
    response = client.patch("/api/users/me/preferences", json={"prefs_in_app": False}, headers=headers)
    assert response.status_code == 200
    assert response.json()["user"]["prefs_in_app"] is False
    assert response.json()["user"]["prefs_email"] is True
    assert client.get("/api/alerts", headers=headers).json()["alerts"] == []

    empty = client.patch("/api/users/me/preferences", json={}, headers=headers)
    assert empty.status_code == 400
    assert empty.json()["detail"]["code"] == "EMPTY_UPDATE"
    assert client.patch("/api/users/me/preferences", json={"prefs_email": True}).status_code == 401


def test_lifespan_seeds_rules_and_runs_scheduler(session_factory, monkeypatch):
    monkeypatch.setattr(main_module, "SessionLocal", session_factory)
    monkeypatch.setattr(main_module.settings, "alert_sweep_enabled", True)
    monkeypatch.setattr(main_module.settings, "seed_default_rules", True)

    with TestClient(app) as client:
        scheduler = app.state.scheduler
        assert scheduler.running
        job = scheduler.get_job(ALERT_SWEEP_JOB_ID)
        assert job is not None
        assert job.max_instances == 1
        assert job.coalesce is True
        assert client.get("/health").json()["alert_sweep_enabled"] is True

    assert not scheduler.running
    session = session_factory()
    try:
        assert session.query(FreshnessRule).count() == 4
    finally:
        session.close()
