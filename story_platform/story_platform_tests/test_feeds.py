from datetime import datetime, timedelta, timezone

import pytest

from story_platform.story_platform.story_service.models import Story
from story_platform.story_platform.story_service.routes import health


@pytest.fixture
def stories(session_factory):
    now = datetime.now(timezone.utc)
    db = session_factory()
    try:
        rows = [
            Story(author_id="a" * 24, title=f"story {i}", body="...", created_at=now - timedelta(hours=i))
            for i in range(3)
        ]
        db.add_all(rows)
        db.commit()
        return [row.id for row in rows]
    finally:
        db.close()


@pytest.fixture
def token(register_user, login_token):
    register_user()
    return login_token()


def test_feeds_require_token(client, stories):
    assert client.get("/feeds").status_code == 401
    assert client.get(f"/feeds/{stories[0]}").status_code == 401


def test_list_feeds_newest_first(client, stories, token):
    resp = client.get("/feeds", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert [s["title"] for s in resp.json()] == ["story 0", "story 1", "story 2"]


def test_list_feeds_pagination(client, stories, token):
    resp = client.get("/feeds?limit=1&offset=1", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert [s["title"] for s in resp.json()] == ["story 1"]


def test_get_feed_by_id(client, stories, token):
    resp = client.get(f"/feeds/{stories[2]}", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["title"] == "story 2"
    assert resp.json()["author_id"] == "a" * 24


def test_get_feed_not_found(client, token):
    resp = client.get("/feeds/000000000000000000000000", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 404
    assert resp.json() == {"message": "Feed not found"}


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_ready_when_tables_reachable(client, monkeypatch):
    monkeypatch.setattr(health, "check_db_connection", lambda: True)
    resp = client.get("/ready")
    assert resp.status_code == 200
    assert resp.json()["database"] == "connected"


def test_not_ready_when_database_down(client, monkeypatch):
    monkeypatch.setattr(health, "check_db_connection", lambda: False)
    resp = client.get("/ready")
    assert resp.status_code == 503
    assert resp.json()["detail"]["status"] == "not_ready"
