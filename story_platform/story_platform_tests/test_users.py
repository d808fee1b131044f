from story_platform.story_platform.story_service.dependencies import get_credential_store
from story_platform.story_platform.story_service.errors import StoreUnavailable
from story_platform.story_platform.story_service.main import app
from story_platform.story_platform.story_service.models import Story
from story_platform.story_platform.story_service.store import SQLAlchemyStoryStore


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def test_get_profile_excludes_private_fields(client, register_user):
    user = register_user(name="Alice", bio="writer", avatar="a.png")
    resp = client.get(f"/users/{user['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"id": user["id"], "name": "Alice", "bio": "writer", "avatar": "a.png"}


def test_get_profile_unknown_user(client):
    resp = client.get("/users/000000000000000000000000")
    assert resp.status_code == 404
    assert resp.json() == {"message": "User not found"}


def test_update_own_profile(client, register_user, login_token):
    user = register_user()
    token = login_token()

    resp = client.put(
        f"/users/{user['id']}",
        json={"name": "Alice L.", "bio": "updated"},
        headers=auth_header(token),
    )
    assert resp.status_code == 200
    assert resp.json() == {"message": "Updated user successfully."}

    profile = client.get(f"/users/{user['id']}").json()
    assert profile["name"] == "Alice L."
    assert profile["bio"] == "updated"


def test_update_requires_token(client, register_user):
    user = register_user()
    resp = client.put(f"/users/{user['id']}", json={"name": "x"})
    assert resp.status_code == 401


def test_update_rejects_invalid_token(client, register_user):
    user = register_user()
    resp = client.put(f"/users/{user['id']}", json={"name": "x"}, headers=auth_header("not.a.token"))
    assert resp.status_code == 401


def test_update_other_user_forbidden(client, register_user, login_token):
    register_user()
    other = register_user(email="b@x.com", username="bob")
    token = login_token()
    resp = client.put(f"/users/{other['id']}", json={"name": "x"}, headers=auth_header(token))
    assert resp.status_code == 403


def test_update_cannot_change_password(client, register_user, login_token):
    user = register_user()
    token = login_token()
    resp = client.put(f"/users/{user['id']}", json={"password": "new"}, headers=auth_header(token))
    assert resp.status_code == 422


def test_update_email_conflict(client, register_user, login_token):
    user = register_user()
    register_user(email="b@x.com", username="bob")
    token = login_token()
    resp = client.put(f"/users/{user['id']}", json={"email": "b@x.com"}, headers=auth_header(token))
    assert resp.status_code == 409


def test_delete_user_cascades_stories(client, session_factory, register_user, login_token):
    user = register_user()
    other = register_user(email="b@x.com", username="bob")
    token = login_token()

    db = session_factory()
    try:
        db.add_all([
            Story(author_id=user["id"], title="mine 1"),
            Story(author_id=user["id"], title="mine 2"),
            Story(author_id=other["id"], title="theirs"),
        ])
        db.commit()
    finally:
        db.close()

    resp = client.delete(f"/users/{user['id']}", headers=auth_header(token))
    assert resp.status_code == 200
    assert resp.json() == {"message": "Removed user successfully."}

    assert client.get(f"/users/{user['id']}").status_code == 404

    db = session_factory()
    try:
        titles = [s.title for s in db.query(Story).all()]
    finally:
        db.close()
    assert titles == ["theirs"]


def test_delete_user_twice(client, register_user, login_token):
    user = register_user()
    token = login_token()
    assert client.delete(f"/users/{user['id']}", headers=auth_header(token)).status_code == 200
    # token remains valid until expiry, the user is gone
    assert client.delete(f"/users/{user['id']}", headers=auth_header(token)).status_code == 404


def test_search_by_username_pattern(client, register_user):
    register_user(email="a@x.com", username="alice")
    register_user(email="m@x.com", username="malice")
    register_user(email="b@x.com", username="bob")

    resp = client.get("/users/search/lice")
    assert resp.status_code == 200
    results = resp.json()
    assert [r["name"] for r in results] == ["", ""]
    assert all(set(r) == {"id", "name", "bio", "avatar"} for r in results)
    assert len(results) == 2

    assert client.get("/users/search/zzz").json() == []


def test_search_invalid_pattern(client):
    resp = client.get("/users/search/(unclosed")
    assert resp.status_code == 422
    assert resp.json() == {"message": "Invalid search pattern."}


def test_store_outage_returns_generic_message(client):
    class DownStore:
        def find_by_id(self, _user_id):
            raise StoreUnavailable()

    app.dependency_overrides[get_credential_store] = lambda: DownStore()
    resp = client.get("/users/000000000000000000000000")
    assert resp.status_code == 503
    assert resp.json() == {"message": "Something went wrong. Please try again later."}


def test_failed_story_cascade_keeps_user_and_stories(client, session_factory, register_user, login_token, monkeypatch):
    user = register_user()
    token = login_token()

    db = session_factory()
    try:
        db.add(Story(author_id=user["id"], title="mine"))
        db.commit()
    finally:
        db.close()

    def broken_delete_by_author(self, author_id):
        raise StoreUnavailable()

    monkeypatch.setattr(SQLAlchemyStoryStore, "delete_by_author", broken_delete_by_author)
    resp = client.delete(f"/users/{user['id']}", headers=auth_header(token))
    assert resp.status_code == 503

    # nothing was deleted, so a retry can still succeed
    assert client.get(f"/users/{user['id']}").status_code == 200
    db = session_factory()
    try:
        assert [s.title for s in db.query(Story).all()] == ["mine"]
    finally:
        db.close()

    monkeypatch.undo()
    assert client.delete(f"/users/{user['id']}", headers=auth_header(token)).status_code == 200
    assert client.get(f"/users/{user['id']}").status_code == 404


def test_search_pattern_rejected_by_database_returns_503(client):
    # compiles with re, but the database regex engine refuses it
    class PosixStore:
        def find_by_username_pattern(self, _pattern):
            raise StoreUnavailable()

    app.dependency_overrides[get_credential_store] = lambda: PosixStore()
    resp = client.get("/users/search/(?i)alice")
    assert resp.status_code == 503
    assert resp.json() == {"message": "Something went wrong. Please try again later."}
