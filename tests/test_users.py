from datetime import datetime, timezone

from tests.conftest import auth, seed_user

NEW_USER = {
    "uid": "reader-uid",
    "email": "reader@example.com",
    "name": "Rita Reader",
    "photoURL": "https://example.com/rita.png",
}


# --- Upsert on login ---

def test_upsert_creates_user_with_default_role(client, store):
    r = client.post("/users", json=NEW_USER)
    assert r.status_code == 201
    assert r.json()["created"] is True

    stored = store.raw("users", "reader-uid")
    assert stored["role"] == "user"
    assert stored["premiumTaken"] is None
    assert stored["createdAt"] is not None
    assert stored["photoURL"] == NEW_USER["photoURL"]


def test_upsert_existing_user_keeps_role_and_created_at(client, store):
    created_at = datetime(2023, 3, 1, tzinfo=timezone.utc)
    seed_user(store, "reader-uid", role="admin", created_at=created_at)

    r = client.post("/users", json={**NEW_USER, "name": "Rita R.", "email": "rita@example.com"})
    assert r.status_code == 200
    assert r.json()["created"] is False

    stored = store.raw("users", "reader-uid")
    assert stored["name"] == "Rita R."
    assert stored["email"] == "rita@example.com"
    assert stored["role"] == "admin"
    assert stored["createdAt"] == created_at
    assert len(store.collections["users"]) == 1


def test_upsert_requires_uid_and_email(client, store):
    assert client.post("/users", json={"email": "a@example.com"}).status_code == 400
    assert client.post("/users", json={"uid": "abc"}).status_code == 400
    assert store.collections.get("users", {}) == {}


# --- Lookups ---

def test_get_user_by_email(client, store):
    seed_user(store, "writer-uid", email="writer@example.com")
    r = client.get("/users", params={"email": "writer@example.com"}, headers=auth("writer-token"))
    assert r.status_code == 200
    assert r.json()["uid"] == "writer-uid"


def test_get_user_by_unknown_email(client, store):
    r = client.get("/users", params={"email": "ghost@example.com"}, headers=auth("writer-token"))
    assert r.status_code == 404


def test_list_users_requires_admin(client, store):
    seed_user(store, "writer-uid")
    r = client.get("/users", headers=auth("writer-token"))
    assert r.status_code == 403


def test_admin_lists_users_newest_first(client, store, admin):
    seed_user(store, "old-uid", created_at=datetime(2022, 1, 1, tzinfo=timezone.utc))
    seed_user(store, "new-uid", created_at=datetime(2025, 1, 1, tzinfo=timezone.utc))

    r = client.get("/users", headers=auth("admin-token"))
    assert r.status_code == 200
    assert [u["uid"] for u in r.json()] == ["new-uid", "admin-uid", "old-uid"]


def test_get_user_by_uid(client, store):
    seed_user(store, "other-uid", name="Otto")
    r = client.get("/users/other-uid", headers=auth("writer-token"))
    assert r.status_code == 200
    assert r.json()["name"] == "Otto"

    assert client.get("/users/missing-uid", headers=auth("writer-token")).status_code == 404
    assert client.get("/users/other-uid").status_code == 401


# --- Roles ---

def test_update_role_requires_admin(client, store):
    seed_user(store, "writer-uid")
    seed_user(store, "other-uid")
    r = client.put("/users/other-uid/role", json={"role": "admin"}, headers=auth("writer-token"))
    assert r.status_code == 403
    assert store.raw("users", "other-uid")["role"] == "user"


def test_admin_updates_role(client, store, admin):
    seed_user(store, "other-uid")
    r = client.put("/users/other-uid/role", json={"role": "admin"}, headers=auth("admin-token"))
    assert r.status_code == 200
    assert r.json()["role"] == "admin"
    assert store.raw("users", "other-uid")["role"] == "admin"


def test_update_role_rejects_unknown_role(client, store, admin):
    seed_user(store, "other-uid")
    r = client.put("/users/other-uid/role", json={"role": "editor"}, headers=auth("admin-token"))
    assert r.status_code == 400
    assert store.raw("users", "other-uid")["role"] == "user"


def test_update_role_unknown_user(client, store, admin):
    r = client.put("/users/ghost-uid/role", json={"role": "user"}, headers=auth("admin-token"))
    assert r.status_code == 404


# --- Deletion ---

def test_admin_deletes_user(client, store, admin):
    seed_user(store, "other-uid", email="other@example.com", name="Otto")
    r = client.delete("/users/other-uid", headers=auth("admin-token"))
    assert r.status_code == 200
    assert r.json()["deletedUser"] == {"uid": "other-uid", "name": "Otto", "email": "other@example.com"}
    assert store.raw("users", "other-uid") is None


def test_admin_cannot_delete_self(client, store, admin):
    r = client.delete("/users/admin-uid", headers=auth("admin-token"))
    assert r.status_code == 403
    assert r.json()["message"] == "You cannot delete your own account"
    assert store.raw("users", "admin-uid") is not None


def test_delete_unknown_user(client, store, admin):
    assert client.delete("/users/ghost-uid", headers=auth("admin-token")).status_code == 404


def test_delete_requires_admin(client, store):
    seed_user(store, "writer-uid")
    seed_user(store, "other-uid")
    r = client.delete("/users/other-uid", headers=auth("writer-token"))
    assert r.status_code == 403
    assert store.raw("users", "other-uid") is not None
