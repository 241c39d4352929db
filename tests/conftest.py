import copy
import secrets
import string
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from newsdesk.exceptions import Internal, InvalidCredential
from newsdesk.main import app
from newsdesk.services.identity import VerifiedIdentity
from newsdesk.services.store import merge_changes

_ALPHABET = string.ascii_letters + string.digits


def new_doc_id() -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(20))


class InMemoryStore:
    """Stand-in for FirestoreStore keeping collections in dicts"""

    def __init__(self):
        self.collections = {}
        self.fail_increment = False

    def _coll(self, name):
        return self.collections.setdefault(name, {})

    def put(self, collection, data, doc_id=None):
        doc_id = doc_id or new_doc_id()
        self._coll(collection)[doc_id] = copy.deepcopy(data)
        return doc_id

    def raw(self, collection, doc_id):
        return self._coll(collection).get(doc_id)

    @staticmethod
    def _matches(data, filters):
        for field, op, value in filters or []:
            current = data.get(field)
            if op == "==":
                if current != value:
                    return False
            elif op == "in":
                if current not in value:
                    return False
            else:
                raise ValueError(f"unsupported op {op}")
        return True

    async def get(self, collection, doc_id):
        data = self._coll(collection).get(doc_id)
        return copy.deepcopy(data) if data is not None else None

    async def find(self, collection, filters=None, order_by=None, descending=False,
                   limit=None, select=None):
        docs = [
            (doc_id, copy.deepcopy(data))
            for doc_id, data in self._coll(collection).items()
            if self._matches(data, filters)
        ]
        if order_by:
            docs = [d for d in docs if d[1].get(order_by) is not None]
            docs.sort(key=lambda d: d[1][order_by], reverse=descending)
        if limit:
            docs = docs[:limit]
        if select:
            docs = [(doc_id, {k: v for k, v in data.items() if k in select}) for doc_id, data in docs]
        return docs

    async def field_values(self, collection, field, filters=None):
        docs = await self.find(collection, filters=filters, select=[field])
        return [data.get(field) for _, data in docs if field in data]

    async def insert(self, collection, data):
        return self.put(collection, data)

    async def create(self, collection, doc_id, data):
        if doc_id in self._coll(collection):
            return False
        self.put(collection, data, doc_id)
        return True

    async def update(self, collection, doc_id, changes):
        coll = self._coll(collection)
        if doc_id not in coll:
            return False
        coll[doc_id].update(copy.deepcopy(changes))
        return True

    async def increment(self, collection, doc_id, field, amount=1):
        if self.fail_increment:
            raise Internal("increment failed")
        coll = self._coll(collection)
        if doc_id not in coll:
            return False
        coll[doc_id][field] = (coll[doc_id].get(field) or 0) + amount
        return True

    async def guarded_update(self, collection, doc_id, guard, changes):
        current = await self.get(collection, doc_id)
        guard(current)
        updated = merge_changes(current, changes)
        self._coll(collection)[doc_id] = copy.deepcopy(updated)
        return updated

    async def guarded_delete(self, collection, doc_id, guard):
        current = await self.get(collection, doc_id)
        guard(current)
        self._coll(collection).pop(doc_id)
        return current


class FakeVerifier:
    def __init__(self):
        self.tokens = {}
        self.calls = 0

    def add(self, token, uid, email=None, name=None):
        self.tokens[token] = VerifiedIdentity(uid=uid, email=email, name=name)

    async def verify(self, token):
        self.calls += 1
        if token not in self.tokens:
            raise InvalidCredential()
        return self.tokens[token]


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def verifier():
    v = FakeVerifier()
    v.add("writer-token", "writer-uid", "writer@example.com", "Wendy Writer")
    v.add("other-token", "other-uid", "other@example.com", "Otto Other")
    v.add("admin-token", "admin-uid", "admin@example.com", "Ada Admin")
    return v


@pytest.fixture
def client(store, verifier):
    app.state.store = store
    app.state.identity_verifier = verifier
    yield TestClient(app)
    del app.state.store
    del app.state.identity_verifier
    app.dependency_overrides = {}


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def seed_user(store, uid, role="user", email=None, name=None, created_at=None):
    store.put(
        "users",
        {
            "uid": uid,
            "name": name or uid,
            "email": email or f"{uid}@example.com",
            "photoURL": None,
            "role": role,
            "premiumTaken": None,
            "createdAt": created_at or datetime(2024, 1, 1, tzinfo=timezone.utc),
        },
        doc_id=uid,
    )


def seed_article(store, status="approved", author_id="writer-uid", views=0,
                 days_ago=0, **fields):
    data = {
        "title": "Default headline",
        "image": "https://example.com/a.jpg",
        "publisher": "Daily Ledger",
        "tags": ["news"],
        "description": "Body",
        "status": status,
        "author": "Wendy Writer",
        "authorId": author_id,
        "createdAt": datetime(2024, 6, 1, tzinfo=timezone.utc) - timedelta(days=days_ago),
        "views": views,
        "isPremium": False,
    }
    data.update(fields)
    return store.put("articles", data)


@pytest.fixture
def admin(store):
    seed_user(store, "admin-uid", role="admin", email="admin@example.com", name="Ada Admin")
    return "admin-uid"
