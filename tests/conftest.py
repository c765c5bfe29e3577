"""Pytest configuration and fixtures for the courses/activities API tests."""

import copy
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo import ReturnDocument

from app.auth.auth0_guard import auth0_guard
from app.auth.authorizer import IdentityLookupError
from app.auth.permissions import get_authorizer
from app.database import get_db
from app.main import app


# ============================================================================
# In-memory MongoDB double
# ============================================================================


class InsertOneResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeCursor:
    def __init__(self, docs: List[dict]):
        self._docs = docs

    async def to_list(self, length: Optional[int] = None) -> List[dict]:
        return self._docs if length is None else self._docs[:length]


def _matches(doc: dict, query: Optional[dict]) -> bool:
    for key, expected in (query or {}).items():
        value = doc.get(key)
        if isinstance(value, list) and not isinstance(expected, list):
            if expected not in value:
                return False
        elif value != expected:
            return False
    return True


class FakeCollection:
    """Subset of the Motor collection API used by the services."""

    def __init__(self):
        self.docs: List[dict] = []
        self.writes = 0
        self.indexes: List[Any] = []

    def _find(self, query) -> Optional[dict]:
        for doc in self.docs:
            if _matches(doc, query):
                return doc
        return None

    async def insert_one(self, document: dict) -> InsertOneResult:
        stored = copy.deepcopy(document)
        stored.setdefault("_id", ObjectId())
        self.docs.append(stored)
        self.writes += 1
        return InsertOneResult(stored["_id"])

    def find(self, query: Optional[dict] = None) -> FakeCursor:
        return FakeCursor([copy.deepcopy(doc) for doc in self.docs if _matches(doc, query)])

    async def find_one(self, query: dict) -> Optional[dict]:
        return copy.deepcopy(self._find(query))

    async def update_one(self, query: dict, update: dict):
        doc = self._find(query)
        if doc is not None:
            doc.update(copy.deepcopy(update["$set"]))
            self.writes += 1

    async def find_one_and_update(self, query: dict, update: dict, return_document=ReturnDocument.BEFORE):
        doc = self._find(query)
        if doc is None:
            return None
        before = copy.deepcopy(doc)
        doc.update(copy.deepcopy(update["$set"]))
        self.writes += 1
        return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before

    async def find_one_and_delete(self, query: dict) -> Optional[dict]:
        doc = self._find(query)
        if doc is None:
            return None
        self.docs.remove(doc)
        self.writes += 1
        return doc

    async def create_index(self, keys, **kwargs):
        self.indexes.append(keys)
        return str(keys)


class FakeDatabase:
    def __init__(self):
        self.activities = FakeCollection()
        self.courses = FakeCollection()

    async def command(self, name: str):
        return {"ok": 1.0}


# ============================================================================
# Identity provider double
# ============================================================================


class FakeAuthorizer:
    """Maps tokens to users and user ids to Auth0 role names."""

    def __init__(self, users: Dict[str, dict], roles: Dict[str, List[str]]):
        self.users = users
        self.roles = roles
        self.calls: List[str] = []

    async def resolve_identity(self, token: str) -> dict:
        self.calls.append("userinfo")
        if token not in self.users:
            raise IdentityLookupError("invalid token")
        return self.users[token]

    async def has_role(self, user_id: str, role: str) -> bool:
        self.calls.append("roles")
        return role in self.roles.get(user_id, [])


ADMIN_TOKEN = "admin-token"
STUDENT_TOKEN = "student-token"


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def fake_authorizer() -> FakeAuthorizer:
    return FakeAuthorizer(
        users={
            ADMIN_TOKEN: {"sub": "auth0|admin", "name": "Admin"},
            STUDENT_TOKEN: {"sub": "auth0|student", "name": "Student"},
        },
        roles={"auth0|admin": ["admin"], "auth0|student": ["student"]},
    )


@pytest.fixture
def client(fake_db: FakeDatabase, fake_authorizer: FakeAuthorizer):
    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = lambda: fake_db
    app.dependency_overrides[auth0_guard] = lambda: {"sub": "guard"}
    app.dependency_overrides[get_authorizer] = lambda: fake_authorizer
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def student_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {STUDENT_TOKEN}"}
