"""Pytest fixtures: 메모리 SQLite + 가짜 인증 서비스."""
import os
from typing import Optional
from uuid import uuid4

# app import 전에 설정: 모듈 engine 이 실제 DB 를 가리키지 않도록
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.deps import get_admin_client, get_db, get_identity_client, get_optional_identity_client
from app.main import app
from app.schemas.identity import Identity
from app.services.identity import IdentityProviderError

SCHOOL = "Oak Elementary"

class FakeIdentityProvider:
    """IdentityClient / AdminIdentityClient 와 같은 인터페이스."""

    def __init__(self):
        self.users: dict[str, dict] = {}
        self.tokens: dict[str, str] = {}
        self.passwords: dict[str, str] = {}
        self.calls: list[tuple] = []
        self.fail_admin = False

    def add_user(self, email: str, token: Optional[str] = None, **metadata) -> str:
        uid = str(uuid4())
        self.users[uid] = {
            "id": uid,
            "email": email,
            "created_at": "2026-03-02T09:00:00Z",
            "user_metadata": metadata,
        }
        if token:
            self.tokens[token] = uid
        return uid

    def _admin_call(self, name: str, *args):
        self.calls.append((name, *args))
        if self.fail_admin:
            raise IdentityProviderError(f"{name}: 503 upstream unavailable", 503)

    # --- IdentityClient ---
    def get_user(self, token: str) -> Optional[Identity]:
        self.calls.append(("get_user", token))
        uid = self.tokens.get(token)
        return Identity.model_validate(self.users[uid]) if uid else None

    def check_session(self) -> bool:
        self.calls.append(("check_session",))
        return True

    # --- AdminIdentityClient ---
    def list_users(self, page: int = 1, per_page: int = 1000) -> list[Identity]:
        self._admin_call("list_users", page, per_page)
        rows = list(self.users.values())[(page - 1) * per_page: page * per_page]
        return [Identity.model_validate(u) for u in rows]

    def get_user_by_id(self, user_id: str) -> Optional[Identity]:
        self._admin_call("get_user_by_id", user_id)
        u = self.users.get(user_id)
        return Identity.model_validate(u) if u else None

    def update_user_by_id(self, user_id: str, *, user_metadata=None, password=None) -> Identity:
        self._admin_call("update_user_by_id", user_id)
        if user_metadata is not None:
            self.users[user_id]["user_metadata"] = user_metadata
        if password is not None:
            self.passwords[user_id] = password
        return Identity.model_validate(self.users[user_id])

    def writes(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "update_user_by_id"]

@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    engine.dispose()

@pytest.fixture
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()

@pytest.fixture
def idp():
    p = FakeIdentityProvider()
    p.admin_id = p.add_user("admin@oak.es.kr", token="admin-token",
                            role="admin", schoolName=SCHOOL, name="김관리")
    p.add_user("admin2@oak.es.kr", role="admin", schoolName=f"  {SCHOOL} ", name="이관리")
    p.teacher_id = p.add_user("teacher@oak.es.kr", token="teacher-token",
                              role="teacher", schoolName=SCHOOL, name="박교사", gradeClass="3-2")
    p.other_teacher_id = p.add_user("teacher@pine.es.kr", token="pine-teacher-token",
                                    role="teacher", schoolName="Pine Middle", name="최교사")
    p.other_admin_id = p.add_user("admin@pine.es.kr", token="pine-admin-token",
                                  role="admin", schoolName="Pine Middle", name="정관리")
    p.new_id = p.add_user("new@oak.es.kr", token="new-token")
    return p

@pytest.fixture
def client(idp, session_factory):
    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_identity_client] = lambda: idp
    app.dependency_overrides[get_admin_client] = lambda: idp
    app.dependency_overrides[get_optional_identity_client] = lambda: idp
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()

def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
