from __future__ import annotations

import os
from collections.abc import Callable, Generator

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("SESSION_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from vom_admin.auth.deps import get_current_user
from vom_admin.auth.security import hash_password
from vom_admin.core.db import Base, get_db
from vom_admin.main import app
from vom_admin.models.member import Member
from vom_admin.services.sessions import SessionUser

SQLALCHEMY_TEST_URL = "sqlite+pysqlite:///:memory:"
engine = create_engine(SQLALCHEMY_TEST_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

DEFAULT_PASSWORD = "Vom-Admin-2024!"


def override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def authorize(client: TestClient):
    def _apply(member: Member):
        user = SessionUser.from_member(member)
        app.dependency_overrides[get_current_user] = lambda: user

    yield _apply
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture()
def login(client: TestClient) -> Callable[[Member], str]:
    def _login(member: Member, password: str = DEFAULT_PASSWORD) -> str:
        response = client.post("/auth/login", json={"email": member.email, "password": password})
        assert response.status_code == 200, response.text
        return response.cookies["session"]

    return _login


@pytest.fixture()
def make_member(db_session: Session) -> Callable[..., Member]:
    counter = {"value": 0}

    def _make(
        role: str = "user",
        *,
        first_name: str | None = None,
        last_name: str = "Member",
        email: str | None = None,
        password: str | None = DEFAULT_PASSWORD,
        status: str = "active",
    ) -> Member:
        counter["value"] += 1
        first = first_name or role.replace("_", " ").title().replace(" ", "")
        member = Member(
            uid=f"uid-{role}-{counter['value']}",
            email=email or f"{role}{counter['value']}@example.com",
            first_name=first,
            last_name=last_name,
            hashed_password=hash_password(password) if password else None,
            role=role,
            status=status,
        )
        db_session.add(member)
        db_session.commit()
        db_session.refresh(member)
        return member

    return _make


@pytest.fixture()
def super_admin(make_member) -> Member:
    return make_member("super_admin", first_name="Grace")


@pytest.fixture()
def admin(make_member) -> Member:
    return make_member("admin", first_name="Daniel")


@pytest.fixture()
def programme_user(make_member) -> Member:
    return make_member("programme", first_name="Esther")


@pytest.fixture()
def secretariat_user(make_member) -> Member:
    return make_member("secretariat", first_name="Ruth")


@pytest.fixture()
def regular_user(make_member) -> Member:
    return make_member("user", first_name="Samuel")
