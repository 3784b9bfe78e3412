from __future__ import annotations

import pytest

from vom_admin.auth.security import verify_password
from vom_admin.scripts.create_admin import grant_admin_role


def test_creates_new_super_admin(db_session):
    member = grant_admin_role(
        db_session,
        email="Pastor@VOMchurch.org",
        role="super_admin",
        password="Initial-Pass-1",
        first_name="Grace",
        last_name="Okoro",
    )
    assert member.email == "pastor@vomchurch.org"
    assert member.role == "super_admin"
    assert member.status == "active"
    assert member.uid
    assert verify_password("Initial-Pass-1", member.hashed_password)


def test_promotes_existing_member_without_touching_password(db_session, regular_user):
    previous_hash = regular_user.hashed_password
    member = grant_admin_role(db_session, email=regular_user.email.upper(), role="admin")
    assert member.id == regular_user.id
    assert member.role == "admin"
    assert member.hashed_password == previous_hash


def test_reactivates_inactive_account(db_session, make_member):
    inactive = make_member("user", status="inactive")
    member = grant_admin_role(db_session, email=inactive.email, role="admin")
    assert member.status == "active"


def test_rejects_non_admin_roles(db_session):
    with pytest.raises(ValueError, match="Invalid role"):
        grant_admin_role(db_session, email="someone@vomchurch.org", role="programme", password="x" * 12)


def test_missing_account_requires_password(db_session):
    with pytest.raises(ValueError, match="No user found"):
        grant_admin_role(db_session, email="nobody@vomchurch.org", role="admin")


def test_bootstrapped_admin_can_log_in(client, db_session):
    grant_admin_role(db_session, email="first@vomchurch.org", role="super_admin", password="Initial-Pass-1")
    response = client.post("/auth/login", json={"email": "first@vomchurch.org", "password": "Initial-Pass-1"})
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "super_admin"
