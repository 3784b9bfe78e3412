from __future__ import annotations

import csv
import io

from vom_admin.models.member import Member


def test_programme_can_list_but_not_export(client, programme_user, regular_user, login):
    login(programme_user)
    listing = client.get("/members")
    assert listing.status_code == 200
    assert listing.json()["total"] == 2

    export = client.get("/members/export.csv")
    assert export.status_code == 403
    body = export.json()
    assert body["code"] == "permission_denied"
    assert body["detail"] == "Permission denied: programme cannot export members"
    assert body["resource"] == "members"
    assert body["action"] == "export"


def test_admin_exports_members_as_csv(client, admin, make_member, login):
    make_member("user", first_name="Abigail", last_name="Adeyemi", email="abigail@vomchurch.org")
    login(admin)
    response = client.get("/members/export.csv")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "members_export.csv" in response.headers["content-disposition"]

    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0] == ["Serial", "First Name", "Last Name", "Email", "Phone", "Status", "Role", "Member Since"]
    assert rows[1][:4] == ["1", "Abigail", "Adeyemi", "abigail@vomchurch.org"]
    assert len(rows) == 3


def test_secretariat_can_edit_but_not_create(client, secretariat_user, regular_user, login):
    login(secretariat_user)
    updated = client.patch(f"/members/{regular_user.id}", json={"phone": "+234 800 000 0000"})
    assert updated.status_code == 200
    assert updated.json()["phone"] == "+234 800 000 0000"

    created = client.post(
        "/members",
        json={"first_name": "Tobi", "last_name": "Ade", "email": "tobi@vomchurch.org"},
    )
    assert created.status_code == 403
    assert created.json()["action"] == "create"


def test_secretariat_cannot_delete(client, secretariat_user, regular_user, login):
    login(secretariat_user)
    response = client.delete(f"/members/{regular_user.id}")
    assert response.status_code == 403


def test_members_require_a_session(client):
    assert client.get("/members").status_code == 401
    assert client.get("/members/export.csv").status_code == 401


def test_regular_user_is_denied(client, regular_user, authorize):
    authorize(regular_user)
    response = client.get("/members")
    assert response.status_code == 403
    assert response.json()["role"] == "user"


def test_unrecognised_stored_role_is_treated_as_unauthenticated(client, make_member, authorize):
    authorize(make_member("deacon"))
    response = client.get("/members")
    assert response.status_code == 401
    assert response.json()["code"] == "not_authenticated"


def test_create_member_ignores_client_supplied_role(client, admin, login, db_session):
    login(admin)
    response = client.post(
        "/members",
        json={
            "first_name": "Tobi",
            "last_name": "Ade",
            "email": "Tobi@VOMchurch.org",
            "role": "super_admin",
        },
    )
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["role"] == "user"
    assert body["status"] == "active"
    assert body["email"] == "tobi@vomchurch.org"

    stored = db_session.query(Member).filter(Member.email == "tobi@vomchurch.org").one()
    assert stored.role == "user"


def test_create_member_rejects_duplicate_email(client, admin, login):
    login(admin)
    payload = {"first_name": "Tobi", "last_name": "Ade", "email": "tobi@vomchurch.org"}
    assert client.post("/members", json=payload).status_code == 201
    duplicate = client.post("/members", json={**payload, "email": "TOBI@vomchurch.org"})
    assert duplicate.status_code == 409


def test_get_member_and_missing_member(client, programme_user, regular_user, login):
    login(programme_user)
    found = client.get(f"/members/{regular_user.id}")
    assert found.status_code == 200
    assert found.json()["first_name"] == "Samuel"
    assert client.get("/members/9999").status_code == 404


def test_list_members_search_and_status_filter(client, admin, make_member, login):
    make_member("user", first_name="Abigail", last_name="Adeyemi")
    make_member("user", first_name="Moses", last_name="Okafor", status="inactive")
    login(admin)

    searched = client.get("/members", params={"q": "okafor"})
    assert [item["first_name"] for item in searched.json()["items"]] == ["Moses"]

    inactive = client.get("/members", params={"status": "inactive"})
    assert inactive.json()["total"] == 1


def test_update_rejects_unknown_status(client, admin, regular_user, login):
    login(admin)
    response = client.patch(f"/members/{regular_user.id}", json={"status": "archived"})
    assert response.status_code == 400


def test_delete_deactivates_member(client, admin, regular_user, login, db_session):
    login(admin)
    response = client.delete(f"/members/{regular_user.id}")
    assert response.status_code == 204

    db_session.expire_all()
    stored = db_session.get(Member, regular_user.id)
    assert stored is not None
    assert stored.status == "inactive"


def test_admin_cannot_deactivate_own_account(client, admin, login):
    login(admin)
    response = client.delete(f"/members/{admin.id}")
    assert response.status_code == 400


def test_list_members_search_treats_wildcards_literally(client, admin, make_member, login):
    make_member("user", first_name="Ada", email="ada_lovelace@vomchurch.org")
    make_member("user", first_name="Moses", email="moses@vomchurch.org")
    login(admin)

    response = client.get("/members", params={"q": "_"})
    assert [item["first_name"] for item in response.json()["items"]] == ["Ada"]
    assert client.get("/members", params={"q": "%"}).json()["total"] == 0
