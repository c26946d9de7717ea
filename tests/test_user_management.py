"""Tests for admin account management: provisioning, updates and deletion."""

from __future__ import annotations

import json

import pytest
from flask import Flask
from flask.testing import FlaskClient

from models import db
from models.chat_message import ChatMessage
from models.credential import Credential
from models.sales import SalesData
from models.scrapper import DistributionLog, ScrapperData, ScrapperSettings
from models.session import Session
from models.user import User


def _register(client: FlaskClient, email: str, password: str = "pw123456"):
    response = client.post(
        "/auth/register",
        json={"email": email, "password": password, "confirmPassword": password},
    )
    assert response.status_code == 201
    return response.get_json()["user"]


@pytest.fixture()
def admin_client(client: FlaskClient) -> FlaskClient:
    """A client logged in as the bootstrap admin."""

    user = _register(client, "admin@x.com")
    assert user["role"] == "admin"
    client.admin_id = user["id"]
    return client


def _provision(client: FlaskClient, email: str, role: str = "user", **extra):
    payload = {"email": email, "role": role}
    payload.update(extra)
    return client.post("/users", json=payload)


def test_non_admin_is_forbidden(admin_client: FlaskClient, app: Flask):
    member = app.test_client()
    target = _register(member, "member@x.com")

    for response in (
        member.get("/users"),
        member.post("/users", json={"email": "n@x.com", "role": "user"}),
        member.put(f"/users/{target['id']}", json={"name": "x"}),
        member.delete(f"/users/{admin_client.admin_id}"),
    ):
        assert response.status_code == 403
        assert response.get_json()["kind"] == "insufficient_role"


def test_anonymous_requests_are_unauthenticated(client: FlaskClient):
    assert client.get("/users").status_code == 401
    assert client.delete("/users/1").status_code == 401


def test_list_users_newest_first(admin_client: FlaskClient):
    _provision(admin_client, "one@x.com")
    _provision(admin_client, "two@x.com")

    users = admin_client.get("/users").get_json()["users"]

    assert [user["email"] for user in users] == ["two@x.com", "one@x.com", "admin@x.com"]


def test_provisioned_account_has_no_credential(admin_client: FlaskClient, app: Flask):
    response = _provision(admin_client, "new@x.com", "scrapper", name="Newbie")

    assert response.status_code == 201
    user = response.get_json()["user"]
    assert user["status"] == "provisioned"
    assert user["name"] == "Newbie"
    with app.app_context():
        assert Credential.query.filter_by(email="new@x.com").first() is None


def test_provisioning_with_password_allows_login(admin_client: FlaskClient, app: Flask):
    _provision(admin_client, "ready@x.com", password="ready123")

    response = app.test_client().post(
        "/auth/login", json={"email": "ready@x.com", "password": "ready123"}
    )

    assert response.status_code == 200


@pytest.mark.parametrize(
    "payload, status, kind",
    [
        ({"email": "a@x.com", "role": "admin"}, 403, "cannot_create_admin"),
        ({"email": "a@x.com", "role": "owner"}, 400, "validation_error"),
        ({"email": "admin@x.com", "role": "user"}, 400, "duplicate_email"),
        ({"email": "a@x.com", "role": "user", "password": "abc"}, 400, "validation_error"),
        ({"role": "user"}, 400, "validation_error"),
    ],
)
def test_provisioning_errors(admin_client: FlaskClient, payload, status, kind):
    response = admin_client.post("/users", json=payload)

    assert response.status_code == status
    assert response.get_json()["kind"] == kind


def test_scrapper_capacity(admin_client: FlaskClient):
    for index in range(3):
        assert _provision(admin_client, f"s{index}@x.com", "scrapper").status_code == 201

    response = _provision(admin_client, "s4@x.com", "scrapper")

    assert response.status_code == 403
    assert response.get_json()["kind"] == "scrapper_limit_reached"


def test_deleting_a_scrapper_frees_a_slot(admin_client: FlaskClient):
    ids = [
        _provision(admin_client, f"s{index}@x.com", "scrapper").get_json()["user"]["id"]
        for index in range(3)
    ]

    admin_client.delete(f"/users/{ids[1]}")

    assert _provision(admin_client, "s4@x.com", "scrapper").status_code == 201


def test_update_fields(admin_client: FlaskClient):
    target = _provision(admin_client, "t@x.com").get_json()["user"]

    response = admin_client.put(
        f"/users/{target['id']}", json={"name": "Tess", "role": "manager"}
    )

    assert response.status_code == 200
    user = response.get_json()["user"]
    assert user["name"] == "Tess"
    assert user["role"] == "manager"
    assert user["is_active"] is True


def test_update_leaves_absent_fields_untouched(admin_client: FlaskClient):
    target = _provision(admin_client, "t@x.com", "scrapper", name="Tess").get_json()["user"]

    response = admin_client.put(f"/users/{target['id']}", json={"is_active": False})

    user = response.get_json()["user"]
    assert user["name"] == "Tess"
    assert user["role"] == "scrapper"
    assert user["is_active"] is False


def test_update_role_respects_capacity(admin_client: FlaskClient):
    _provision(admin_client, "boss@x.com", "manager")
    target = _provision(admin_client, "t@x.com").get_json()["user"]

    to_manager = admin_client.put(f"/users/{target['id']}", json={"role": "manager"})
    to_admin = admin_client.put(f"/users/{target['id']}", json={"role": "admin"})

    assert to_manager.status_code == 403
    assert to_manager.get_json()["kind"] == "manager_limit_reached"
    assert to_admin.status_code == 403
    assert to_admin.get_json()["kind"] == "cannot_create_admin"


def test_demoting_a_manager_frees_the_slot(admin_client: FlaskClient):
    boss = _provision(admin_client, "boss@x.com", "manager").get_json()["user"]

    admin_client.put(f"/users/{boss['id']}", json={"role": "user"})

    assert _provision(admin_client, "next@x.com", "manager").status_code == 201


def test_update_self_is_forbidden(admin_client: FlaskClient):
    response = admin_client.put(
        f"/users/{admin_client.admin_id}", json={"name": "Me"}
    )

    assert response.status_code == 403
    assert response.get_json()["kind"] == "self_modification_forbidden"


def test_update_requires_a_field(admin_client: FlaskClient):
    target = _provision(admin_client, "t@x.com").get_json()["user"]

    response = admin_client.put(f"/users/{target['id']}", json={})

    assert response.status_code == 400
    assert response.get_json()["kind"] == "no_fields_to_update"


@pytest.mark.parametrize(
    "payload",
    [{"is_active": "no"}, {"role": "owner"}, {"role": None}, {"name": 12}],
)
def test_update_validation(admin_client: FlaskClient, payload):
    target = _provision(admin_client, "t@x.com").get_json()["user"]

    response = admin_client.put(f"/users/{target['id']}", json=payload)

    assert response.status_code == 400
    assert response.get_json()["kind"] == "validation_error"


def test_update_missing_user(admin_client: FlaskClient):
    response = admin_client.put("/users/9999", json={"name": "x"})

    assert response.status_code == 404
    assert response.get_json()["kind"] == "not_found"


def test_blocking_revokes_sessions(admin_client: FlaskClient, app: Flask):
    member = app.test_client()
    target = _register(member, "member@x.com")
    assert member.get("/me").status_code == 200

    admin_client.put(f"/users/{target['id']}", json={"is_active": False})

    assert member.get("/me").status_code == 401
    with app.app_context():
        assert Session.query.filter_by(user_id=target["id"]).count() == 0


def test_delete_self_is_forbidden(admin_client: FlaskClient):
    response = admin_client.delete(f"/users/{admin_client.admin_id}")

    assert response.status_code == 403
    assert response.get_json()["kind"] == "self_deletion_forbidden"


def test_delete_missing_user(admin_client: FlaskClient):
    response = admin_client.delete("/users/9999")

    assert response.status_code == 404
    assert response.get_json()["kind"] == "not_found"


def test_delete_cascades_to_dependent_records(admin_client: FlaskClient, app: Flask):
    member = app.test_client()
    target = _register(member, "member@x.com")
    target_id = target["id"]
    admin_id = admin_client.admin_id

    with app.app_context():
        db.session.add_all(
            [
                ChatMessage(sender_id=target_id, message="hi"),
                ChatMessage(sender_id=admin_id, message="hello"),
                ScrapperData(scrapper_id=target_id, data_line="555-0100"),
                ScrapperSettings(scrapper_id=target_id, selected_users=json.dumps([admin_id])),
                DistributionLog(scrapper_id=target_id, recipient_id=admin_id, data_lines="[]"),
                DistributionLog(scrapper_id=admin_id, recipient_id=target_id, data_lines="[]"),
                SalesData(user_id=target_id, month_year="2026-10", total_sales=4),
            ]
        )
        db.session.commit()

    response = admin_client.delete(f"/users/{target_id}")

    assert response.status_code == 200
    assert response.get_json() == {"success": True}
    with app.app_context():
        assert db.session.get(User, target_id) is None
        assert Credential.query.filter_by(user_id=target_id).count() == 0
        assert Session.query.filter_by(user_id=target_id).count() == 0
        assert ChatMessage.query.filter_by(sender_id=target_id).count() == 0
        assert ScrapperData.query.filter_by(scrapper_id=target_id).count() == 0
        assert ScrapperSettings.query.filter_by(scrapper_id=target_id).count() == 0
        assert (
            DistributionLog.query.filter(
                (DistributionLog.scrapper_id == target_id)
                | (DistributionLog.recipient_id == target_id)
            ).count()
            == 0
        )
        assert SalesData.query.filter_by(user_id=target_id).count() == 0
        assert ChatMessage.query.filter_by(sender_id=admin_id).count() == 1

    assert member.get("/me").status_code == 401


def test_failed_delete_rolls_back(admin_client: FlaskClient, app: Flask, monkeypatch):
    from identity import sessions

    member = app.test_client()
    target = _register(member, "member@x.com")
    with app.app_context():
        db.session.add(ChatMessage(sender_id=target["id"], message="keep me"))
        db.session.commit()

    def _fail(user_id):
        from sqlalchemy.exc import SQLAlchemyError

        raise SQLAlchemyError("boom")

    monkeypatch.setattr(sessions, "revoke_all", _fail)

    response = admin_client.delete(f"/users/{target['id']}")

    assert response.status_code == 500
    with app.app_context():
        assert db.session.get(User, target["id"]) is not None
        assert ChatMessage.query.filter_by(sender_id=target["id"]).count() == 1
