"""Current-user and admin account management endpoints."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from identity import current_user, lifecycle, login_required, role_required, roles
from utils.request_validation import (
    clean_email,
    clean_password,
    is_missing,
    optional_bool,
    optional_string,
    parse_json_request,
)

users_bp = Blueprint("users", __name__)


@users_bp.route("/me", methods=["GET"])
@login_required
def me():
    """Return the authenticated user; the lookup refreshes its activity stamp."""

    return jsonify({"user": current_user().to_dict()})


@users_bp.route("/users", methods=["GET"])
@role_required("admin")
def list_users():
    return jsonify({"users": [user.to_dict() for user in lifecycle.list_accounts()]})


@users_bp.route("/users", methods=["POST"])
@role_required("admin")
def create_user():
    """Provision an account with an explicit role, optionally with a password."""

    payload = parse_json_request(request, required_keys=("email", "role"))
    email = clean_email(payload.get("email"))
    role = roles.clean_role(payload.get("role"))
    name = optional_string(payload, "name")

    password = None
    if payload.get("password") is not None:
        password = clean_password(
            payload.get("password"), int(current_app.config.get("MIN_PASSWORD_LENGTH", 6))
        )

    user = lifecycle.create_account(
        current_user(),
        email,
        role,
        name=None if is_missing(name) else name,
        password=password,
    )
    return jsonify({"user": user.to_dict()}), HTTPStatus.CREATED


@users_bp.route("/users/<int:user_id>", methods=["PUT"])
@role_required("admin")
def update_user(user_id: int):
    """Update name, role or active flag of another account."""

    payload = parse_json_request(request, allow_empty=True)

    fields = {}
    name = optional_string(payload, "name")
    if not is_missing(name):
        fields["name"] = name
    if "role" in payload:
        fields["role"] = roles.clean_role(payload["role"])
    is_active = optional_bool(payload, "is_active")
    if not is_missing(is_active):
        fields["is_active"] = is_active

    user = lifecycle.update_account(current_user(), user_id, fields)
    return jsonify({"user": user.to_dict()})


@users_bp.route("/users/<int:user_id>", methods=["DELETE"])
@role_required("admin")
def delete_user(user_id: int):
    lifecycle.delete_account(current_user(), user_id)
    return jsonify({"success": True})
