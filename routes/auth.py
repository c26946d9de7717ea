"""Authentication blueprint providing register, login and logout endpoints."""

from __future__ import annotations
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from identity import credentials, lifecycle, sessions
from utils.errors import AccountBlocked, ValidationError
from utils.request_validation import (
    clean_email,
    clean_password,
    is_missing,
    optional_string,
    parse_json_request,
)

auth_bp = Blueprint("auth", __name__)


def _min_password_length() -> int:
    return int(current_app.config.get("MIN_PASSWORD_LENGTH", 6))


def _session_response(user, status: int):
    session = sessions.issue(user)
    response = jsonify({"user": user.to_dict()})
    response.status_code = status
    return sessions.set_session_cookie(response, session)


@auth_bp.route("/register", methods=["POST"])
def register():
    """Register with email and password; the first account becomes the admin."""
    payload = parse_json_request(request, required_keys=("email", "password"))
    email = clean_email(payload.get("email"))
    password = clean_password(payload.get("password"), _min_password_length())

    confirmation = payload.get("confirmPassword", payload.get("confirm_password"))
    if confirmation is None:
        raise ValidationError("Password confirmation is required.")
    if confirmation != password:
        raise ValidationError("Passwords do not match.")

    name = optional_string(payload, "name")
    user = lifecycle.register_account(email, password, None if is_missing(name) else name)

    return _session_response(user, HTTPStatus.CREATED)


@auth_bp.route("/login", methods=["POST"])
def login():
    """Verify email and password and start a session."""
    payload = parse_json_request(request, required_keys=("email", "password"))
    email = payload.get("email")
    password = payload.get("password")
    if not isinstance(email, str) or not isinstance(password, str):
        raise ValidationError("Email and password are required.")

    user = credentials.verify(email.strip(), password)
    if not user.is_active:
        current_app.logger.info("Login refused for blocked account (user_id=%s)", user.id)
        raise AccountBlocked()

    current_app.logger.info("Login succeeded (user_id=%s)", user.id)
    return _session_response(user, HTTPStatus.OK)


@auth_bp.route("/logout", methods=["GET"])
def logout():
    """Revoke the current session, if any, and clear the cookie."""
    token = sessions.token_from_request(request)
    if sessions.revoke(token):
        current_app.logger.info("Session revoked on logout")

    response = jsonify({"success": True})
    return sessions.clear_session_cookie(response)
