"""Tests for the Flask application factory."""
from __future__ import annotations


def test_health_endpoint_returns_ok(client):
    """The health endpoint should respond with an OK payload."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_blueprints_registered(app):
    """Application factory should register the auth and user blueprints."""
    bps = set(app.blueprints.keys())
    assert {"auth", "users"}.issubset(bps)


def test_routes_registered(app):
    rules = {rule.rule for rule in app.url_map.iter_rules()}
    assert {
        "/auth/register",
        "/auth/login",
        "/auth/logout",
        "/me",
        "/users",
        "/users/<int:user_id>",
    }.issubset(rules)
