"""Session manager: issue, validate and revoke login sessions.

Sessions are opaque random tokens stored server side and carried by the
client in an HTTP-only cookie. A session is valid while its expiry lies
strictly in the future; expired rows are ignored by ``validate`` and can be
swept with ``purge_expired``.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Optional

from flask import Response, current_app
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.session import Session
from models.user import User
from utils.clock import utcnow

DEFAULT_TTL = timedelta(days=30)


def _ttl() -> timedelta:
    return current_app.config.get("SESSION_TTL", DEFAULT_TTL)


def _cookie_name() -> str:
    return current_app.config.get("SESSION_TOKEN_COOKIE_NAME", "session_token")


def new_token() -> str:
    """Return a 256-bit URL-safe random token."""

    return secrets.token_urlsafe(32)


def issue(user: User, now: Optional[datetime] = None) -> Session:
    """Create and commit a new session for ``user``."""

    now = now or utcnow()
    session = Session(
        token=new_token(),
        user_id=user.id,
        created_at=now,
        expires_at=now + _ttl(),
    )
    db.session.add(session)
    db.session.commit()
    current_app.logger.info("Session issued (user_id=%s)", user.id)
    return session


def validate(token: Optional[str], now: Optional[datetime] = None) -> Optional[User]:
    """Resolve ``token`` to its user, or ``None`` when it must be rejected.

    Rejected: unknown tokens, expired sessions, and sessions owned by a
    deactivated account. This function does not write; see ``record_activity``.
    """

    if not token:
        return None

    session = Session.query.filter_by(token=token).first()
    if session is None or not session.is_valid(now):
        return None

    user = session.user
    if user is None or not user.is_active:
        return None
    return user


def record_activity(user: User, now: Optional[datetime] = None) -> None:
    """Stamp ``last_activity_at`` on ``user``; best effort, last write wins."""

    try:
        user.last_activity_at = now or utcnow()
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.warning(
            "Could not record activity (user_id=%s)", user.id, exc_info=True
        )


def revoke(token: Optional[str]) -> bool:
    """Delete the session for ``token``. Revoking an unknown token is a no-op."""

    if not token:
        return False
    deleted = Session.query.filter_by(token=token).delete(synchronize_session=False)
    db.session.commit()
    return deleted > 0


def revoke_all(user_id: int) -> int:
    """Delete every session of a user. The caller commits."""

    return Session.query.filter_by(user_id=user_id).delete(synchronize_session=False)


def purge_expired(now: Optional[datetime] = None) -> int:
    """Delete sessions whose expiry has passed and return how many were removed."""

    now = now or utcnow()
    deleted = Session.query.filter(Session.expires_at <= now).delete(
        synchronize_session=False
    )
    db.session.commit()
    current_app.logger.info("Purged %d expired session(s)", deleted)
    return deleted


def set_session_cookie(response: Response, session: Session) -> Response:
    config = current_app.config
    response.set_cookie(
        _cookie_name(),
        session.token,
        max_age=int(_ttl().total_seconds()),
        path="/",
        secure=config.get("SESSION_TOKEN_COOKIE_SECURE", True),
        httponly=True,
        samesite=config.get("SESSION_TOKEN_COOKIE_SAMESITE", "None"),
    )
    return response


def clear_session_cookie(response: Response) -> Response:
    config = current_app.config
    response.set_cookie(
        _cookie_name(),
        "",
        max_age=0,
        expires=0,
        path="/",
        secure=config.get("SESSION_TOKEN_COOKIE_SECURE", True),
        httponly=True,
        samesite=config.get("SESSION_TOKEN_COOKIE_SAMESITE", "None"),
    )
    return response


def token_from_request(request) -> Optional[str]:
    return request.cookies.get(_cookie_name()) or None
