"""Request-level authentication and role authorization."""

from __future__ import annotations

from functools import wraps
from typing import Callable, Iterable, Type

from flask import Request, g, request

from models.user import User
from utils.errors import AccessDenied, InsufficientRole, Unauthenticated

from . import sessions


def authenticate(req: Request) -> User:
    """Resolve the session cookie on ``req`` to an active user.

    A successful lookup is also recorded as activity on the user.
    """

    token = sessions.token_from_request(req)
    user = sessions.validate(token)
    if user is None:
        raise Unauthenticated()

    sessions.record_activity(user)
    return user


def authorize(user: User, roles: str | Iterable[str]) -> User:
    """Raise ``InsufficientRole`` unless ``user`` holds one of ``roles``."""

    allowed = {roles} if isinstance(roles, str) else set(roles)
    if user.role not in allowed:
        raise InsufficientRole("Access denied - {} only.".format(" or ".join(sorted(allowed))))
    return user


def ensure_not_self(actor: User, target_id: int, error: Type[AccessDenied]) -> None:
    if actor.id == target_id:
        raise error()


def current_user() -> User:
    user = g.get("current_user")
    if user is None:
        raise Unauthenticated()
    return user


def login_required(view: Callable) -> Callable:
    """Require an authenticated user and expose it as ``g.current_user``."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        g.current_user = authenticate(request)
        return view(*args, **kwargs)

    return wrapped


def role_required(*roles: str) -> Callable[[Callable], Callable]:
    """Require an authenticated user holding one of ``roles``."""

    def decorator(view: Callable) -> Callable:
        @wraps(view)
        def wrapped(*args, **kwargs):
            user = authenticate(request)
            authorize(user, roles)
            g.current_user = user
            return view(*args, **kwargs)

        return wrapped

    return decorator
