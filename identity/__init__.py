"""Identity and session services: credentials, sessions, role policy and accounts."""

from .gateway import authenticate, authorize, current_user, login_required, role_required

__all__ = [
    "authenticate",
    "authorize",
    "current_user",
    "login_required",
    "role_required",
]
