"""Role policy: bootstrap admin and per-role capacity limits.

Capped roles are held through numbered slots on the ``users`` table (see
``models.user.ROLE_CAPACITY``). Checks here read the current holders; the
unique ``(role, role_slot)`` constraint settles races between concurrent
writers, and callers retry the losing transaction.
"""

from __future__ import annotations

from typing import Optional

from models import db
from models.user import ROLE_CAPACITY, ROLES, User
from utils.errors import (
    CannotCreateAdmin,
    ManagerLimitReached,
    ScrapperLimitReached,
    ValidationError,
)

BOOTSTRAP_ROLE = "admin"
DEFAULT_ROLE = "user"

LIMIT_ERRORS = {
    "manager": ManagerLimitReached,
    "scrapper": ScrapperLimitReached,
}


def clean_role(value: object) -> str:
    """Return a known role name or raise ``ValidationError``."""

    role = value.strip().lower() if isinstance(value, str) else ""
    if role not in ROLES:
        raise ValidationError("Role must be one of: {}.".format(", ".join(ROLES)))
    return role


def _held_slots(role: str, exclude_user_id: Optional[int] = None) -> list[int]:
    query = db.session.query(User.role_slot).filter(User.role == role)
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return [slot for (slot,) in query]


def determine_initial_role() -> str:
    """Role for a self-registered identity: admin for the very first, user otherwise."""

    has_users = db.session.query(User.id).limit(1).first() is not None
    return DEFAULT_ROLE if has_users else BOOTSTRAP_ROLE


def assign_role(requested_role: str, exclude_user_id: Optional[int] = None) -> str:
    """Validate an admin-requested role against the capacity policy.

    ``exclude_user_id`` leaves the given user out of the head count, for
    role changes of an existing account.
    """

    role = clean_role(requested_role)
    if role == BOOTSTRAP_ROLE:
        raise CannotCreateAdmin()

    limit = ROLE_CAPACITY.get(role)
    if limit is not None and len(_held_slots(role, exclude_user_id)) >= limit:
        raise LIMIT_ERRORS[role]()
    return role


def claim_role(user: User, requested_role: str, exclude_user_id: Optional[int] = None) -> str:
    """Apply ``requested_role`` to ``user``, taking the lowest free slot for capped roles."""

    role = assign_role(requested_role, exclude_user_id=exclude_user_id)
    slot = None
    limit = ROLE_CAPACITY.get(role)
    if limit is not None:
        held = set(_held_slots(role, exclude_user_id))
        slot = min(s for s in range(1, limit + 1) if s not in held)

    user.role = role
    user.role_slot = slot
    return role


def claim_initial_role(user: User) -> str:
    """Apply the bootstrap rule to a self-registering ``user``.

    The bootstrap admin takes admin slot 1, so a second concurrent first
    registration cannot also commit as admin.
    """

    role = determine_initial_role()
    user.role = role
    user.role_slot = 1 if role == BOOTSTRAP_ROLE else None
    return role
