"""Account lifecycle: self-registration, provisioning, updates and deletion.

Writes that claim a role slot or a unique email run as one transaction and
are retried from scratch when a concurrent writer wins the same constraint;
the re-read state then produces the proper error (duplicate email, role
limit) or succeeds with the bootstrap role already taken.
"""

from __future__ import annotations

from typing import Optional

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from models.chat_message import ChatMessage
from models.sales import SalesData
from models.scrapper import DistributionLog, ScrapperData, ScrapperSettings
from models.user import User
from utils.errors import (
    AccountBlocked,
    DuplicateEmail,
    IdentityNotFound,
    NoFieldsToUpdate,
    SelfDeletionForbidden,
    SelfModificationForbidden,
    StoreUnavailable,
)

from . import credentials, gateway, roles, sessions

UPDATABLE_FIELDS = ("name", "role", "is_active")


def _attempts() -> int:
    return max(1, int(current_app.config.get("ROLE_CLAIM_ATTEMPTS", 3)))


def _exhausted(last_error: Optional[IntegrityError]) -> StoreUnavailable:
    current_app.logger.error(
        "Write still colliding after %d attempt(s): %s", _attempts(), last_error
    )
    return StoreUnavailable()


def find_by_email(email: str) -> Optional[User]:
    return User.query.filter_by(email=email).first()


def get_account(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise IdentityNotFound()
    return user


def list_accounts() -> list[User]:
    return User.query.order_by(User.created_at.desc(), User.id.desc()).all()


def register_account(email: str, password: str, name: Optional[str] = None) -> User:
    """Self-registration: create an identity and its credential together.

    The first identity ever registered becomes the admin. An identity that
    an admin provisioned earlier is completed instead, keeping its role.
    """

    last_error: Optional[IntegrityError] = None
    for attempt in range(1, _attempts() + 1):
        try:
            user = find_by_email(email)
            if user is not None and not user.is_provisioned:
                raise DuplicateEmail()
            if user is not None and not user.is_active:
                current_app.logger.info(
                    "Registration refused for blocked account (user_id=%s)", user.id
                )
                raise AccountBlocked()

            if user is None:
                user = User(email=email, name=name)
                roles.claim_initial_role(user)
                db.session.add(user)
            elif name:
                user.name = name

            credentials.register(user, password)
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            last_error = exc
            current_app.logger.warning(
                "Registration for %s lost a concurrent write (attempt %d)", email, attempt
            )
            continue
        except Exception:
            db.session.rollback()
            raise

        if user.role == roles.BOOTSTRAP_ROLE:
            current_app.logger.info("Bootstrap admin registered: %s", email)
        else:
            current_app.logger.info("User registered: %s (role=%s)", email, user.role)
        return user

    if find_by_email(email) is not None:
        raise DuplicateEmail()
    raise _exhausted(last_error) from last_error


def create_account(
    actor: User,
    email: str,
    role: str,
    name: Optional[str] = None,
    password: Optional[str] = None,
) -> User:
    """Admin provisioning of a new account.

    Without ``password`` the account stays provisioned until its holder
    registers; with one, it can log in straight away.
    """

    gateway.authorize(actor, roles.BOOTSTRAP_ROLE)

    last_error: Optional[IntegrityError] = None
    for attempt in range(1, _attempts() + 1):
        try:
            if find_by_email(email) is not None:
                raise DuplicateEmail("A user with that email already exists.")

            user = User(email=email, name=name)
            roles.claim_role(user, role)
            db.session.add(user)
            if password:
                credentials.register(user, password)
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            last_error = exc
            current_app.logger.warning(
                "Provisioning of %s lost a concurrent write (attempt %d)", email, attempt
            )
            continue
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(
            "User %s provisioned as %s by user_id=%s", email, user.role, actor.id
        )
        return user

    if find_by_email(email) is not None:
        raise DuplicateEmail()
    roles.assign_role(role)
    raise _exhausted(last_error) from last_error


def update_account(actor: User, target_id: int, fields: dict) -> User:
    """Change name, role and/or active flag of another account."""

    gateway.authorize(actor, roles.BOOTSTRAP_ROLE)
    gateway.ensure_not_self(actor, target_id, SelfModificationForbidden)

    changes = {key: fields[key] for key in UPDATABLE_FIELDS if key in fields}
    if not changes:
        raise NoFieldsToUpdate()

    last_error: Optional[IntegrityError] = None
    for attempt in range(1, _attempts() + 1):
        try:
            target = get_account(target_id)

            if "name" in changes:
                target.name = changes["name"]

            if "role" in changes and roles.clean_role(changes["role"]) != target.role:
                roles.claim_role(target, changes["role"], exclude_user_id=target.id)

            if "is_active" in changes:
                target.is_active = bool(changes["is_active"])
                if not target.is_active:
                    revoked = sessions.revoke_all(target.id)
                    current_app.logger.info(
                        "Blocked user_id=%s, revoked %d session(s)", target.id, revoked
                    )

            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            last_error = exc
            current_app.logger.warning(
                "Update of user_id=%s lost a concurrent write (attempt %d)", target_id, attempt
            )
            continue
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(
            "User user_id=%s updated by user_id=%s: %s",
            target_id,
            actor.id,
            ", ".join(sorted(changes)),
        )
        return target

    if "role" in changes:
        roles.assign_role(changes["role"], exclude_user_id=target_id)
    raise _exhausted(last_error) from last_error


def delete_account(actor: User, target_id: int) -> None:
    """Delete another account together with every record that references it."""

    gateway.authorize(actor, roles.BOOTSTRAP_ROLE)
    gateway.ensure_not_self(actor, target_id, SelfDeletionForbidden)
    target = get_account(target_id)

    try:
        ChatMessage.query.filter_by(sender_id=target_id).delete(synchronize_session=False)
        ScrapperData.query.filter_by(scrapper_id=target_id).delete(synchronize_session=False)
        ScrapperSettings.query.filter_by(scrapper_id=target_id).delete(
            synchronize_session=False
        )
        DistributionLog.query.filter(
            or_(
                DistributionLog.scrapper_id == target_id,
                DistributionLog.recipient_id == target_id,
            )
        ).delete(synchronize_session=False)
        SalesData.query.filter_by(user_id=target_id).delete(synchronize_session=False)
        sessions.revoke_all(target_id)
        # The credential goes with the user through the relationship cascade.
        db.session.delete(target)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Deleting user_id=%s failed; rolled back", target_id)
        raise

    current_app.logger.info("User user_id=%s deleted by user_id=%s", target_id, actor.id)
