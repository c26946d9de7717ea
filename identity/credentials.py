"""Credential store: password registration and verification."""

from __future__ import annotations

from flask import current_app
from werkzeug.security import check_password_hash, gen_salt, generate_password_hash

from models import db
from models.credential import DEFAULT_HASH_METHOD, SALT_LENGTH, Credential
from models.user import User
from utils.errors import DuplicateEmail, InvalidCredentials

_dummy_hashes: dict[str, tuple[str, str]] = {}


def _hash_method() -> str:
    return current_app.config.get("PASSWORD_HASH_METHOD", DEFAULT_HASH_METHOD)


def _burn_dummy_check(raw_password: str) -> None:
    """Run one hash check against a throwaway credential.

    Keeps an unknown email as slow as a wrong password.
    """

    method = _hash_method()
    if method not in _dummy_hashes:
        salt = gen_salt(SALT_LENGTH)
        _dummy_hashes[method] = (
            generate_password_hash(gen_salt(32) + salt, method=method),
            salt,
        )
    password_hash, salt = _dummy_hashes[method]
    check_password_hash(password_hash, raw_password + salt)


def register(user: User, raw_password: str) -> Credential:
    """Attach a freshly salted password credential to ``user``.

    The credential is added to the session; committing is left to the caller
    so identity and credential land in the same transaction.
    """

    existing = Credential.query.filter_by(email=user.email).first()
    if existing is not None or (user.id is not None and user.credential is not None):
        raise DuplicateEmail()

    credential = Credential(user=user, email=user.email)
    credential.set_password(raw_password, method=_hash_method())
    db.session.add(credential)
    return credential


def verify(email: str, raw_password: str) -> User:
    """Return the user owning ``email`` if ``raw_password`` matches.

    Unknown emails and wrong passwords raise the same ``InvalidCredentials``.
    """

    credential = Credential.query.filter_by(email=email).first()
    if credential is None:
        _burn_dummy_check(raw_password)
        current_app.logger.info("Credential check failed (email=%s)", email)
        raise InvalidCredentials()

    if not credential.check_password(raw_password):
        current_app.logger.info("Credential check failed (email=%s)", email)
        raise InvalidCredentials()

    return credential.user
