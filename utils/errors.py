"""HTTP errors raised by the identity services.

Each error carries a stable machine-readable ``kind`` rendered next to the
human readable detail by the application error handler.
"""

from __future__ import annotations

from werkzeug.exceptions import BadRequest, Forbidden, NotFound, ServiceUnavailable, Unauthorized


class ValidationError(BadRequest):
    kind = "validation_error"


class InvalidCredentials(BadRequest):
    kind = "invalid_credentials"
    description = "Invalid email or password."


class DuplicateEmail(BadRequest):
    kind = "duplicate_email"
    description = "Unable to register with the provided details."


class NoFieldsToUpdate(BadRequest):
    kind = "no_fields_to_update"
    description = "No fields to update."


class Unauthenticated(Unauthorized):
    kind = "unauthenticated"
    description = "Not authenticated."


class AccessDenied(Forbidden):
    kind = "forbidden"
    description = "Access denied."


class InsufficientRole(AccessDenied):
    kind = "insufficient_role"


class SelfModificationForbidden(AccessDenied):
    kind = "self_modification_forbidden"
    description = "Cannot modify your own account."


class SelfDeletionForbidden(AccessDenied):
    kind = "self_deletion_forbidden"
    description = "Cannot delete your own account."


class AccountBlocked(AccessDenied):
    kind = "account_blocked"
    description = "This account has been deactivated."


class PolicyViolation(Forbidden):
    kind = "policy_violation"
    description = "Role assignment is not allowed."


class CannotCreateAdmin(PolicyViolation):
    kind = "cannot_create_admin"
    description = "Cannot create admin users."


class ManagerLimitReached(PolicyViolation):
    kind = "manager_limit_reached"
    description = "Manager limit reached (max 1)."


class ScrapperLimitReached(PolicyViolation):
    kind = "scrapper_limit_reached"
    description = "Scrapper limit reached (max 3)."


class IdentityNotFound(NotFound):
    kind = "not_found"
    description = "User not found."


class StoreUnavailable(ServiceUnavailable):
    kind = "store_unavailable"
    description = "The data store is temporarily unavailable."


def error_kind(error: Exception) -> str:
    """Return the ``kind`` for an error, deriving one from plain HTTP errors."""

    kind = getattr(error, "kind", None)
    if kind:
        return kind
    name = getattr(error, "name", None) or type(error).__name__
    return name.strip().lower().replace(" ", "_").replace("'", "")
