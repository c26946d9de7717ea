"""User model definition."""

from utils.clock import utcnow

from . import db


ROLES = ("admin", "manager", "scrapper", "user")

# Roles limited to a fixed number of holders. Each holder occupies one
# numbered slot; ``(role, role_slot)`` is unique, so the store refuses a
# holder beyond the cap even when two writers race.
ROLE_CAPACITY = {"admin": 1, "manager": 1, "scrapper": 3}


def _role_rules() -> str:
    uncapped = [
        f"(role = '{role}' AND role_slot IS NULL)"
        for role in ROLES
        if role not in ROLE_CAPACITY
    ]
    capped = [
        f"(role = '{role}' AND role_slot BETWEEN 1 AND {limit})"
        for role, limit in ROLE_CAPACITY.items()
    ]
    return " OR ".join(uncapped + capped)


class User(db.Model):
    """Represents a person using the workspace."""

    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("role", "role_slot", name="uq_users_role_slot"),
        db.CheckConstraint(_role_rules(), name="ck_users_role_slot"),
    )

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    name = db.Column(db.String(255), nullable=True)
    role = db.Column(db.String(32), nullable=False, default="user")
    role_slot = db.Column(db.Integer, nullable=True)
    is_active = db.Column(
        db.Boolean,
        nullable=False,
        default=True,
        server_default=db.text("true"),
    )
    daily_numbers_sent = db.Column(db.Integer, nullable=False, default=0)
    total_numbers_sent = db.Column(db.Integer, nullable=False, default=0)
    last_activity_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    credential = db.relationship(
        "Credential",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )

    @property
    def is_provisioned(self) -> bool:
        """True while the account exists but its holder has not registered a password."""

        return self.credential is None

    @property
    def status(self) -> str:
        if self.is_provisioned:
            return "provisioned"
        return "active" if self.is_active else "blocked"

    def to_dict(self) -> dict:
        """Serialize the user for API responses."""

        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "is_active": self.is_active,
            "status": self.status,
            "daily_numbers_sent": self.daily_numbers_sent,
            "total_numbers_sent": self.total_numbers_sent,
            "last_activity_at": (
                self.last_activity_at.isoformat() if self.last_activity_at else None
            ),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email} ({self.role})>"
