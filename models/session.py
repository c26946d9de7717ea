"""Login session model."""

from datetime import datetime
from typing import Optional

from utils.clock import utcnow

from . import db


class Session(db.Model):
    """Bearer token issued after a successful login or registration."""

    __tablename__ = "sessions"

    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    expires_at = db.Column(db.DateTime, nullable=False)

    user = db.relationship("User")

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """Return True while the expiry lies strictly in the future."""

        now = now or utcnow()
        return self.expires_at > now

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Session user={self.user_id} expires={self.expires_at:%Y-%m-%d}>"
