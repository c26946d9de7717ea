"""Password credential model."""

from werkzeug.security import check_password_hash, gen_salt, generate_password_hash

from utils.clock import utcnow

from . import db


# 22 characters drawn from 62 symbols is a little over 130 bits.
SALT_LENGTH = 22
DEFAULT_HASH_METHOD = "pbkdf2:sha256"


class Credential(db.Model):
    """Salted password hash proving control of a user account."""

    __tablename__ = "credentials"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    salt = db.Column(db.String(64), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    user = db.relationship("User", back_populates="credential")

    def set_password(self, password: str, method: str = DEFAULT_HASH_METHOD) -> None:
        """Generate a fresh salt and store the hash of the salted password."""

        self.salt = gen_salt(SALT_LENGTH)
        self.password_hash = generate_password_hash(password + self.salt, method=method)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash in constant time."""

        return check_password_hash(self.password_hash, password + self.salt)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Credential {self.email}>"
