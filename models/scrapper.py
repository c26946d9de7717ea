"""Scraped data, distribution settings and distribution log models."""

from utils.clock import utcnow

from . import db


class ScrapperData(db.Model):
    """A single line of data collected by a scrapper."""

    __tablename__ = "scrapper_data"

    id = db.Column(db.Integer, primary_key=True)
    scrapper_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    data_line = db.Column(db.Text, nullable=False)
    is_processed = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class ScrapperSettings(db.Model):
    """Per-scrapper distribution preferences."""

    __tablename__ = "scrapper_settings"

    id = db.Column(db.Integer, primary_key=True)
    scrapper_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    lines_per_user = db.Column(db.Integer, nullable=False, default=1)
    # JSON encoded list of recipient user ids.
    selected_users = db.Column(db.Text, nullable=True, default="[]")
    timer_interval = db.Column(db.Integer, nullable=False, default=180)
    is_active = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class DistributionLog(db.Model):
    """Record of lines handed from a scrapper to a recipient."""

    __tablename__ = "distribution_logs"

    id = db.Column(db.Integer, primary_key=True)
    scrapper_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    recipient_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    data_lines = db.Column(db.Text, nullable=False)
    distributed_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
