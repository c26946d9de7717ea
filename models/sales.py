"""Monthly sales figures model."""

from utils.clock import utcnow

from . import db


class SalesData(db.Model):
    """Sales counters for one user and one calendar month."""

    __tablename__ = "sales_data"
    __table_args__ = (
        db.UniqueConstraint("user_id", "month_year", name="uq_sales_data_user_month"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # ``YYYY-MM``
    month_year = db.Column(db.String(7), nullable=False)
    today_sales = db.Column(db.Integer, nullable=False, default=0)
    total_sales = db.Column(db.Integer, nullable=False, default=0)
    silver_sales = db.Column(db.Integer, nullable=False, default=0)
    gold_sales = db.Column(db.Integer, nullable=False, default=0)
    platinum_sales = db.Column(db.Integer, nullable=False, default=0)
    diamond_sales = db.Column(db.Integer, nullable=False, default=0)
    ruby_sales = db.Column(db.Integer, nullable=False, default=0)
    sapphire_sales = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
