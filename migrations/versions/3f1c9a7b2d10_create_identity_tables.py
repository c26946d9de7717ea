"""Create users, credentials, sessions and dependent tables.

Revision ID: 3f1c9a7b2d10
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f1c9a7b2d10"
down_revision = None
branch_labels = None
depends_on = None


ROLE_SLOT_RULES = (
    "(role = 'user' AND role_slot IS NULL)"
    " OR (role = 'admin' AND role_slot BETWEEN 1 AND 1)"
    " OR (role = 'manager' AND role_slot BETWEEN 1 AND 1)"
    " OR (role = 'scrapper' AND role_slot BETWEEN 1 AND 3)"
)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def _user_fk(column: str, **kwargs) -> sa.Column:
    return sa.Column(
        column,
        sa.Integer(),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        **kwargs,
    )


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="user"),
        sa.Column("role_slot", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("daily_numbers_sent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_numbers_sent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_activity_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("role", "role_slot", name="uq_users_role_slot"),
        sa.CheckConstraint(ROLE_SLOT_RULES, name="ck_users_role_slot"),
    )

    op.create_table(
        "credentials",
        sa.Column("id", sa.Integer(), nullable=False),
        _user_fk("user_id", unique=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("salt", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "sessions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("token", sa.String(length=64), nullable=False),
        _user_fk("user_id"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_sessions_token"), "sessions", ["token"], unique=True)
    op.create_index(op.f("ix_sessions_user_id"), "sessions", ["user_id"], unique=False)

    op.create_table(
        "chat_messages",
        sa.Column("id", sa.Integer(), nullable=False),
        _user_fk("sender_id", index=True),
        sa.Column("message", sa.String(length=1000), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "scrapper_data",
        sa.Column("id", sa.Integer(), nullable=False),
        _user_fk("scrapper_id", index=True),
        sa.Column("data_line", sa.Text(), nullable=False),
        sa.Column("is_processed", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "scrapper_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        _user_fk("scrapper_id", unique=True),
        sa.Column("lines_per_user", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("selected_users", sa.Text(), nullable=True),
        sa.Column("timer_interval", sa.Integer(), nullable=False, server_default="180"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "distribution_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        _user_fk("scrapper_id", index=True),
        _user_fk("recipient_id", index=True),
        sa.Column("data_lines", sa.Text(), nullable=False),
        sa.Column("distributed_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "sales_data",
        sa.Column("id", sa.Integer(), nullable=False),
        _user_fk("user_id", index=True),
        sa.Column("month_year", sa.String(length=7), nullable=False),
        sa.Column("today_sales", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_sales", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("silver_sales", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("gold_sales", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("platinum_sales", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("diamond_sales", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("ruby_sales", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("sapphire_sales", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "month_year", name="uq_sales_data_user_month"),
    )


def downgrade():
    op.drop_table("sales_data")
    op.drop_table("distribution_logs")
    op.drop_table("scrapper_settings")
    op.drop_table("scrapper_data")
    op.drop_table("chat_messages")
    op.drop_index(op.f("ix_sessions_user_id"), table_name="sessions")
    op.drop_index(op.f("ix_sessions_token"), table_name="sessions")
    op.drop_table("sessions")
    op.drop_table("credentials")
    op.drop_table("users")
