"""Initial schema: users, movies, showtimes, bookings.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "movies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("genre", sa.String(50), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("rating", sa.String(20), nullable=False, server_default=""),
        sa.Column("language", sa.String(50), nullable=False, server_default="English"),
        sa.Column("cinema", sa.String(255), nullable=False, server_default=""),
        sa.Column("is_trending", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_coming_soon", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.CheckConstraint("duration_minutes > 0", name="check_movie_duration_positive"),
    )
    op.create_index("ix_movies_id", "movies", ["id"])
    op.create_index("ix_movies_genre", "movies", ["genre"])
    op.create_index("ix_movies_created_at", "movies", ["created_at"])

    op.create_table(
        "showtimes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("movie_id", sa.Integer(), sa.ForeignKey("movies.id"), nullable=False),
        sa.Column("label", sa.String(20), nullable=False),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("booked", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("unit_price", sa.Integer(), nullable=False, server_default=sa.text("8")),
        *_timestamps(),
        # The oversell guard. booking_service never relies on these, but a
        # buggy writer cannot get past them.
        sa.CheckConstraint("capacity > 0", name="check_showtime_capacity_positive"),
        sa.CheckConstraint("booked >= 0", name="check_showtime_booked_non_negative"),
        sa.CheckConstraint("booked <= capacity", name="check_showtime_booked_lte_capacity"),
        sa.CheckConstraint("unit_price >= 0", name="check_showtime_unit_price_non_negative"),
    )
    op.create_index("ix_showtimes_id", "showtimes", ["id"])
    op.create_index("ix_showtimes_movie_id", "showtimes", ["movie_id"])
    op.create_index("ix_showtimes_created_at", "showtimes", ["created_at"])
    op.create_index("ix_showtimes_movie_starts_at", "showtimes", ["movie_id", "starts_at"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("showtime_id", sa.Integer(), sa.ForeignKey("showtimes.id"), nullable=False),
        sa.Column("movie_title", sa.String(255), nullable=False),
        sa.Column("cinema", sa.String(255), nullable=False, server_default=""),
        sa.Column("ticket_count", sa.Integer(), nullable=False),
        sa.Column("total_price", sa.Integer(), nullable=False),
        sa.Column("payment_method", sa.String(10), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("ticket_count > 0", name="check_booking_ticket_count_positive"),
        sa.CheckConstraint("total_price >= 0", name="check_booking_total_price_non_negative"),
        sa.CheckConstraint("payment_method IN ('Cash', 'Card')", name="check_booking_payment_method"),
    )
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_showtime_id", "bookings", ["showtime_id"])
    # History query: WHERE user_id = ? ORDER BY created_at DESC
    op.create_index("ix_bookings_user_created", "bookings", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("showtimes")
    op.drop_table("movies")
    op.drop_table("users")
