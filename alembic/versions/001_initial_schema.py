"""Initial database schema

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-19

Creates the itineraries table.
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create initial database schema."""

    op.create_table(
        "itineraries",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("destination", sa.String(255), nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("interests", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("budget", sa.String(20), nullable=False),
        sa.Column("pace", sa.String(20), nullable=False),
        sa.Column("days", postgresql.JSONB(astext_type=sa.Text()), nullable=False,
                  comment="Day-by-day plan (ItineraryDay list)"),
        sa.Column("flight_data", postgresql.JSONB(astext_type=sa.Text()), nullable=True,
                  comment="Flight offers snapshot from generation time"),
        sa.Column("hotel_data", postgresql.JSONB(astext_type=sa.Text()), nullable=True,
                  comment="Hotel offers snapshot from generation time"),
        sa.Column("weather_data", postgresql.JSONB(astext_type=sa.Text()), nullable=True,
                  comment="Weather forecast snapshot from generation time"),
        sa.Column("total_cost", sa.String(32), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_itineraries"),
        sa.CheckConstraint("end_date >= start_date", name="ck_itineraries_valid_date_range"),
        sa.CheckConstraint(
            "budget IN ('budget', 'mid-range', 'luxury')",
            name="ck_itineraries_budget_level",
        ),
        sa.CheckConstraint(
            "pace IN ('relaxed', 'moderate', 'packed')",
            name="ck_itineraries_trip_pace",
        ),
    )

    op.create_index("ix_itineraries_destination", "itineraries", ["destination"])
    op.create_index("ix_itineraries_created_at", "itineraries", ["created_at"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("ix_itineraries_created_at", table_name="itineraries")
    op.drop_index("ix_itineraries_destination", table_name="itineraries")
    op.drop_table("itineraries")
