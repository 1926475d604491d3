"""Create location_cache and api_audit_logs tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

import sqlalchemy as sa
from alembic import op

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS postgis")

    # Location cache (normalized address is the only key)
    op.create_table(
        "location_cache",
        sa.Column("address", sa.String(), nullable=False),
        sa.Column("location_name", sa.String(), nullable=True),
        sa.Column("formatted_address", sa.String(), nullable=True),
        sa.Column("latitude", sa.Double(), nullable=True),
        sa.Column("longitude", sa.Double(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("address"),
    )
    # Geography expression index backing the 50 m proximity lookup
    op.execute(
        "CREATE INDEX ix_location_cache_geog ON location_cache USING GIST "
        "((ST_SetSRID(ST_MakePoint(longitude, latitude), 4326)::geography)) "
        "WHERE latitude IS NOT NULL AND longitude IS NOT NULL AND location_name IS NOT NULL"
    )

    # API usage audit
    op.create_table(
        "api_audit_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("api_type", sa.String(20), nullable=False),
        sa.Column("endpoint_url", sa.String(255), nullable=True),
        sa.Column("request_query", sa.Text(), nullable=True),
        sa.Column("response_status", sa.String(50), nullable=True),
        sa.Column("cache_hit", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("correlation_id", sa.String(100), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_api_audit_logs_created_at", "api_audit_logs", ["created_at"])
    op.create_index("ix_api_audit_logs_api_type", "api_audit_logs", ["api_type"])
    op.create_index("ix_api_audit_logs_correlation_id", "api_audit_logs", ["correlation_id"])


def downgrade() -> None:
    op.drop_index("ix_api_audit_logs_correlation_id", table_name="api_audit_logs")
    op.drop_index("ix_api_audit_logs_api_type", table_name="api_audit_logs")
    op.drop_index("ix_api_audit_logs_created_at", table_name="api_audit_logs")
    op.drop_table("api_audit_logs")
    op.execute("DROP INDEX IF EXISTS ix_location_cache_geog")
    op.drop_table("location_cache")
