"""Create retention_rule table

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "retention_rule",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("dataset_name", sa.String(256), nullable=True),
        sa.Column("retention_period_in_days", sa.Integer, nullable=False),
        sa.Column("data_storage_name", sa.String(256), nullable=True),
        sa.Column("project_id", sa.String(256), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("version", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("user", sa.String(256), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_index("idx_retention_rule_project", "retention_rule", ["project_id"])
    op.create_index("idx_retention_rule_type_active", "retention_rule", ["type", "is_active"])

    # At most one active rule per (project_id, data_storage_name, type)
    op.create_index(
        "uq_retention_rule_active_business_key",
        "retention_rule",
        ["project_id", "data_storage_name", "type"],
        unique=True,
        postgresql_where=sa.text("is_active"),
        sqlite_where=sa.text("is_active = 1"),
    )


def downgrade() -> None:
    op.drop_index("uq_retention_rule_active_business_key", table_name="retention_rule")
    op.drop_index("idx_retention_rule_type_active", table_name="retention_rule")
    op.drop_index("idx_retention_rule_project", table_name="retention_rule")
    op.drop_table("retention_rule")
