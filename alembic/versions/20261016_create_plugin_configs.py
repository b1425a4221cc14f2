"""Create plugin_configs table.

Revision ID: 3c9a6e2f1d04
Revises:
Create Date: 2026-10-16
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "3c9a6e2f1d04"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "plugin_configs",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("app_id", sa.String(length=64), nullable=False),
        sa.Column("key", sa.String(length=100), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_by", sa.String(length=150), nullable=True),
        sa.UniqueConstraint("app_id", "key", name="uq_plugin_config_app_key"),
    )
    op.create_index("ix_plugin_configs_id", "plugin_configs", ["id"])
    op.create_index("ix_plugin_configs_app_id", "plugin_configs", ["app_id"])


def downgrade() -> None:
    op.drop_index("ix_plugin_configs_app_id", table_name="plugin_configs")
    op.drop_index("ix_plugin_configs_id", table_name="plugin_configs")
    op.drop_table("plugin_configs")
