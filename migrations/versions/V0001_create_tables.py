"""Create users, orphanages and images tables.

Revision ID: V0001
Revises:
Create Date: 2026-10-16 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "V0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "orphanages",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("about", sa.String(300), nullable=False),
        sa.Column("instructions", sa.Text(), nullable=False),
        sa.Column("opening_hours", sa.String(255), nullable=False),
        sa.Column("open_on_weekends", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("pending", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_orphanages"),
        sa.CheckConstraint("latitude BETWEEN -90 AND 90", name="ck_orphanages_latitude_range"),
        sa.CheckConstraint("longitude BETWEEN -180 AND 180", name="ck_orphanages_longitude_range"),
    )
    op.create_index("ix_orphanages_name", "orphanages", ["name"])
    op.create_index("ix_orphanages_pending", "orphanages", ["pending"])

    op.create_table(
        "images",
        sa.Column("id", sa.Integer(), autoincrement=True),
        sa.Column("path", sa.String(512), nullable=False),
        sa.Column("orphanage_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_images"),
        sa.ForeignKeyConstraint(
            ["orphanage_id"],
            ["orphanages.id"],
            name="fk_images_orphanage_id_orphanages",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_images_orphanage_id", "images", ["orphanage_id"])


def downgrade() -> None:
    op.drop_index("ix_images_orphanage_id", table_name="images")
    op.drop_table("images")
    op.drop_index("ix_orphanages_pending", table_name="orphanages")
    op.drop_index("ix_orphanages_name", table_name="orphanages")
    op.drop_table("orphanages")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
