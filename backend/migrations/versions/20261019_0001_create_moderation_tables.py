from __future__ import annotations
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("nickname", sa.String(length=120), nullable=True),
        sa.Column("colour", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("xp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("team", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_profiles_user_id", "profiles", ["user_id"])
    op.create_table(
        "activities",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("xp", sa.Integer(), nullable=True),
    )
    op.create_table(
        "user_activity_photos",
        sa.Column("photo_id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("photo_url", sa.Text(), nullable=False),
        sa.Column("uploaded_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("status", sa.SmallInteger(), nullable=False, server_default="0"),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("profile_id", sa.Integer(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("activity_id", sa.Integer(), sa.ForeignKey("activities.id", ondelete="SET NULL"), nullable=True),
        sa.Column("user_activity_id", sa.Integer(), nullable=False),
        # 0 = awaiting review, 1 = approved, 2 = denied
        sa.CheckConstraint("status IN (0, 1, 2)", name="ck_user_activity_photos_status"),
    )
    op.create_index("ix_user_activity_photos_profile_id", "user_activity_photos", ["profile_id"])
    op.create_index("ix_user_activity_photos_activity_id", "user_activity_photos", ["activity_id"])
    op.create_index("ix_user_activity_photos_status_uploaded_at", "user_activity_photos", ["status", "uploaded_at"])

def downgrade() -> None:
    op.drop_index("ix_user_activity_photos_status_uploaded_at", table_name="user_activity_photos")
    op.drop_index("ix_user_activity_photos_activity_id", table_name="user_activity_photos")
    op.drop_index("ix_user_activity_photos_profile_id", table_name="user_activity_photos")
    op.drop_table("user_activity_photos")
    op.drop_table("activities")
    op.drop_index("ix_profiles_user_id", table_name="profiles")
    op.drop_table("profiles")
    op.drop_table("accounts")
