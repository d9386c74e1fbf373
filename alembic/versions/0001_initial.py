"""initial wardrobe schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

from wardrobe_project.db.orm_models import GUID

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

GARMENT_TYPES = ("TOP", "BOTTOM", "DRESS", "OUTERWEAR", "SHOES", "ACCESSORY", "UNDERWEAR", "SWIMWEAR", "SPORTSWEAR")
OCCASIONS = ("CASUAL", "WORK", "FORMAL", "PARTY", "SPORTS", "BEACH", "DATE_NIGHT", "TRAVEL")
SEASONS = ("SPRING", "SUMMER", "FALL", "WINTER", "ALL_SEASON")
LAUNDRY_STATUSES = ("IN_WARDROBE", "IN_LAUNDRY", "CLEAN", "AWAY")
HISTORY_ACTIONS = ("CREATED", "WORN", "MARKED_LAUNDRY", "RETURNED", "EDITED", "FAVORITED", "UNFAVORITED", "DELETED")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("role", sa.Enum("USER", "ADMIN", name="role"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "items",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("user_id", GUID(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("colors", sa.JSON(), nullable=False),
        sa.Column("type", sa.Enum(*GARMENT_TYPES, name="garmenttype"), nullable=False),
        sa.Column("occasion", sa.Enum(*OCCASIONS, name="occasion"), nullable=False),
        sa.Column("occasions", sa.JSON(), nullable=False),
        sa.Column("season", sa.Enum(*SEASONS, name="season"), nullable=False),
        sa.Column("filename", sa.String(), nullable=False),
        sa.Column("object_url", sa.String(), nullable=False),
        sa.Column("thumbnail_url", sa.String(), nullable=True),
        sa.Column("processed_url", sa.String(), nullable=True),
        sa.Column("laundry_status", sa.Enum(*LAUNDRY_STATUSES, name="laundrystatus"), nullable=False),
        sa.Column("usage_count", sa.Integer(), nullable=False),
        sa.Column("is_favorite", sa.Boolean(), nullable=False),
        sa.Column("moderated", sa.Boolean(), nullable=False),
        sa.Column("moderation_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_items_user_id", "items", ["user_id"])
    op.create_index("ix_items_type", "items", ["type"])
    op.create_index("ix_items_laundry_status", "items", ["laundry_status"])

    op.create_table(
        "item_history",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("item_id", GUID(), nullable=False),
        sa.Column("action", sa.Enum(*HISTORY_ACTIONS, name="historyaction"), nullable=False),
        sa.Column("performed_by", GUID(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_item_history_item_id", "item_history", ["item_id"])
    op.create_index("ix_item_history_action", "item_history", ["action"])
    op.create_index("ix_item_history_timestamp", "item_history", ["timestamp"])

    op.create_table(
        "audit_logs",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("user_id", GUID(), nullable=True),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("payload", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])

    op.create_table(
        "outfits",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("user_id", GUID(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("thumbnail_url", sa.String(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_outfits_user_id", "outfits", ["user_id"])

    op.create_table(
        "outfit_items",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("outfit_id", GUID(), sa.ForeignKey("outfits.id"), nullable=False),
        sa.Column("item_id", GUID(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
    )
    op.create_index("ix_outfit_items_outfit_id", "outfit_items", ["outfit_id"])
    op.create_index("ix_outfit_items_item_id", "outfit_items", ["item_id"])


def downgrade() -> None:
    op.drop_table("outfit_items")
    op.drop_table("outfits")
    op.drop_table("audit_logs")
    op.drop_table("item_history")
    op.drop_table("items")
    op.drop_table("users")
