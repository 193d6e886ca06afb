"""initial cupboard schema

Revision ID: 4f2a9c1d7e30
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f2a9c1d7e30"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
            onupdate=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("name", sa.String(255), nullable=True),
        *_timestamps(),
    )

    # Receipt-derived running statistics, one row per user and normalized item name
    op.create_table(
        "purchase_history",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("item_name", sa.String(255), nullable=False),
        sa.Column("last_purchased", sa.Date(), nullable=False),
        sa.Column("purchase_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("avg_quantity", sa.String(50), nullable=True),
        sa.Column("avg_frequency_days", sa.Integer(), nullable=True),
        sa.Column("estimated_deplete_date", sa.Date(), nullable=True),
        sa.Column("user_override_date", sa.Date(), nullable=True),
        sa.Column("user_shelf_life_days", sa.Integer(), nullable=True),
        sa.Column("user_quantity_override", sa.String(50), nullable=True),
        sa.Column("is_depleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "item_name", name="uq_purchase_history_user_item"),
    )

    op.create_table(
        "cupboard_items",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("item_name", sa.String(255), nullable=False),
        sa.Column("quantity", sa.String(50), nullable=True),
        sa.Column("unit", sa.String(50), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("added_date", sa.Date(), nullable=False),
        sa.Column("shelf_life_days", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_depleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        "receipts",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("store_name", sa.String(255), nullable=True),
        sa.Column("purchase_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("items_recorded", sa.Integer(), nullable=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "receipt_items",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column(
            "receipt_id", sa.Integer(), sa.ForeignKey("receipts.id"), nullable=False, index=True
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("normalized_name", sa.String(255), nullable=False, index=True),
        sa.Column("quantity", sa.String(50), nullable=True),
        sa.Column("unit", sa.String(50), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "shopping_lists",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true(), index=True),
        *_timestamps(),
    )
    op.create_index(
        "uq_shopping_lists_user_active",
        "shopping_lists",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("is_active"),
        sqlite_where=sa.text("is_active"),
    )

    op.create_table(
        "shopping_list_items",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column(
            "shopping_list_id",
            sa.Integer(),
            sa.ForeignKey("shopping_lists.id"),
            nullable=False,
            index=True,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("quantity", sa.String(50), nullable=True),
        sa.Column("unit", sa.String(50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("checked", sa.Boolean(), nullable=True, index=True),
        sa.Column("checked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("shopping_list_items")
    op.drop_index("uq_shopping_lists_user_active", table_name="shopping_lists")
    op.drop_table("shopping_lists")
    op.drop_table("receipt_items")
    op.drop_table("receipts")
    op.drop_table("cupboard_items")
    op.drop_table("purchase_history")
    op.drop_table("users")
