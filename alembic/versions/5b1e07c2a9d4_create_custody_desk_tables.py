"""create_custody_desk_tables

Revision ID: 5b1e07c2a9d4
Revises:
Create Date: 2026-10-19 10:12:41.204113
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5b1e07c2a9d4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


movement_kind = sa.Enum("CHECKOUT", "INDEFINITE", name="movement_kind")
deadline_status = sa.Enum("PENDING", "LATE", "CLOSED", name="deadline_status")


def upgrade() -> None:
    """Upgrade schema."""

    # ITEMS
    op.create_table(
        "items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("asset_tag", sa.String(length=255), nullable=True),
        sa.Column("description", sa.String(length=1000), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_items_id", "items", ["id"], unique=False)

    # STOCK
    op.create_table(
        "stock_records",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "item_id",
            sa.Integer(),
            sa.ForeignKey("items.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("total", sa.Integer(), nullable=False),
        sa.Column("available", sa.Integer(), nullable=False),
        sa.CheckConstraint("total >= 0", name="ck_stock_total_non_negative"),
        sa.CheckConstraint("available >= 0", name="ck_stock_available_non_negative"),
    )
    op.create_index("ix_stock_records_id", "stock_records", ["id"], unique=False)
    op.create_index("ix_stock_records_item_id", "stock_records", ["item_id"], unique=True)

    # MOVEMENTS
    op.create_table(
        "movements",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "item_id",
            sa.Integer(),
            sa.ForeignKey("items.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("item_name", sa.String(length=512), nullable=True),
        sa.Column("requester", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("kind", movement_kind, nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("checked_out_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("returned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deadline_status", deadline_status, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_movement_quantity_positive"),
        sa.CheckConstraint(
            "(kind = 'CHECKOUT' AND due_date IS NOT NULL) "
            "OR (kind = 'INDEFINITE' AND due_date IS NULL)",
            name="ck_movement_kind_due_date",
        ),
    )
    op.create_index("ix_movements_id", "movements", ["id"], unique=False)
    op.create_index("ix_movements_item_id", "movements", ["item_id"], unique=False)
    op.create_index(
        "ix_movements_item_outstanding",
        "movements",
        ["item_id", "returned_at", "checked_out_at"],
        unique=False,
    )
    op.create_index(
        "ix_movements_sweep",
        "movements",
        ["returned_at", "kind", "deadline_status"],
        unique=False,
    )

    # AUDIT
    op.create_table(
        "audit_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("item_id", sa.Integer(), nullable=True),
        sa.Column("actor", sa.String(length=255), nullable=False),
        sa.Column("detail", sa.Text(), nullable=True),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_audit_entries_id", "audit_entries", ["id"], unique=False)
    op.create_index("ix_audit_entries_item_id", "audit_entries", ["item_id"], unique=False)
    op.create_index("ix_audit_entries_recorded_at", "audit_entries", ["recorded_at"], unique=False)
    op.create_index(
        "ix_audit_entries_item_recorded",
        "audit_entries",
        ["item_id", "recorded_at"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_audit_entries_item_recorded", table_name="audit_entries")
    op.drop_index("ix_audit_entries_recorded_at", table_name="audit_entries")
    op.drop_index("ix_audit_entries_item_id", table_name="audit_entries")
    op.drop_index("ix_audit_entries_id", table_name="audit_entries")
    op.drop_table("audit_entries")

    op.drop_index("ix_movements_sweep", table_name="movements")
    op.drop_index("ix_movements_item_outstanding", table_name="movements")
    op.drop_index("ix_movements_item_id", table_name="movements")
    op.drop_index("ix_movements_id", table_name="movements")
    op.drop_table("movements")

    op.drop_index("ix_stock_records_item_id", table_name="stock_records")
    op.drop_index("ix_stock_records_id", table_name="stock_records")
    op.drop_table("stock_records")

    op.drop_index("ix_items_id", table_name="items")
    op.drop_table("items")

    deadline_status.drop(op.get_bind(), checkfirst=True)
    movement_kind.drop(op.get_bind(), checkfirst=True)
