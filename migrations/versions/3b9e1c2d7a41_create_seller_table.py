"""create seller table

Revision ID: 3b9e1c2d7a41
Revises:
Create Date: 2026-10-16 10:12:31.204518

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3b9e1c2d7a41'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_json = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade():
    op.create_table(
        "seller",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("public_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("shop_name", sa.String(255), nullable=False),
        sa.Column("shop_description", sa.Text(), nullable=True),
        sa.Column("shop_image", sa.String(1024), nullable=True),
        sa.Column("business_type", sa.String(16), nullable=False),
        sa.Column("commission_rate", sa.Float(), nullable=False),
        sa.Column("cod_enabled", sa.Boolean(), nullable=False),
        sa.Column("cod_commission_rate", sa.Float(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("status_reason", sa.Text(), nullable=True),
        sa.Column("status_changed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status_changed_by", sa.String(64), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("suspended_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("bank_details", _json, nullable=False),
        sa.Column("address", _json, nullable=False),
        sa.Column("total_products", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("active_products", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_orders", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("completed_orders", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cancelled_orders", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_earnings", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("pending_earnings", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("withdrawn_amount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("average_rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_ratings", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("response_rate", sa.Float(), nullable=False, server_default="0"),
        sa.Column("shipping_accuracy", sa.Float(), nullable=False, server_default="0"),
        sa.Column("gst_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("pan_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("bank_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("address_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("document_submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("document_verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_activity_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
    )
    op.create_index("ix_seller_public_id", "seller", ["public_id"], unique=True)
    op.create_index("ix_seller_user_id", "seller", ["user_id"], unique=True)
    op.create_index("ix_seller_status", "seller", ["status"])
    op.create_index("ix_seller_average_rating", "seller", ["average_rating"])


def downgrade():
    op.drop_index("ix_seller_average_rating", table_name="seller")
    op.drop_index("ix_seller_status", table_name="seller")
    op.drop_index("ix_seller_user_id", table_name="seller")
    op.drop_index("ix_seller_public_id", table_name="seller")
    op.drop_table("seller")
