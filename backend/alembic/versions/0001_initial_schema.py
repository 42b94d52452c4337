"""Initial pricing schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
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
    ]


def _tenant_fk() -> sa.Column:
    return sa.Column(
        "tenant_id",
        sa.Uuid(as_uuid=True),
        sa.ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    jsonb_type = postgresql.JSONB(astext_type=sa.Text()).with_variant(
        sa.JSON(), "sqlite"
    )

    op.create_table(
        "tenants",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False, unique=True),
        *_timestamps(),
    )

    op.create_table(
        "rooms",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        _tenant_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("room_code", sa.String(length=50)),
        sa.Column("base_price_per_night", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("min_stay_nights", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("max_stay_nights", sa.Integer()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint("base_price_per_night >= 0", name="ck_rooms_valid_base_price"),
        sa.CheckConstraint("min_stay_nights > 0", name="ck_rooms_valid_min_stay"),
    )
    op.create_index("ix_rooms_tenant_id", "rooms", ["tenant_id"])

    op.create_table(
        "seasonal_rates",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        _tenant_fk(),
        sa.Column(
            "room_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("rooms.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("price_per_night", sa.Numeric(10, 2), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("min_nights", sa.Integer()),
        *_timestamps(),
        sa.CheckConstraint(
            "end_date >= start_date", name="ck_seasonal_rates_valid_date_range"
        ),
        sa.CheckConstraint("price_per_night >= 0", name="ck_seasonal_rates_valid_price"),
    )
    op.create_index("ix_seasonal_rates_tenant_id", "seasonal_rates", ["tenant_id"])
    op.create_index("ix_seasonal_rates_room_id", "seasonal_rates", ["room_id"])
    op.create_index(
        "ix_seasonal_rates_room_window",
        "seasonal_rates",
        ["room_id", "start_date", "end_date"],
    )

    op.create_table(
        "coupons",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        _tenant_fk(),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("discount_type", sa.String(length=20), nullable=False),
        sa.Column("discount_value", sa.Numeric(10, 2), nullable=False),
        sa.Column("applicable_room_ids", jsonb_type, nullable=False),
        sa.Column("valid_from", sa.Date()),
        sa.Column("valid_until", sa.Date()),
        sa.Column("max_uses", sa.Integer()),
        sa.Column("max_uses_per_customer", sa.Integer()),
        sa.Column("current_uses", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("min_booking_amount", sa.Numeric(10, 2)),
        sa.Column("min_nights", sa.Integer()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "code", name="uq_coupons_tenant_code"),
        sa.CheckConstraint("discount_value > 0", name="ck_coupons_valid_discount_value"),
        sa.CheckConstraint(
            "valid_until IS NULL OR valid_from IS NULL OR valid_until >= valid_from",
            name="ck_coupons_valid_date_range",
        ),
    )
    op.create_index("ix_coupons_tenant_id", "coupons", ["tenant_id"])

    op.create_table(
        "coupon_usage",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "coupon_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("coupons.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _tenant_fk(),
        sa.Column("booking_id", sa.Uuid(as_uuid=True)),
        sa.Column("customer_email", sa.String(length=255), nullable=False),
        sa.Column("discount_applied", sa.Numeric(10, 2), nullable=False),
        sa.Column("original_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("final_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column(
            "used_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_coupon_usage_coupon_id", "coupon_usage", ["coupon_id"])
    op.create_index(
        "ix_coupon_usage_coupon_email",
        "coupon_usage",
        ["coupon_id", "customer_email"],
    )


def downgrade() -> None:
    op.drop_index("ix_coupon_usage_coupon_email", table_name="coupon_usage")
    op.drop_index("ix_coupon_usage_coupon_id", table_name="coupon_usage")
    op.drop_table("coupon_usage")
    op.drop_index("ix_coupons_tenant_id", table_name="coupons")
    op.drop_table("coupons")
    op.drop_index("ix_seasonal_rates_room_window", table_name="seasonal_rates")
    op.drop_index("ix_seasonal_rates_room_id", table_name="seasonal_rates")
    op.drop_index("ix_seasonal_rates_tenant_id", table_name="seasonal_rates")
    op.drop_table("seasonal_rates")
    op.drop_index("ix_rooms_tenant_id", table_name="rooms")
    op.drop_table("rooms")
    op.drop_table("tenants")
