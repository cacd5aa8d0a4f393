"""Initial schema: catalog, route pricing, bookings, inquiries, users, settings.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TRIP_TYPES = "('ONE_WAY', 'ROUND_TRIP', 'LOCAL', 'AIRPORT')"


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _trip_type(name: str):
    return [
        sa.Column("trip_type", sa.String(20), nullable=False),
        sa.CheckConstraint(f"trip_type IN {TRIP_TYPES}", name=name),
    ]


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default=sa.text("'customer'")),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint("role IN ('admin', 'customer')", name="user_role"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Catalog
    op.create_table(
        "cities",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("state", sa.String(120), nullable=False),
        sa.Column("is_airport", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_cities_id", "cities", ["id"])
    # City search filters on active and orders by name
    op.create_index("ix_cities_active_name", "cities", ["active", "name"])

    op.create_table(
        "cab_types",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("seats", sa.Integer(), nullable=False),
        sa.Column("luggage", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("features", sa.JSON(), nullable=False),
        sa.Column("image", sa.String(500), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("name", name="uq_cab_types_name"),
    )
    op.create_index("ix_cab_types_id", "cab_types", ["id"])

    # Routes and prices
    op.create_table(
        "city_routes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("from_city_id", sa.Integer(), sa.ForeignKey("cities.id"), nullable=False),
        sa.Column("to_city_id", sa.Integer(), sa.ForeignKey("cities.id"), nullable=False),
        sa.Column("distance_km", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("duration_min", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("trip_types", sa.JSON(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.UniqueConstraint("from_city_id", "to_city_id", name="uq_city_route_pair"),
        sa.CheckConstraint("from_city_id <> to_city_id", name="check_route_distinct_cities"),
        sa.CheckConstraint("distance_km >= 0", name="check_route_distance_non_negative"),
        sa.CheckConstraint("duration_min >= 0", name="check_route_duration_non_negative"),
    )
    op.create_index("ix_city_routes_id", "city_routes", ["id"])
    op.create_index("ix_city_routes_from_city_id", "city_routes", ["from_city_id"])
    op.create_index("ix_city_routes_to_city_id", "city_routes", ["to_city_id"])

    op.create_table(
        "route_pricing",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("route_id", sa.Integer(), sa.ForeignKey("city_routes.id"), nullable=False),
        sa.Column("from_city_id", sa.Integer(), sa.ForeignKey("cities.id"), nullable=False),
        sa.Column("to_city_id", sa.Integer(), sa.ForeignKey("cities.id"), nullable=False),
        sa.Column("cab_type_id", sa.Integer(), sa.ForeignKey("cab_types.id"), nullable=False),
        *_trip_type("route_pricing_trip_type"),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.UniqueConstraint(
            "from_city_id", "to_city_id", "cab_type_id", "trip_type",
            name="uq_route_pricing_key",
        ),
        sa.CheckConstraint("price >= 0", name="check_route_price_non_negative"),
    )
    op.create_index("ix_route_pricing_id", "route_pricing", ["id"])
    op.create_index("ix_route_pricing_route_id", "route_pricing", ["route_id"])
    op.create_index("ix_route_pricing_cab_type_id", "route_pricing", ["cab_type_id"])
    # Availability lookup: route + trip type + active
    op.create_index("ix_route_pricing_lookup", "route_pricing", ["route_id", "trip_type", "active"])

    op.create_table(
        "pricing_rules",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("cab_type_id", sa.Integer(), sa.ForeignKey("cab_types.id"), nullable=False),
        *_trip_type("pricing_rule_trip_type"),
        sa.Column("base_fare", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("per_km", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("per_minute", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("min_km_per_day", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("cab_type_id", "trip_type", name="uq_pricing_rule_cab_trip"),
        sa.CheckConstraint(
            "base_fare >= 0 AND per_km >= 0 AND per_minute >= 0",
            name="check_pricing_rule_non_negative",
        ),
    )
    op.create_index("ix_pricing_rules_id", "pricing_rules", ["id"])
    op.create_index("ix_pricing_rules_cab_type_id", "pricing_rules", ["cab_type_id"])

    # Customer requests
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_trip_type("booking_trip_type"),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("return_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cab_type_id", sa.Integer(), sa.ForeignKey("cab_types.id"), nullable=False),
        sa.Column("from_city_id", sa.Integer(), sa.ForeignKey("cities.id"), nullable=True),
        sa.Column("to_city_id", sa.Integer(), sa.ForeignKey("cities.id"), nullable=True),
        sa.Column("distance_km", sa.Integer(), nullable=True),
        sa.Column("duration_min", sa.Integer(), nullable=True),
        sa.Column("price_quote", sa.Integer(), nullable=False),
        sa.Column("customer_name", sa.String(255), nullable=False),
        sa.Column("customer_phone", sa.String(32), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=False, server_default=sa.text("''")),
        sa.Column("pickup_address", sa.String(500), nullable=False, server_default=sa.text("''")),
        sa.Column("drop_address", sa.String(500), nullable=False, server_default=sa.text("''")),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'in_progress', 'completed', 'cancelled', 'rejected')",
            name="booking_status",
        ),
        sa.CheckConstraint(
            "(from_city_id IS NULL AND to_city_id IS NULL) "
            "OR (from_city_id IS NOT NULL AND to_city_id IS NOT NULL)",
            name="check_booking_cities_paired",
        ),
        sa.CheckConstraint("price_quote >= 0", name="check_booking_price_non_negative"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_cab_type_id", "bookings", ["cab_type_id"])
    op.create_index("ix_bookings_from_city_id", "bookings", ["from_city_id"])
    op.create_index("ix_bookings_to_city_id", "bookings", ["to_city_id"])
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    # Admin lists filter by status bucket, newest first
    op.create_index("ix_bookings_status_created", "bookings", ["status", "created_at"])

    op.create_table(
        "inquiries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_trip_type("inquiry_trip_type"),
        sa.Column("from_location", sa.String(255), nullable=False),
        sa.Column("to_location", sa.String(255), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("customer_name", sa.String(255), nullable=False),
        sa.Column("customer_phone", sa.String(32), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=False, server_default=sa.text("''")),
        sa.Column("pickup_address", sa.String(500), nullable=False, server_default=sa.text("''")),
        sa.Column("drop_address", sa.String(500), nullable=False, server_default=sa.text("''")),
        sa.Column("requirements", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        *_timestamps(),
        sa.CheckConstraint("status IN ('pending', 'closed')", name="inquiry_status"),
    )
    op.create_index("ix_inquiries_id", "inquiries", ["id"])
    op.create_index("ix_inquiries_customer_email", "inquiries", ["customer_email"])
    op.create_index("ix_inquiries_status_created", "inquiries", ["status", "created_at"])

    # Admin-managed configuration
    op.create_table(
        "settings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("key", sa.String(100), nullable=False),
        sa.Column("value_json", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("key", name="uq_settings_key"),
    )
    op.create_index("ix_settings_id", "settings", ["id"])


def downgrade() -> None:
    op.drop_table("settings")
    op.drop_table("inquiries")
    op.drop_table("bookings")
    op.drop_table("pricing_rules")
    op.drop_table("route_pricing")
    op.drop_table("city_routes")
    op.drop_table("cab_types")
    op.drop_table("cities")
    op.drop_table("users")
