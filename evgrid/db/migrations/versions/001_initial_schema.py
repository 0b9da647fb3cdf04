"""
Initial schema: telemetry history, current status and mapping tables.

Creates the two append-only history tables with their (device id,
timestamp) range-scan indexes, the two single-row-per-device status
tables, and the vehicle-meter mapping table.

Revision ID: 001
Revises: None
Create Date: 2026-10-02

CHANGELOG:
- 2026-10-12: Index vehicle_meter_mapping.meter_id (STORY-009)
- 2026-10-02: Initial creation (STORY-002)

TODO:
- None
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# Revision identifiers used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all telemetry tables and indexes."""
    op.create_table(
        "vehicle_telemetry_history",
        sa.Column("id", sa.BigInteger(), sa.Identity(always=False), nullable=False),
        sa.Column("vehicle_id", sa.Text(), nullable=False),
        sa.Column("soc", sa.Double(), nullable=False),
        sa.Column("kwh_delivered_dc", sa.Double(), nullable=False),
        sa.Column("battery_temp", sa.Double(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_vehicle_telemetry_history_vehicle_id_timestamp",
        "vehicle_telemetry_history",
        ["vehicle_id", "timestamp"],
    )

    op.create_table(
        "meter_telemetry_history",
        sa.Column("id", sa.BigInteger(), sa.Identity(always=False), nullable=False),
        sa.Column("meter_id", sa.Text(), nullable=False),
        sa.Column("kwh_consumed_ac", sa.Double(), nullable=False),
        sa.Column("voltage", sa.Double(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_meter_telemetry_history_meter_id_timestamp",
        "meter_telemetry_history",
        ["meter_id", "timestamp"],
    )

    op.create_table(
        "current_vehicle_status",
        sa.Column("vehicle_id", sa.Text(), nullable=False),
        sa.Column("soc", sa.Double(), nullable=False),
        sa.Column("last_kwh_delivered_dc", sa.Double(), nullable=False),
        sa.Column("battery_temp", sa.Double(), nullable=False),
        sa.Column("last_updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("vehicle_id"),
    )

    op.create_table(
        "current_meter_status",
        sa.Column("meter_id", sa.Text(), nullable=False),
        sa.Column("last_kwh_consumed_ac", sa.Double(), nullable=False),
        sa.Column("voltage", sa.Double(), nullable=False),
        sa.Column("last_updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("meter_id"),
    )

    op.create_table(
        "vehicle_meter_mapping",
        sa.Column("vehicle_id", sa.Text(), nullable=False),
        sa.Column("meter_id", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("vehicle_id"),
    )
    op.create_index(
        "ix_vehicle_meter_mapping_meter_id",
        "vehicle_meter_mapping",
        ["meter_id"],
    )


def downgrade() -> None:
    """Drop all telemetry tables (indexes go with them)."""
    op.drop_table("vehicle_meter_mapping")
    op.drop_table("current_meter_status")
    op.drop_table("current_vehicle_status")
    op.drop_table("meter_telemetry_history")
    op.drop_table("vehicle_telemetry_history")
