"""create_attendance_and_gps_logs

Revision ID: 3f1c2a9d7b40
Revises:
Create Date: 2025-02-03 09:12:41

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the session (attendance) and GPS fix (gps_logs) tables.

    gps_logs is read per session in timestamp order by distance
    verification, hence the composite (attendance_id, timestamp) index.
    """
    print("[MIGRATION] Creating attendance table...")

    op.create_table(
        'attendance',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=100), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='active', nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('start_lat', sa.Float(), nullable=False),
        sa.Column('start_lon', sa.Float(), nullable=False),
        sa.Column('end_lat', sa.Float(), nullable=True),
        sa.Column('end_lon', sa.Float(), nullable=True),
        sa.Column('verified_km', sa.Float(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("status IN ('active', 'completed')", name='check_attendance_status'),
        sa.CheckConstraint("verified_km >= 0", name='check_verified_km_non_negative'),
        sa.CheckConstraint("end_time IS NULL OR end_time >= start_time", name='check_attendance_time_order'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_attendance_user_id', 'attendance', ['user_id'])
    op.create_index('idx_attendance_user_start_time', 'attendance', ['user_id', 'start_time'])

    print("[MIGRATION] Creating gps_logs table...")

    op.create_table(
        'gps_logs',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('attendance_id', sa.Integer(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint("latitude >= -90 AND latitude <= 90", name='check_gps_logs_lat_range'),
        sa.CheckConstraint("longitude >= -180 AND longitude <= 180", name='check_gps_logs_lon_range'),
        sa.ForeignKeyConstraint(['attendance_id'], ['attendance.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_gps_logs_attendance_id', 'gps_logs', ['attendance_id'])
    op.create_index('idx_gps_logs_attendance_timestamp', 'gps_logs', ['attendance_id', 'timestamp'])

    print("[MIGRATION] ✅ attendance and gps_logs created")


def downgrade() -> None:
    print("[MIGRATION] Dropping gps_logs and attendance...")

    op.drop_index('idx_gps_logs_attendance_timestamp', table_name='gps_logs')
    op.drop_index('ix_gps_logs_attendance_id', table_name='gps_logs')
    op.drop_table('gps_logs')
    op.drop_index('idx_attendance_user_start_time', table_name='attendance')
    op.drop_index('ix_attendance_user_id', table_name='attendance')
    op.drop_table('attendance')

    print("[MIGRATION] ❌ attendance and gps_logs dropped")
