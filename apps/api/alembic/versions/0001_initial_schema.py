"""initial studio booking schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'employees',
        sa.Column('employee_id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=False, unique=True),
        sa.Column('role', sa.Enum('employee', 'admin', name='employee_role'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'working_hours_rules',
        sa.Column('rule_id', sa.Uuid(), primary_key=True),
        sa.Column('employee_id', sa.Uuid(), sa.ForeignKey('employees.employee_id', ondelete='CASCADE'), nullable=False),
        sa.Column('weekday', sa.SmallInteger(), nullable=False),
        sa.Column('kind', sa.Enum('fixed', 'interval', 'custom', name='working_hours_kind'), nullable=False),
        sa.Column('start_time', sa.String(5), nullable=True),
        sa.Column('end_time', sa.String(5), nullable=True),
        sa.Column('interval_minutes', sa.Integer(), nullable=True),
        sa.Column('intervals', sa.JSON(), nullable=True),
        sa.Column('position', sa.SmallInteger(), nullable=False),
    )
    op.create_index('ix_working_hours_rules_employee_id', 'working_hours_rules', ['employee_id'])

    op.create_table(
        'employee_time_off',
        sa.Column('time_off_id', sa.Uuid(), primary_key=True),
        sa.Column('employee_id', sa.Uuid(), sa.ForeignKey('employees.employee_id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.Enum('pending', 'approved', 'rejected', name='time_off_status'), nullable=False),
        sa.Column('reason', sa.String(), nullable=True),
        sa.Column('batch_id', sa.Uuid(), nullable=True),
        sa.Column('reviewed_by', sa.Uuid(), sa.ForeignKey('employees.employee_id', ondelete='SET NULL'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('employee_id', 'date', name='uq_time_off_employee_date'),
    )
    op.create_index('ix_employee_time_off_employee_id', 'employee_time_off', ['employee_id'])
    op.create_index('ix_employee_time_off_batch_id', 'employee_time_off', ['batch_id'])

    op.create_table(
        'appointments',
        sa.Column('appointment_id', sa.Uuid(), primary_key=True),
        sa.Column('employee_id', sa.Uuid(), sa.ForeignKey('employees.employee_id', ondelete='CASCADE'), nullable=False),
        sa.Column('customer_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('detail', sa.Text(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('pending', 'accepted', 'rejected', 'cancelled', 'completed', name='appointment_status'),
            nullable=False,
        ),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_appointments_employee_id', 'appointments', ['employee_id'])
    op.create_index('ix_appointments_start_time', 'appointments', ['start_time'])

    op.create_table(
        'appointment_history',
        sa.Column('history_id', sa.Uuid(), primary_key=True),
        sa.Column('appointment_id', sa.Uuid(), sa.ForeignKey('appointments.appointment_id', ondelete='CASCADE'), nullable=False),
        sa.Column('field_changed', sa.String(), nullable=False),
        sa.Column('old_value', sa.String(), nullable=True),
        sa.Column('new_value', sa.String(), nullable=True),
        sa.Column('changed_by', sa.Uuid(), sa.ForeignKey('employees.employee_id', ondelete='SET NULL'), nullable=True),
        sa.Column('changed_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_appointment_history_appointment_id', 'appointment_history', ['appointment_id'])

    op.create_table(
        'device_tokens',
        sa.Column('device_token_id', sa.Uuid(), primary_key=True),
        sa.Column('employee_id', sa.Uuid(), sa.ForeignKey('employees.employee_id', ondelete='CASCADE'), nullable=False),
        sa.Column('token', sa.String(), nullable=False, unique=True),
        sa.Column('platform', sa.String(), nullable=True),
        sa.Column('enabled', sa.Boolean(), nullable=False),
        sa.Column('last_seen', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_device_tokens_employee_id', 'device_tokens', ['employee_id'])

    op.create_table(
        'work_shifts',
        sa.Column('work_shift_id', sa.Uuid(), primary_key=True),
        sa.Column('employee_id', sa.Uuid(), sa.ForeignKey('employees.employee_id', ondelete='CASCADE'), nullable=False),
        sa.Column('clock_in', sa.DateTime(timezone=True), nullable=False),
        sa.Column('clock_out', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_work_shifts_employee_id', 'work_shifts', ['employee_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('work_shifts')
    op.drop_table('device_tokens')
    op.drop_table('appointment_history')
    op.drop_table('appointments')
    op.drop_table('employee_time_off')
    op.drop_table('working_hours_rules')
    op.drop_table('employees')
    sa.Enum(name='appointment_status').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='time_off_status').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='working_hours_kind').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='employee_role').drop(op.get_bind(), checkfirst=True)
