"""appointment series and shift overrides

Revision ID: 0002_series_overrides
Revises: 0001_initial
Create Date: 2026-10-19 15:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0002_series_overrides'
down_revision: Union[str, Sequence[str], None] = '0001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    with op.batch_alter_table('appointments') as batch_op:
        batch_op.add_column(sa.Column('series_id', sa.Uuid(), nullable=True))
    op.create_index('ix_appointments_series_id', 'appointments', ['series_id'])

    op.create_table(
        'work_overrides',
        sa.Column('work_override_id', sa.Uuid(), primary_key=True),
        sa.Column('employee_id', sa.Uuid(), sa.ForeignKey('employees.employee_id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('new_end_time', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('employee_id', 'date', name='uq_work_override_employee_date'),
    )
    op.create_index('ix_work_overrides_employee_id', 'work_overrides', ['employee_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_work_overrides_employee_id', table_name='work_overrides')
    op.drop_table('work_overrides')
    op.drop_index('ix_appointments_series_id', table_name='appointments')
    with op.batch_alter_table('appointments') as batch_op:
        batch_op.drop_column('series_id')
