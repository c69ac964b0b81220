"""initial_schema

Revision ID: d1e2f3a4b5c6
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = 'd1e2f3a4b5c6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list:
    columns = [sa.Column('created_at', sa.DateTime(timezone=True), nullable=False)]
    if updated:
        columns.append(sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False))
    return columns


def upgrade() -> None:
    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_code', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('department', sa.String(length=128), nullable=True),
        sa.Column('designation', sa.String(length=128), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=64), nullable=True),
        sa.Column('joining_date', sa.Date(), nullable=True),
        sa.Column('status', sa.Enum('Active', 'Inactive', name='employeestatus'), nullable=False),
        sa.Column('exit_date', sa.Date(), nullable=True),
        sa.Column('exit_reason', sa.String(length=255), nullable=True),
        sa.Column('comments', sa.JSON(), nullable=False),
        sa.Column('audit_log', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_employees_id'), 'employees', ['id'], unique=False)
    op.create_index(op.f('ix_employees_employee_code'), 'employees', ['employee_code'], unique=True)

    op.create_table(
        'assets',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('asset_tag', sa.String(length=64), nullable=False),
        sa.Column('serial_number', sa.String(length=128), nullable=False),
        sa.Column('make', sa.String(length=128), nullable=True),
        sa.Column('model', sa.String(length=128), nullable=True),
        sa.Column('asset_type', sa.String(length=128), nullable=True),
        sa.Column('ownership', sa.Enum('Own', 'Rented', name='ownership'), nullable=False),
        sa.Column('purchase_from', sa.String(length=255), nullable=True),
        sa.Column('processor', sa.String(length=128), nullable=True),
        sa.Column('ram', sa.String(length=64), nullable=True),
        sa.Column('storage', sa.String(length=64), nullable=True),
        sa.Column(
            'status',
            sa.Enum('Available', 'Assigned', 'Donated', 'E-Waste', name='assetstatus'),
            nullable=False,
        ),
        sa.Column('assigned_to', sa.Integer(), nullable=True),
        sa.Column('comments', sa.JSON(), nullable=False),
        sa.Column('audit_log', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "(assigned_to IS NULL AND status != 'Assigned') OR (assigned_to IS NOT NULL AND status = 'Assigned')",
            name='ck_assets_assignment_consistent',
        ),
        sa.ForeignKeyConstraint(['assigned_to'], ['employees.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('serial_number'),
    )
    op.create_index(op.f('ix_assets_id'), 'assets', ['id'], unique=False)
    op.create_index(op.f('ix_assets_asset_tag'), 'assets', ['asset_tag'], unique=True)
    op.create_index(op.f('ix_assets_assigned_to'), 'assets', ['assigned_to'], unique=False)

    op.create_table(
        'consumables',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=128), nullable=True),
        sa.Column('unit_type', sa.String(length=64), nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('cost_per_item', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('remarks', sa.String(length=2000), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('initial_quantity', sa.Integer(), nullable=False),
        sa.Column('issue_log', sa.JSON(), nullable=False),
        sa.Column('audit_log', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('quantity >= 0', name='ck_consumables_quantity_non_negative'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_consumables_id'), 'consumables', ['id'], unique=False)

    op.create_table(
        'software',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('version', sa.String(length=64), nullable=True),
        sa.Column('license_key', sa.String(length=255), nullable=True),
        sa.Column('expiry_date', sa.Date(), nullable=True),
        sa.Column('total_licenses', sa.Integer(), nullable=False),
        sa.Column('assigned_to', sa.JSON(), nullable=False),
        sa.Column('audit_log', sa.JSON(), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_software_id'), 'software', ['id'], unique=False)

    op.create_table(
        'cascade_runs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('kind', sa.String(length=64), nullable=False),
        sa.Column('subject_id', sa.Integer(), nullable=True),
        sa.Column('steps', sa.JSON(), nullable=False),
        sa.Column('results', sa.JSON(), nullable=False),
        sa.Column('cursor', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_cascade_runs_id'), 'cascade_runs', ['id'], unique=False)
    op.create_index(op.f('ix_cascade_runs_kind'), 'cascade_runs', ['kind'], unique=False)
    op.create_index(op.f('ix_cascade_runs_status'), 'cascade_runs', ['status'], unique=False)


def downgrade() -> None:
    op.drop_table('cascade_runs')
    op.drop_table('software')
    op.drop_table('consumables')
    op.drop_table('assets')
    op.drop_table('employees')
    # Drop the enum types (needed for PostgreSQL, no-op for SQLite)
    for name in ('assetstatus', 'ownership', 'employeestatus'):
        sa.Enum(name=name).drop(op.get_bind(), checkfirst=True)
