"""vehicles, boats and refuelings

Revision ID: b2d1fleet002
Revises: a1c0supply01
Create Date: 2026-10-18

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'b2d1fleet002'
down_revision = 'a1c0supply01'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'vehicles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('plate', sa.String(length=10), nullable=False, unique=True),
        sa.Column('model', sa.String(length=120), nullable=False),
        sa.Column('odometer', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_vehicles_branch_id', 'vehicles', ['branch_id'])

    op.create_table(
        'boats',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('registration', sa.String(length=40), nullable=False, unique=True),
        sa.Column('model', sa.String(length=120), nullable=True),
        sa.Column('engine_hours', sa.Numeric(10, 1), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_boats_branch_id', 'boats', ['branch_id'])

    op.create_table(
        'refuelings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('vehicle_id', sa.Integer(), sa.ForeignKey('vehicles.id'), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('liters', sa.Numeric(10, 3), nullable=False),
        sa.Column('price_per_liter', sa.Numeric(10, 2), nullable=False),
        sa.Column('total_price', sa.Numeric(14, 2), nullable=False),
        sa.Column('odometer', sa.Integer(), nullable=False),
        sa.Column('fueled_by', sa.String(length=120), nullable=False),
        sa.Column('registered_by_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('fueled_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_refuelings_vehicle_id', 'refuelings', ['vehicle_id'])
    op.create_index('ix_refuelings_branch_id', 'refuelings', ['branch_id'])
    op.create_index('ix_refuelings_fueled_at', 'refuelings', ['fueled_at'])

    op.create_table(
        'boat_refuelings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('boat_id', sa.Integer(), sa.ForeignKey('boats.id'), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('liters', sa.Numeric(10, 3), nullable=False),
        sa.Column('price_per_liter', sa.Numeric(10, 2), nullable=False),
        sa.Column('total_price', sa.Numeric(14, 2), nullable=False),
        sa.Column('engine_hours', sa.Numeric(10, 1), nullable=False),
        sa.Column('notes', sa.String(length=255), nullable=True),
        sa.Column('fueled_by', sa.String(length=120), nullable=False),
        sa.Column('registered_by_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('fueled_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_boat_refuelings_boat_id', 'boat_refuelings', ['boat_id'])
    op.create_index('ix_boat_refuelings_branch_id', 'boat_refuelings', ['branch_id'])
    op.create_index('ix_boat_refuelings_fueled_at', 'boat_refuelings', ['fueled_at'])


def downgrade():
    op.drop_index('ix_boat_refuelings_fueled_at', table_name='boat_refuelings')
    op.drop_index('ix_boat_refuelings_branch_id', table_name='boat_refuelings')
    op.drop_index('ix_boat_refuelings_boat_id', table_name='boat_refuelings')
    op.drop_table('boat_refuelings')

    op.drop_index('ix_refuelings_fueled_at', table_name='refuelings')
    op.drop_index('ix_refuelings_branch_id', table_name='refuelings')
    op.drop_index('ix_refuelings_vehicle_id', table_name='refuelings')
    op.drop_table('refuelings')

    op.drop_index('ix_boats_branch_id', table_name='boats')
    op.drop_table('boats')

    op.drop_index('ix_vehicles_branch_id', table_name='vehicles')
    op.drop_table('vehicles')
