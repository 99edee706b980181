"""initial supply schema: branches, users, catalog, inventory, orders, shipments

Revision ID: a1c0supply01
Revises:
Create Date: 2026-10-18

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1c0supply01'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'branches',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('code', sa.String(length=20), nullable=False, unique=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('is_central', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=180), nullable=False),
        sa.Column('full_name', sa.String(length=120), nullable=False),
        sa.Column('cpf', sa.String(length=14), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('barcode', sa.String(length=60), nullable=True),
        sa.Column('name', sa.String(length=160), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('unit', sa.String(length=20), nullable=False),
        sa.Column('requires_barcode', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_products_barcode', 'products', ['barcode'], unique=True)

    op.create_table(
        'branch_authorizations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('authorized', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('authorized_by_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('authorized_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('branch_id', 'product_id', name='uq_authorization_branch_product'),
    )

    op.create_table(
        'inventories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('location_type', sa.String(length=20), nullable=False),
        sa.Column('location_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('qty', sa.Numeric(14, 3), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('product_id', 'location_type', 'location_id', name='uq_inventory_product_location'),
    )
    op.create_index('ix_inventory_location', 'inventories', ['location_type', 'location_id'])

    op.create_table(
        'stock_movements',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('move_type', sa.String(length=20), nullable=False),
        sa.Column('from_location_type', sa.String(length=20), nullable=True),
        sa.Column('from_location_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=True),
        sa.Column('to_location_type', sa.String(length=20), nullable=True),
        sa.Column('to_location_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=True),
        sa.Column('qty', sa.Numeric(14, 3), nullable=False),
        sa.Column('unit_cost', sa.Numeric(14, 4), nullable=True),
        sa.Column('note', sa.String(length=255), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_movement_product_date', 'stock_movements', ['product_id', 'created_at'])

    op.create_table(
        'purchases',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('quantity', sa.Numeric(14, 3), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('total_price', sa.Numeric(14, 2), nullable=False),
        sa.Column('supplier', sa.String(length=160), nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=False),
        sa.Column('received_by_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_purchases_product_id', 'purchases', ['product_id'])
    op.create_index('ix_purchases_purchase_date', 'purchases', ['purchase_date'])
    op.create_index('ix_purchases_created_at', 'purchases', ['created_at'])

    op.create_table(
        'consumptions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('quantity', sa.Numeric(14, 3), nullable=False),
        sa.Column('consumed_by', sa.String(length=120), nullable=False),
        sa.Column('consumed_by_cpf', sa.String(length=11), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('total_price', sa.Numeric(14, 2), nullable=False),
        sa.Column('registered_by_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('consumed_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_consumptions_product_id', 'consumptions', ['product_id'])
    op.create_index('ix_consumptions_branch_id', 'consumptions', ['branch_id'])
    op.create_index('ix_consumptions_consumed_at', 'consumptions', ['consumed_at'])

    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('quantity', sa.Numeric(14, 3), nullable=False),
        sa.Column('requested_by_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pendente'),
        sa.Column('justification', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('approved_by_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_orders_branch_id', 'orders', ['branch_id'])
    op.create_index('ix_orders_status', 'orders', ['status'])

    op.create_table(
        'direct_shipments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('quantity', sa.Numeric(14, 3), nullable=False),
        sa.Column('sent_by_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='em_transito'),
        sa.Column('notes', sa.String(length=255), nullable=True),
        sa.Column('sent_at', sa.DateTime(), nullable=False),
        sa.Column('received_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_direct_shipments_branch_id', 'direct_shipments', ['branch_id'])
    op.create_index('ix_direct_shipments_status', 'direct_shipments', ['status'])


def downgrade():
    op.drop_index('ix_direct_shipments_status', table_name='direct_shipments')
    op.drop_index('ix_direct_shipments_branch_id', table_name='direct_shipments')
    op.drop_table('direct_shipments')

    op.drop_index('ix_orders_status', table_name='orders')
    op.drop_index('ix_orders_branch_id', table_name='orders')
    op.drop_table('orders')

    op.drop_index('ix_consumptions_consumed_at', table_name='consumptions')
    op.drop_index('ix_consumptions_branch_id', table_name='consumptions')
    op.drop_index('ix_consumptions_product_id', table_name='consumptions')
    op.drop_table('consumptions')

    op.drop_index('ix_purchases_created_at', table_name='purchases')
    op.drop_index('ix_purchases_purchase_date', table_name='purchases')
    op.drop_index('ix_purchases_product_id', table_name='purchases')
    op.drop_table('purchases')

    op.drop_index('ix_movement_product_date', table_name='stock_movements')
    op.drop_table('stock_movements')

    op.drop_index('ix_inventory_location', table_name='inventories')
    op.drop_table('inventories')

    op.drop_table('branch_authorizations')

    op.drop_index('ix_products_barcode', table_name='products')
    op.drop_table('products')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

    op.drop_table('branches')
