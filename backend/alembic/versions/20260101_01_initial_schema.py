"""initial schema: master data, warehouses, quantities and inventory history

Revision ID: 20260101_01
Revises:
Create Date: 2026-01-01

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20260101_01'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('contact_person', sa.String(length=200), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_companies_id', 'companies', ['id'])

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
    )
    op.create_index('ix_categories_id', 'categories', ['id'])

    # Manager FK added after employees exists (circular reference)
    op.create_table(
        'warehouses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=50), nullable=True),
        sa.Column('zip', sa.String(length=20), nullable=True),
        sa.Column('manager_employee_id', sa.Uuid(), nullable=True),
        sa.Column('maximum_capacity_cubic_feet', sa.Numeric(14, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('maximum_capacity_cubic_feet >= 0', name='ck_warehouse_capacity_non_negative'),
    )
    op.create_index('ix_warehouses_manager_employee_id', 'warehouses', ['manager_employee_id'])

    op.create_table(
        'employees',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True, unique=True),
        sa.Column('assigned_warehouse_id', sa.Integer(), sa.ForeignKey('warehouses.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_employees_assigned_warehouse_id', 'employees', ['assigned_warehouse_id'])

    with op.batch_alter_table('warehouses') as batch_op:
        batch_op.create_foreign_key('fk_warehouse_manager', 'employees', ['manager_employee_id'], ['id'])

    op.create_table(
        'items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sku', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id'), nullable=True),
        sa.Column('weight_lbs', sa.Numeric(12, 2), nullable=False),
        sa.Column('cubic_feet', sa.Numeric(12, 2), nullable=False),
        sa.CheckConstraint('cubic_feet >= 0', name='ck_item_cubic_feet_non_negative'),
    )
    op.create_index('ix_items_sku', 'items', ['sku'], unique=True)
    op.create_index('ix_items_category_id', 'items', ['category_id'])
    op.create_index('ix_items_company_id', 'items', ['company_id'])

    op.create_table(
        'warehouse_items',
        sa.Column('warehouse_id', sa.Integer(), sa.ForeignKey('warehouses.id'), primary_key=True),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('items.id'), primary_key=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('quantity >= 0', name='ck_warehouse_item_quantity_non_negative'),
    )

    op.create_table(
        'inventory_history',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('items.id'), nullable=False),
        sa.Column('from_warehouse_id', sa.Integer(), sa.ForeignKey('warehouses.id'), nullable=True),
        sa.Column('to_warehouse_id', sa.Integer(), sa.ForeignKey('warehouses.id'), nullable=True),
        sa.Column('quantity_change', sa.Integer(), nullable=False),
        sa.Column('transaction_type', sa.String(length=20), nullable=False),
        sa.Column('reason', sa.String(length=500), nullable=True),
        sa.Column('occurred_at', sa.DateTime(), nullable=False),
        sa.Column('performed_by_employee_id', sa.Uuid(), sa.ForeignKey('employees.id'), nullable=True),
        sa.CheckConstraint('quantity_change > 0', name='ck_history_quantity_change_positive'),
    )
    op.create_index('ix_inventory_history_item_id', 'inventory_history', ['item_id'])
    op.create_index('ix_inventory_history_from_warehouse_id', 'inventory_history', ['from_warehouse_id'])
    op.create_index('ix_inventory_history_to_warehouse_id', 'inventory_history', ['to_warehouse_id'])
    op.create_index('ix_inventory_history_occurred_at', 'inventory_history', ['occurred_at'])
    op.create_index('ix_inventory_history_performed_by_employee_id', 'inventory_history', ['performed_by_employee_id'])


def downgrade():
    op.drop_table('inventory_history')
    op.drop_table('warehouse_items')
    op.drop_table('items')

    with op.batch_alter_table('warehouses') as batch_op:
        batch_op.drop_constraint('fk_warehouse_manager', type_='foreignkey')

    op.drop_table('employees')
    op.drop_table('warehouses')
    op.drop_table('categories')
    op.drop_table('companies')
