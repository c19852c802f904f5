"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


SCOPED_TABLES = (
    'mushroom_batch', 'recipe', 'finished_good_lot', 'inventory_item', 'supplier',
    'purchase_order', 'customer', 'sales_record', 'cost_transaction', 'workspace_setting',
)


def _organization_column():
    return sa.Column('organization_id', sa.Integer(), sa.ForeignKey('organization.id'), nullable=False)


def upgrade():
    op.create_table(
        'organization',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('contact_email', sa.String(length=256), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
    )

    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=64), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=True),
        sa.Column('organization_id', sa.Integer(), sa.ForeignKey('organization.id'), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('last_login', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'mushroom_batch',
        sa.Column('id', sa.String(length=64), primary_key=True),
        _organization_column(),
        sa.Column('source_farm', sa.String(length=128), nullable=False),
        sa.Column('date_received', sa.DateTime(), nullable=False),
        sa.Column('raw_weight_kg', sa.Float(), nullable=False),
        sa.Column('spoiled_weight_kg', sa.Float(), nullable=False),
        sa.Column('net_weight_kg', sa.Float(), nullable=False),
        sa.Column('remaining_weight_kg', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('process_config', sa.JSON(), nullable=True),
        sa.Column('selected_recipe_name', sa.String(length=128), nullable=True),
        sa.Column('quality_notes', sa.Text(), nullable=True),
        sa.Column('quality_check_passed', sa.Boolean(), nullable=True),
        sa.Column('processing_wastage_kg', sa.Float(), nullable=True),
        sa.Column('wastage_reason', sa.String(length=255), nullable=True),
        sa.Column('packed_date', sa.DateTime(), nullable=True),
        sa.Column('storage_location', sa.String(length=128), nullable=True),
        sa.CheckConstraint('net_weight_kg >= 0', name='check_batch_net_weight_non_negative'),
        sa.CheckConstraint('remaining_weight_kg >= 0', name='check_batch_remaining_non_negative'),
        sa.CheckConstraint('remaining_weight_kg <= net_weight_kg', name='check_batch_remaining_not_exceeds_net'),
    )
    op.create_index('ix_mushroom_batch_date_received', 'mushroom_batch', ['date_received'])
    op.create_index('ix_mushroom_batch_selected_recipe_name', 'mushroom_batch', ['selected_recipe_name'])

    op.create_table(
        'recipe',
        sa.Column('id', sa.String(length=64), primary_key=True),
        _organization_column(),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('base_weight_kg', sa.Float(), nullable=False),
        sa.Column('cook_time_minutes', sa.Float(), nullable=False),
        sa.Column('temperature', sa.Float(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(length=512), nullable=True),
        sa.Column('yield_ratio', sa.Float(), nullable=True),
        sa.Column('default_pack_size_kg', sa.Float(), nullable=True),
        sa.UniqueConstraint('organization_id', 'name', name='uq_recipe_org_name'),
    )

    op.create_table(
        'finished_good_lot',
        sa.Column('id', sa.String(length=64), primary_key=True),
        _organization_column(),
        sa.Column('batch_id', sa.String(length=64), nullable=False),
        sa.Column('recipe_name', sa.String(length=128), nullable=False),
        sa.Column('packaging_type', sa.String(length=16), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('original_quantity', sa.Integer(), nullable=False),
        sa.Column('date_packed', sa.DateTime(), nullable=False),
        sa.Column('image_url', sa.String(length=512), nullable=True),
        sa.Column('selling_price', sa.Float(), nullable=True),
        sa.CheckConstraint('quantity >= 0', name='check_finished_good_quantity_non_negative'),
        sa.CheckConstraint('quantity <= original_quantity', name='check_finished_good_quantity_not_exceeds_original'),
    )
    op.create_index('ix_finished_good_lot_batch_id', 'finished_good_lot', ['batch_id'])
    op.create_index('ix_finished_good_lot_recipe_name', 'finished_good_lot', ['recipe_name'])
    op.create_index('ix_finished_good_lot_date_packed', 'finished_good_lot', ['date_packed'])

    op.create_table(
        'inventory_item',
        sa.Column('id', sa.String(length=64), primary_key=True),
        _organization_column(),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('subtype', sa.String(length=16), nullable=True),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('threshold', sa.Float(), nullable=False),
        sa.Column('unit', sa.String(length=32), nullable=False),
        sa.Column('unit_cost', sa.Float(), nullable=False),
        sa.Column('pack_size', sa.Integer(), nullable=False),
        sa.Column('supplier', sa.String(length=128), nullable=True),
    )

    op.create_table(
        'supplier',
        sa.Column('id', sa.String(length=64), primary_key=True),
        _organization_column(),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('contact', sa.String(length=128), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('items_supplied', sa.JSON(), nullable=True),
    )

    op.create_table(
        'purchase_order',
        sa.Column('id', sa.String(length=64), primary_key=True),
        _organization_column(),
        sa.Column('item_id', sa.String(length=64), nullable=False),
        sa.Column('item_name', sa.String(length=128), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('pack_size', sa.Integer(), nullable=False),
        sa.Column('total_units', sa.Integer(), nullable=False),
        sa.Column('unit_cost', sa.Float(), nullable=False),
        sa.Column('total_cost', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('date_ordered', sa.DateTime(), nullable=False),
        sa.Column('date_received', sa.DateTime(), nullable=True),
        sa.Column('supplier', sa.String(length=128), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('qc_passed', sa.Boolean(), nullable=True),
        sa.Column('complaint_reason', sa.Text(), nullable=True),
        sa.Column('complaint_resolution', sa.Text(), nullable=True),
        sa.CheckConstraint('quantity > 0', name='check_purchase_order_quantity_positive'),
    )
    op.create_index('ix_purchase_order_item_id', 'purchase_order', ['item_id'])

    op.create_table(
        'customer',
        sa.Column('id', sa.String(length=64), primary_key=True),
        _organization_column(),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('contact', sa.String(length=64), nullable=True),
        sa.Column('email', sa.String(length=120), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
    )

    op.create_table(
        'sales_record',
        sa.Column('id', sa.String(length=64), primary_key=True),
        _organization_column(),
        sa.Column('invoice_id', sa.String(length=32), nullable=False),
        sa.Column('customer_id', sa.String(length=64), nullable=True),
        sa.Column('customer_name', sa.String(length=128), nullable=False),
        sa.Column('customer_email', sa.String(length=120), nullable=True),
        sa.Column('customer_phone', sa.String(length=64), nullable=True),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('payment_method', sa.String(length=16), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('date_created', sa.DateTime(), nullable=False),
        sa.Column('date_delivered', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_sales_record_invoice_id', 'sales_record', ['invoice_id'])
    op.create_index('ix_sales_record_date_created', 'sales_record', ['date_created'])

    op.create_table(
        'cost_transaction',
        sa.Column('id', sa.String(length=64), primary_key=True),
        _organization_column(),
        sa.Column('reference_id', sa.String(length=64), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('weight_processed', sa.Float(), nullable=False),
        sa.Column('processing_hours', sa.Float(), nullable=False),
        sa.Column('raw_material_cost', sa.Float(), nullable=False),
        sa.Column('packaging_cost', sa.Float(), nullable=False),
        sa.Column('labor_cost', sa.Float(), nullable=False),
        sa.Column('wastage_cost', sa.Float(), nullable=False),
        sa.Column('total_cost', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_cost_transaction_reference_id', 'cost_transaction', ['reference_id'])
    op.create_index('ix_cost_transaction_date', 'cost_transaction', ['date'])
    op.create_index('ix_cost_transaction_created_at', 'cost_transaction', ['created_at'])

    op.create_table(
        'workspace_setting',
        sa.Column('id', sa.String(length=64), primary_key=True),
        _organization_column(),
        sa.Column('key', sa.String(length=128), nullable=False),
        sa.Column('value', sa.JSON(), nullable=True),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.UniqueConstraint('organization_id', 'key', name='uq_workspace_setting_org_key'),
    )
    op.create_index('ix_workspace_setting_key', 'workspace_setting', ['key'])

    for table in SCOPED_TABLES:
        op.create_index(f'ix_{table}_organization_id', table, ['organization_id'])


def downgrade():
    for table in SCOPED_TABLES:
        op.drop_index(f'ix_{table}_organization_id', table_name=table)
    for table in reversed(SCOPED_TABLES):
        op.drop_table(table)
    op.drop_table('user')
    op.drop_table('organization')
