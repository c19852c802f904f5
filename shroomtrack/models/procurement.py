from enum import Enum

from ..extensions import db
from .mixins import ScopedModelMixin, SerializableMixin


class PurchaseOrderStatus(str, Enum):
    ORDERED = 'ORDERED'
    RECEIVED = 'RECEIVED'
    COMPLAINT = 'COMPLAINT'
    RESOLVED = 'RESOLVED'


class Supplier(ScopedModelMixin, SerializableMixin, db.Model):
    __tablename__ = 'supplier'

    SERIALIZED_FIELDS = (
        ('id', 'id'),
        ('name', 'name'),
        ('contact', 'contact'),
        ('address', 'address'),
        ('items_supplied', 'itemsSupplied'),
    )

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    contact = db.Column(db.String(128), nullable=True)
    address = db.Column(db.Text, nullable=True)
    items_supplied = db.Column(db.JSON, nullable=True)

    def __repr__(self):
        return f'<Supplier {self.name}>'


class PurchaseOrder(ScopedModelMixin, SerializableMixin, db.Model):
    """
    Procurement of packaging supplies, priced per pack.
    The supplier is stored by name so removing a supplier leaves history intact.
    """
    __tablename__ = 'purchase_order'

    SERIALIZED_FIELDS = (
        ('id', 'id'),
        ('item_id', 'itemId'),
        ('item_name', 'itemName'),
        ('quantity', 'quantity'),
        ('pack_size', 'packSize'),
        ('total_units', 'totalUnits'),
        ('unit_cost', 'unitCost'),
        ('total_cost', 'totalCost'),
        ('status', 'status'),
        ('date_ordered', 'dateOrdered'),
        ('date_received', 'dateReceived'),
        ('supplier', 'supplier'),
        ('notes', 'notes'),
        ('qc_passed', 'qcPassed'),
        ('complaint_reason', 'complaintReason'),
        ('complaint_resolution', 'complaintResolution'),
    )

    id = db.Column(db.String(64), primary_key=True)
    item_id = db.Column(db.String(64), nullable=False, index=True)
    item_name = db.Column(db.String(128), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    pack_size = db.Column(db.Integer, nullable=False, default=1)
    total_units = db.Column(db.Integer, nullable=False)
    unit_cost = db.Column(db.Float, nullable=False, default=0.0)
    total_cost = db.Column(db.Float, nullable=False, default=0.0)
    status = db.Column(db.String(16), nullable=False, default=PurchaseOrderStatus.ORDERED.value)
    date_ordered = db.Column(db.DateTime, nullable=False)
    date_received = db.Column(db.DateTime, nullable=True)
    supplier = db.Column(db.String(128), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    qc_passed = db.Column(db.Boolean, nullable=True)
    complaint_reason = db.Column(db.Text, nullable=True)
    complaint_resolution = db.Column(db.Text, nullable=True)

    __table_args__ = (
        db.CheckConstraint('quantity > 0', name='check_purchase_order_quantity_positive'),
    )

    def __repr__(self):
        return f'<PurchaseOrder {self.id}: {self.quantity}x{self.item_name} {self.status}>'
