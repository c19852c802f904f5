from enum import Enum

from ..extensions import db
from .mixins import ScopedModelMixin, SerializableMixin


class SalesStatus(str, Enum):
    INVOICED = 'INVOICED'
    DELIVERED = 'DELIVERED'


class PaymentMethod(str, Enum):
    CASH = 'CASH'
    COD = 'COD'
    CREDIT_CARD = 'CREDIT_CARD'


class Customer(ScopedModelMixin, SerializableMixin, db.Model):
    __tablename__ = 'customer'

    SERIALIZED_FIELDS = (
        ('id', 'id'),
        ('name', 'name'),
        ('contact', 'contact'),
        ('email', 'email'),
        ('address', 'address'),
    )

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    contact = db.Column(db.String(64), nullable=True)
    email = db.Column(db.String(120), nullable=True)
    address = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f'<Customer {self.name}>'


class SalesRecord(ScopedModelMixin, SerializableMixin, db.Model):
    """An invoice; line items are kept as a JSON document on the record."""
    __tablename__ = 'sales_record'

    SERIALIZED_FIELDS = (
        ('id', 'id'),
        ('invoice_id', 'invoiceId'),
        ('customer_id', 'customerId'),
        ('customer_name', 'customerName'),
        ('customer_email', 'customerEmail'),
        ('customer_phone', 'customerPhone'),
        ('items', 'items'),
        ('total_amount', 'totalAmount'),
        ('payment_method', 'paymentMethod'),
        ('status', 'status'),
        ('date_created', 'dateCreated'),
        ('date_delivered', 'dateDelivered'),
    )

    id = db.Column(db.String(64), primary_key=True)
    invoice_id = db.Column(db.String(32), nullable=False, index=True)
    customer_id = db.Column(db.String(64), nullable=True)
    customer_name = db.Column(db.String(128), nullable=False)
    customer_email = db.Column(db.String(120), nullable=True)
    customer_phone = db.Column(db.String(64), nullable=True)
    items = db.Column(db.JSON, nullable=False)
    total_amount = db.Column(db.Float, nullable=False, default=0.0)
    payment_method = db.Column(db.String(16), nullable=False)
    status = db.Column(db.String(16), nullable=False, default=SalesStatus.INVOICED.value)
    date_created = db.Column(db.DateTime, nullable=False, index=True)
    date_delivered = db.Column(db.DateTime, nullable=True)

    def __repr__(self):
        return f'<SalesRecord {self.invoice_id}: {self.total_amount} {self.status}>'

    @property
    def is_delivered(self) -> bool:
        return self.status == SalesStatus.DELIVERED.value

    @property
    def units_sold(self) -> int:
        return sum(int(line.get('quantity', 0)) for line in (self.items or []))
