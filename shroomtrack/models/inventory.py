from enum import Enum

from ..extensions import db
from .mixins import ScopedModelMixin, SerializableMixin


class InventoryType(str, Enum):
    PACKAGING = 'PACKAGING'
    LABEL = 'LABEL'
    OTHER = 'OTHER'


class InventorySubtype(str, Enum):
    TIN = 'TIN'
    POUCH = 'POUCH'
    STICKER = 'STICKER'


class InventoryItem(ScopedModelMixin, SerializableMixin, db.Model):
    """Packaging and label supplies; ``unit_cost`` is the price of one pack."""
    __tablename__ = 'inventory_item'

    SERIALIZED_FIELDS = (
        ('id', 'id'),
        ('name', 'name'),
        ('type', 'type'),
        ('subtype', 'subtype'),
        ('quantity', 'quantity'),
        ('threshold', 'threshold'),
        ('unit', 'unit'),
        ('unit_cost', 'unitCost'),
        ('supplier', 'supplier'),
        ('pack_size', 'packSize'),
    )

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    type = db.Column(db.String(16), nullable=False, default=InventoryType.OTHER.value)
    subtype = db.Column(db.String(16), nullable=True)
    quantity = db.Column(db.Float, nullable=False, default=0.0)
    threshold = db.Column(db.Float, nullable=False, default=10.0)
    unit = db.Column(db.String(32), nullable=False, default='pcs')
    unit_cost = db.Column(db.Float, nullable=False, default=0.0)
    pack_size = db.Column(db.Integer, nullable=False, default=1)
    supplier = db.Column(db.String(128), nullable=True)

    def __repr__(self):
        return f'<InventoryItem {self.id}: {self.name} qty={self.quantity}>'

    @property
    def cost_per_unit(self) -> float:
        """Cost of a single container/label: pack price spread over the pack."""
        return float(self.unit_cost or 0.0) / float(self.pack_size or 1)

    @property
    def is_low_stock(self) -> bool:
        return (self.quantity or 0) < (self.threshold or 0)

    @property
    def is_negative(self) -> bool:
        return (self.quantity or 0) < 0

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload['lowStock'] = self.is_low_stock
        payload['negativeStock'] = self.is_negative
        return payload
