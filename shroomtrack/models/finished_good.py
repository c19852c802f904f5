from enum import Enum

from ..extensions import db
from .mixins import ScopedModelMixin, SerializableMixin


class PackagingType(str, Enum):
    TIN = 'TIN'
    POUCH = 'POUCH'


PRODUCT_KEY_SEPARATOR = '|'


def make_product_key(recipe_name: str, packaging_type: str) -> str:
    return f"{recipe_name}{PRODUCT_KEY_SEPARATOR}{packaging_type}"


def split_product_key(product_key: str) -> tuple[str, str] | None:
    if not product_key or PRODUCT_KEY_SEPARATOR not in product_key:
        return None
    recipe_name, packaging_type = product_key.rsplit(PRODUCT_KEY_SEPARATOR, 1)
    if not recipe_name or not packaging_type:
        return None
    return recipe_name, packaging_type


class FinishedGoodLot(ScopedModelMixin, SerializableMixin, db.Model):
    """
    Output of one packing event for one source batch.
    Sales drain ``quantity``; ``original_quantity`` keeps the units produced.
    """
    __tablename__ = 'finished_good_lot'

    SERIALIZED_FIELDS = (
        ('id', 'id'),
        ('batch_id', 'batchId'),
        ('recipe_name', 'recipeName'),
        ('packaging_type', 'packagingType'),
        ('quantity', 'quantity'),
        ('original_quantity', 'originalQuantity'),
        ('date_packed', 'datePacked'),
        ('image_url', 'imageUrl'),
        ('selling_price', 'sellingPrice'),
    )

    id = db.Column(db.String(64), primary_key=True)
    batch_id = db.Column(db.String(64), nullable=False, index=True)
    recipe_name = db.Column(db.String(128), nullable=False, index=True)
    packaging_type = db.Column(db.String(16), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    original_quantity = db.Column(db.Integer, nullable=False)
    date_packed = db.Column(db.DateTime, nullable=False, index=True)
    image_url = db.Column(db.String(512), nullable=True)
    selling_price = db.Column(db.Float, nullable=True)

    __table_args__ = (
        db.CheckConstraint('quantity >= 0', name='check_finished_good_quantity_non_negative'),
        db.CheckConstraint('quantity <= original_quantity', name='check_finished_good_quantity_not_exceeds_original'),
    )

    def __repr__(self):
        return f'<FinishedGoodLot {self.id}: {self.quantity}/{self.original_quantity} {self.product_key}>'

    @property
    def product_key(self) -> str:
        return make_product_key(self.recipe_name, self.packaging_type)

    @property
    def units_produced(self) -> int:
        if self.original_quantity is None:
            return int(self.quantity or 0)
        return int(self.original_quantity)

    @property
    def is_depleted(self) -> bool:
        return (self.quantity or 0) <= 0

    def drain(self, units: int) -> bool:
        """
        Remove sold units from this lot.
        Returns True if successful, False if insufficient quantity.
        """
        if units < 0:
            return False
        if (self.quantity or 0) < units:
            return False
        self.quantity -= units
        return True
