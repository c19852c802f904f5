from ..extensions import db
from .mixins import ScopedModelMixin, SerializableMixin

COST_FIELDS = ('raw_material_cost', 'packaging_cost', 'labor_cost', 'wastage_cost')


def round_currency(value) -> float:
    return round(float(value or 0.0), 2)


class CostTransaction(ScopedModelMixin, SerializableMixin, db.Model):
    """
    One ledger row attributing cost to a single business event
    (receiving, process completion, or a packing allocation).
    """
    __tablename__ = 'cost_transaction'

    SERIALIZED_FIELDS = (
        ('id', 'id'),
        ('reference_id', 'referenceId'),
        ('date', 'date'),
        ('weight_processed', 'weightProcessed'),
        ('processing_hours', 'processingHours'),
        ('raw_material_cost', 'rawMaterialCost'),
        ('packaging_cost', 'packagingCost'),
        ('wastage_cost', 'wastageCost'),
        ('labor_cost', 'laborCost'),
        ('total_cost', 'totalCost'),
        ('created_at', 'createdAt'),
    )

    id = db.Column(db.String(64), primary_key=True)
    reference_id = db.Column(db.String(64), nullable=True, index=True)
    date = db.Column(db.Date, nullable=False, index=True)
    weight_processed = db.Column(db.Float, nullable=False, default=0.0)
    processing_hours = db.Column(db.Float, nullable=False, default=0.0)
    raw_material_cost = db.Column(db.Float, nullable=False, default=0.0)
    packaging_cost = db.Column(db.Float, nullable=False, default=0.0)
    labor_cost = db.Column(db.Float, nullable=False, default=0.0)
    wastage_cost = db.Column(db.Float, nullable=False, default=0.0)
    total_cost = db.Column(db.Float, nullable=False, default=0.0)
    created_at = db.Column(db.DateTime, nullable=False, index=True)

    def __repr__(self):
        return f'<CostTransaction {self.id} ref={self.reference_id} total={self.total_cost}>'

    def recompute_total(self) -> float:
        """totalCost is always the sum of the four cost components."""
        self.total_cost = round_currency(sum(float(getattr(self, name) or 0.0) for name in COST_FIELDS))
        return self.total_cost

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload['date'] = self.date.isoformat() if self.date else None
        return payload

    @classmethod
    def from_dict(cls, payload: dict):
        from datetime import date as date_type

        record = super().from_dict({k: v for k, v in payload.items() if k != 'date'})
        raw_date = payload.get('date')
        if isinstance(raw_date, str) and raw_date:
            record.date = date_type.fromisoformat(raw_date[:10])
        elif isinstance(raw_date, date_type):
            record.date = raw_date
        record.recompute_total()
        return record
