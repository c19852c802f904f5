from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from ..extensions import db
from .mixins import ScopedModelMixin, SerializableMixin


class BatchStatus(str, Enum):
    RECEIVED = 'RECEIVED'
    PROCESSING = 'PROCESSING'
    DRYING_COMPLETE = 'DRYING_COMPLETE'
    PACKED = 'PACKED'
    STORED = 'STORED'
    SOLD = 'SOLD'


BATCH_STATUS_ORDER = tuple(status.value for status in BatchStatus)


def is_forward_transition(current: str, target: str) -> bool:
    """Statuses only move forward; a stage is never revisited and unknown statuses never move."""
    if current not in BATCH_STATUS_ORDER or target not in BATCH_STATUS_ORDER:
        return False
    return BATCH_STATUS_ORDER.index(target) > BATCH_STATUS_ORDER.index(current)


@dataclass
class ProcessConfig:
    """Wash/drain/cook timing for a batch on the processing floor."""
    start_time: datetime
    wash_duration_seconds: int
    drain_duration_seconds: int
    cook_duration_seconds: int

    @property
    def total_duration_seconds(self) -> int:
        return self.wash_duration_seconds + self.drain_duration_seconds + self.cook_duration_seconds

    def elapsed_hours(self, now: datetime) -> float:
        return max(0.0, (now - self.start_time).total_seconds() / 3600.0)

    def to_dict(self) -> dict:
        start_ms = int(self.start_time.replace(tzinfo=timezone.utc).timestamp() * 1000)
        return {
            'startTime': start_ms,
            'washDurationSeconds': self.wash_duration_seconds,
            'drainDurationSeconds': self.drain_duration_seconds,
            'cookDurationSeconds': self.cook_duration_seconds,
            'totalDurationSeconds': self.total_duration_seconds,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> 'ProcessConfig':
        start = datetime.fromtimestamp(payload['startTime'] / 1000.0, tz=timezone.utc).replace(tzinfo=None)
        return cls(
            start_time=start,
            wash_duration_seconds=int(payload.get('washDurationSeconds', 0)),
            drain_duration_seconds=int(payload.get('drainDurationSeconds', 0)),
            cook_duration_seconds=int(payload.get('cookDurationSeconds', 0)),
        )


class Batch(ScopedModelMixin, SerializableMixin, db.Model):
    """
    One receiving event's raw material, tracked from the dock through
    processing to depletion by packing.
    """
    __tablename__ = 'mushroom_batch'

    SERIALIZED_FIELDS = (
        ('id', 'id'),
        ('date_received', 'dateReceived'),
        ('source_farm', 'sourceFarm'),
        ('raw_weight_kg', 'rawWeightKg'),
        ('spoiled_weight_kg', 'spoiledWeightKg'),
        ('net_weight_kg', 'netWeightKg'),
        ('remaining_weight_kg', 'remainingWeightKg'),
        ('status', 'status'),
        ('process_config', 'processConfig'),
        ('quality_notes', 'qualityNotes'),
        ('quality_check_passed', 'qualityCheckPassed'),
        ('selected_recipe_name', 'selectedRecipeName'),
        ('packed_date', 'packedDate'),
        ('storage_location', 'storageLocation'),
        ('processing_wastage_kg', 'processingWastageKg'),
        ('wastage_reason', 'wastageReason'),
    )

    id = db.Column(db.String(64), primary_key=True)
    source_farm = db.Column(db.String(128), nullable=False)
    date_received = db.Column(db.DateTime, nullable=False, index=True)
    raw_weight_kg = db.Column(db.Float, nullable=False)
    spoiled_weight_kg = db.Column(db.Float, nullable=False, default=0.0)
    net_weight_kg = db.Column(db.Float, nullable=False)
    remaining_weight_kg = db.Column(db.Float, nullable=False)
    status = db.Column(db.String(32), nullable=False, default=BatchStatus.RECEIVED.value)

    # Processing
    process_config = db.Column(db.JSON, nullable=True)
    selected_recipe_name = db.Column(db.String(128), nullable=True, index=True)
    quality_notes = db.Column(db.Text, nullable=True)
    quality_check_passed = db.Column(db.Boolean, nullable=True)
    processing_wastage_kg = db.Column(db.Float, nullable=True)
    wastage_reason = db.Column(db.String(255), nullable=True)

    # Packing / storage
    packed_date = db.Column(db.DateTime, nullable=True)
    storage_location = db.Column(db.String(128), nullable=True)

    __table_args__ = (
        db.CheckConstraint('net_weight_kg >= 0', name='check_batch_net_weight_non_negative'),
        db.CheckConstraint('remaining_weight_kg >= 0', name='check_batch_remaining_non_negative'),
        db.CheckConstraint('remaining_weight_kg <= net_weight_kg', name='check_batch_remaining_not_exceeds_net'),
    )

    def __repr__(self):
        return f'<Batch {self.id}: {self.remaining_weight_kg}/{self.net_weight_kg}kg {self.status}>'

    @property
    def available_weight_kg(self) -> float:
        if self.remaining_weight_kg is None:
            return float(self.net_weight_kg or 0.0)
        return float(self.remaining_weight_kg)

    @property
    def processing(self) -> ProcessConfig | None:
        if not self.process_config:
            return None
        return ProcessConfig.from_dict(self.process_config)

    @processing.setter
    def processing(self, config: ProcessConfig | None) -> None:
        # Reassign so SQLAlchemy notices the JSON change.
        self.process_config = config.to_dict() if config else None

    def consume_weight(self, weight_kg: float) -> float:
        """
        Take up to ``weight_kg`` from the remaining weight.
        Returns the weight actually taken; remaining never drops below zero.
        """
        if weight_kg <= 0:
            return 0.0
        available = self.available_weight_kg
        taken = min(available, weight_kg)
        self.remaining_weight_kg = max(0.0, available - weight_kg)
        return taken

    def is_depleted(self, epsilon: float) -> bool:
        return self.available_weight_kg < epsilon
