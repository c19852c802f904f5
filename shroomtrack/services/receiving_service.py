from __future__ import annotations

from ..models import Batch, BatchStatus
from ..utils.code_generator import generate_record_id
from ..utils.timezone_utils import TimezoneUtils
from ..utils.validation_helpers import finite_number, parse_timestamp
from .base_service import BaseService
from .cost_ledger import CostLedger
from .errors import NotFound, ValidationError
from .rate_settings import RateSettingsService
from .results import service_operation


class ReceivingService(BaseService):
    """Dock intake: creates batches and attributes their raw-material cost."""

    def __init__(self, repository, ledger=None, rates=None):
        super().__init__(repository)
        self.ledger = ledger or CostLedger(repository)
        self.rates = rates or RateSettingsService(repository)

    @service_operation
    def receive_batch(self, source_farm, raw_weight_kg, spoiled_weight_kg=0.0, batch_id=None, received_at=None):
        farm = (source_farm or '').strip()
        if not farm:
            raise ValidationError('Source farm is required')
        raw = finite_number('Raw weight', raw_weight_kg, positive=True)
        spoiled = finite_number('Spoiled weight', spoiled_weight_kg or 0.0)
        if spoiled < 0 or spoiled > raw:
            raise ValidationError('Spoiled weight must be between zero and the raw weight')

        batch_id = (batch_id or '').strip() or generate_record_id('batch')
        if self.repository.get(Batch, batch_id) is not None:
            raise ValidationError(f"Batch {batch_id} already exists")

        received = parse_timestamp('dateReceived', received_at) if received_at else TimezoneUtils.utc_now()
        net = raw - spoiled
        batch = Batch(
            id=batch_id,
            organization_id=self.organization_id,
            source_farm=farm,
            date_received=received,
            raw_weight_kg=raw,
            spoiled_weight_kg=spoiled,
            net_weight_kg=net,
            remaining_weight_kg=net,
            status=BatchStatus.RECEIVED.value,
            process_config=None,
            selected_recipe_name=None,
            quality_notes=None,
            quality_check_passed=None,
            processing_wastage_kg=None,
            wastage_reason=None,
            packed_date=None,
            storage_location=None,
        )
        self.repository.add(batch)

        rates = self.rates.current_rates()
        self.ledger.append(
            batch.id,
            date=TimezoneUtils.local_date(received),
            raw_cost=raw * rates.raw_material_rate_per_kg,
            weight_processed=raw,
        )
        self.log_operation('receive_batch', {'batch_id': batch.id, 'raw_kg': raw, 'net_kg': net})
        return batch

    @service_operation
    def list_batches(self, status=None):
        batches = self.repository.list(Batch)
        if status:
            batches = [b for b in batches if b.status == status]
        return sorted(batches, key=lambda b: b.date_received, reverse=True)

    @service_operation
    def get_batch(self, batch_id):
        batch = self.repository.get(Batch, batch_id)
        if batch is None:
            raise NotFound(f"Batch {batch_id} not found")
        return batch
