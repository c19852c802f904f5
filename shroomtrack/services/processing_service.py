"""Processing floor: wash, drain and cook a received batch."""
from __future__ import annotations

import math

from ..models import Batch, BatchStatus, ProcessConfig, Recipe
from ..utils.timezone_utils import TimezoneUtils
from ..utils.validation_helpers import finite_number, parse_timestamp
from .base_service import BaseService
from .cost_ledger import CostLedger
from .errors import NotFound, ValidationError
from .rate_settings import RateSettingsService
from .recipe_service import RecipeService
from .results import service_operation

WASH_SECONDS_PER_BASE_WEIGHT = 60
DRAIN_DURATION_SECONDS = 120
QC_TOLERANCE_KG = 0.1


def compute_process_config(net_weight_kg: float, recipe: Recipe, start_time) -> ProcessConfig:
    """Stage timings scale with how many recipe base weights the batch holds."""
    ratio = float(net_weight_kg) / recipe.effective_base_weight_kg
    return ProcessConfig(
        start_time=start_time,
        wash_duration_seconds=math.ceil(ratio * WASH_SECONDS_PER_BASE_WEIGHT),
        drain_duration_seconds=DRAIN_DURATION_SECONDS,
        cook_duration_seconds=math.ceil(ratio * float(recipe.cook_time_minutes or 0) * 60),
    )


class ProcessingService(BaseService):

    def __init__(self, repository, ledger=None, rates=None, recipes=None):
        super().__init__(repository)
        self.ledger = ledger or CostLedger(repository)
        self.rates = rates or RateSettingsService(repository)
        self.recipes = recipes or RecipeService(repository)

    def _batch(self, batch_id: str, expected_status: BatchStatus) -> Batch:
        batch = self.repository.get(Batch, batch_id)
        if batch is None:
            raise NotFound(f"Batch {batch_id} not found")
        if batch.status != expected_status.value:
            raise ValidationError(
                f"Batch {batch_id} is {batch.status}; expected {expected_status.value}"
            )
        return batch

    def _recipe(self, recipe_name: str) -> Recipe:
        recipe = self.recipes.find_by_name(recipe_name)
        if recipe is None:
            raise NotFound(f"Recipe '{recipe_name}' not found")
        return recipe

    @service_operation
    def start_processing(self, batch_id, recipe_name, now=None):
        batch = self._batch(batch_id, BatchStatus.RECEIVED)
        recipe = self._recipe(recipe_name)
        start = parse_timestamp('now', now) if now else TimezoneUtils.utc_now()

        batch.processing = compute_process_config(batch.net_weight_kg, recipe, start)
        batch.selected_recipe_name = recipe.name
        self.advance_status(batch, BatchStatus.PROCESSING)
        self.repository.save(batch)

        self.log_operation('start_processing', {
            'batch_id': batch.id,
            'recipe': recipe.name,
            'total_seconds': batch.processing.total_duration_seconds,
        })
        return batch

    @service_operation
    def switch_recipe(self, batch_id, recipe_name):
        """Change recipe mid-process; cook time is recomputed and status is kept."""
        batch = self._batch(batch_id, BatchStatus.PROCESSING)
        recipe = self._recipe(recipe_name)
        current = batch.processing
        start = current.start_time if current else TimezoneUtils.utc_now()

        batch.processing = compute_process_config(batch.net_weight_kg, recipe, start)
        batch.selected_recipe_name = recipe.name
        self.repository.save(batch)
        self.log_operation('switch_recipe', {'batch_id': batch.id, 'recipe': recipe.name})
        return batch

    @service_operation
    def complete_processing(self, batch_id, good_weight_kg, wastage_kg=0.0, wastage_reason=None,
                            quality_notes=None, now=None):
        batch = self._batch(batch_id, BatchStatus.PROCESSING)
        good = finite_number('Good weight', good_weight_kg, minimum=0)
        wastage = finite_number('Wastage', wastage_kg or 0.0, minimum=0)

        input_weight = batch.available_weight_kg
        if abs(good + wastage - input_weight) > QC_TOLERANCE_KG:
            raise ValidationError(
                f"QC mismatch: good {good:.2f} kg + wastage {wastage:.2f} kg "
                f"does not match input {input_weight:.2f} kg"
            )
        reason = (wastage_reason or '').strip()
        if wastage > 0 and not reason:
            raise ValidationError('A wastage reason is required when wastage is recorded')

        finished_at = parse_timestamp('now', now) if now else TimezoneUtils.utc_now()
        config = batch.processing
        hours = config.elapsed_hours(finished_at) if config else 0.0

        self.advance_status(batch, BatchStatus.DRYING_COMPLETE)
        batch.processing_wastage_kg = wastage
        batch.wastage_reason = reason or None
        batch.quality_check_passed = True
        batch.quality_notes = quality_notes
        batch.remaining_weight_kg = max(0.0, batch.net_weight_kg - wastage)
        self.repository.save(batch)

        rates = self.rates.current_rates()
        self.ledger.append(
            batch.id,
            date=TimezoneUtils.local_date(finished_at),
            labor_cost=hours * rates.labor_rate_per_hour,
            wastage_cost=wastage * rates.raw_material_rate_per_kg,
            processing_hours=round(hours, 2),
        )
        self.log_operation('complete_processing', {
            'batch_id': batch.id,
            'hours': round(hours, 2),
            'wastage_kg': wastage,
        })
        return batch

    @service_operation
    def mark_stored(self, batch_id, location):
        batch = self._batch(batch_id, BatchStatus.PACKED)
        location = (location or '').strip()
        if not location:
            raise ValidationError('Storage location is required')
        self.advance_status(batch, BatchStatus.STORED)
        batch.storage_location = location
        self.repository.save(batch)
        self.log_operation('mark_stored', {'batch_id': batch.id, 'location': location})
        return batch
