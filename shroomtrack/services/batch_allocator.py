"""FIFO packing of finished goods from dried batches.

Batches are consumed oldest-received first. Unit shares follow the request's
yield (units per kg) rounded half up, and the last batch in the plan takes
every unit still unallocated so lot quantities always sum to the request.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from ..models import (
    Batch,
    BatchStatus,
    FinishedGoodLot,
    PackagingType,
    make_product_key,
)
from ..utils.code_generator import generate_record_id
from ..utils.timezone_utils import TimezoneUtils
from ..utils.validation_helpers import finite_number, whole_number
from .base_service import BaseService
from .cost_ledger import CostLedger
from .errors import InsufficientStock, NotFound, ValidationError
from .inventory_service import InventoryService
from .results import ServiceResult, service_operation

logger = logging.getLogger(__name__)

WEIGHT_EPSILON_KG = 0.1
PLAN_STOP_KG = 0.01
DEFAULT_SELLING_PRICE = 15.00
PACKABLE_STATUSES = (BatchStatus.DRYING_COMPLETE.value, BatchStatus.PACKED.value)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class AllocationStep:
    batch: Batch
    weight_kg: float
    units: int


def plan_allocation(candidates: List[Batch], total_weight_kg: float, total_units: int) -> List[AllocationStep]:
    """
    Build the consumption plan without mutating anything.

    Weight is taken oldest first until what is still needed drops to
    PLAN_STOP_KG. Every step but the last gets its rounded yield share
    (never more than is left to hand out); the last step absorbs the rest.
    """
    yield_per_kg = total_units / total_weight_kg
    still_needed = total_weight_kg
    takes = []
    for batch in candidates:
        if still_needed <= PLAN_STOP_KG:
            break
        take = min(batch.available_weight_kg, still_needed)
        if take <= 0:
            continue
        takes.append((batch, take))
        still_needed -= take

    steps = []
    unallocated = total_units
    for index, (batch, take) in enumerate(takes):
        if index == len(takes) - 1:
            units = unallocated
        else:
            units = min(round_half_up(take * yield_per_kg), unallocated)
        unallocated -= units
        steps.append(AllocationStep(batch=batch, weight_kg=take, units=units))
    return steps


def _validate_packaging_type(packaging_type) -> str:
    value = packaging_type.value if isinstance(packaging_type, PackagingType) else str(packaging_type or '').upper()
    if value not in {p.value for p in PackagingType}:
        raise ValidationError(f"Packaging type must be TIN or POUCH, got {packaging_type!r}")
    return value


def _validate_request(weight_kg, units):
    weight = finite_number('Weight to pack', weight_kg, positive=True)
    return weight, whole_number('Unit count', units)


class BatchAllocator(BaseService):

    def __init__(self, repository, ledger=None, inventory=None):
        super().__init__(repository)
        self.ledger = ledger or CostLedger(repository)
        self.inventory = inventory or InventoryService(repository)

    @property
    def epsilon(self) -> float:
        return float(self.config_value('PACKING_WEIGHT_TOLERANCE_KG', WEIGHT_EPSILON_KG))

    def candidates(self, recipe_name: str) -> List[Batch]:
        """Packable batches for a recipe, oldest received first."""
        eligible = [
            batch for batch in self.repository.list(Batch)
            if batch.selected_recipe_name == recipe_name
            and batch.status in PACKABLE_STATUSES
            and batch.available_weight_kg > self.epsilon
        ]
        return sorted(eligible, key=lambda b: (b.date_received, b.id))

    def current_price(self, recipe_name: str, packaging_type: str) -> float:
        matching = [
            lot for lot in self.repository.list(FinishedGoodLot)
            if lot.recipe_name == recipe_name and lot.packaging_type == packaging_type
            and lot.selling_price is not None
        ]
        if matching:
            latest = max(matching, key=lambda lot: lot.date_packed)
            return float(latest.selling_price)
        return float(self.config_value('DEFAULT_SELLING_PRICE', DEFAULT_SELLING_PRICE))

    @service_operation
    def check_packaging_stock(self, packaging_type, units):
        """Report container/label shortfalls for a planned pack; nothing is changed."""
        packaging = _validate_packaging_type(packaging_type)
        return self.inventory.packaging_requirements(packaging, whole_number('Unit count', units))

    def _enforce_packaging(self, packaging: str, units: int) -> None:
        report = self.inventory.packaging_requirements(packaging, units)
        if report['sufficient']:
            return
        shortfall = max(report['container']['shortfall'], report['label']['shortfall'])
        raise InsufficientStock(
            f"Insufficient packaging stock for {units} {packaging} packs "
            f"(container short {report['container']['shortfall']:g}, "
            f"labels short {report['label']['shortfall']:g})",
            shortfall=shortfall,
        )

    def _apply(self, batch: Batch, weight_kg: float, units: int, packaging: str, recipe_name: str,
               packed_at) -> Optional[FinishedGoodLot]:
        """Consume weight from one batch and emit its lot, stock movements and cost row."""
        batch.consume_weight(weight_kg)
        if batch.is_depleted(self.epsilon) and batch.status != BatchStatus.PACKED.value:
            self.advance_status(batch, BatchStatus.PACKED)
            batch.packed_date = packed_at
        self.repository.save(batch)

        if units <= 0:
            logger.info(f"PACKING: {batch.id} gave {weight_kg:.3f} kg but rounded to 0 units; no lot emitted")
            return None

        lot = FinishedGoodLot(
            id=generate_record_id('finished_good'),
            organization_id=self.organization_id,
            batch_id=batch.id,
            recipe_name=recipe_name,
            packaging_type=packaging,
            quantity=units,
            original_quantity=units,
            date_packed=packed_at,
            image_url=None,
            selling_price=self.current_price(recipe_name, packaging),
        )
        self.repository.add(lot)

        unit_cost = 0.0
        container = self.inventory.container_for(packaging)
        label = self.inventory.label_item()
        for role, item in (('container', container), ('label', label)):
            if item is None:
                logger.warning(f"PACKING: no {role} item for {packaging}; {units} packs recorded without {role} cost")
                continue
            unit_cost += item.cost_per_unit
            self.inventory.consume(item, units)

        self.ledger.append(
            batch.id,
            date=TimezoneUtils.local_date(packed_at),
            packaging_cost=units * unit_cost,
        )
        logger.info(
            f"PACKING: {batch.id} -> {lot.id}: {weight_kg:.3f} kg, {units} x {packaging}, "
            f"batch remaining {batch.remaining_weight_kg:.3f} kg"
        )
        return lot

    @service_operation
    def pack_batch_partial(self, batch_id, weight_kg, units, packaging_type, recipe_name=None,
                           enforce_packaging_stock=None):
        """Pack from one named batch; the primitive under ``pack_recipe``."""
        weight, units = _validate_request(weight_kg, units)
        packaging = _validate_packaging_type(packaging_type)
        batch = self.repository.get(Batch, batch_id)
        if batch is None:
            raise NotFound(f"Batch {batch_id} not found")
        if batch.status not in PACKABLE_STATUSES:
            raise ValidationError(f"Batch {batch_id} is {batch.status} and cannot be packed")
        available = batch.available_weight_kg
        if weight > available + self.epsilon:
            raise InsufficientStock(
                f"Insufficient weight. Available: {available:.2f} kg",
                shortfall=round(weight - available, 3),
            )
        if self._enforce(enforce_packaging_stock):
            self._enforce_packaging(packaging, units)

        lot = self._apply(batch, min(weight, available), units, packaging,
                          recipe_name or batch.selected_recipe_name or 'Unknown', TimezoneUtils.utc_now())
        return lot

    def _enforce(self, override) -> bool:
        if override is not None:
            return bool(override)
        return bool(self.config_value('PACKING_ENFORCE_PACKAGING_STOCK', False))

    @service_operation
    def pack_recipe(self, recipe_name, total_weight_to_pack, total_unit_count, packaging_type,
                    enforce_packaging_stock=None):
        weight, units = _validate_request(total_weight_to_pack, total_unit_count)
        packaging = _validate_packaging_type(packaging_type)

        candidates = self.candidates(recipe_name)
        if not candidates:
            raise NotFound(f"No packable batches for recipe '{recipe_name}'")

        available = sum(batch.available_weight_kg for batch in candidates)
        if weight > available + self.epsilon:
            raise InsufficientStock(
                f"Insufficient weight. Available: {available:.2f} kg",
                shortfall=round(weight - available, 3),
            )
        if self._enforce(enforce_packaging_stock):
            self._enforce_packaging(packaging, units)

        plan = plan_allocation(candidates, weight, units)
        packed_at = TimezoneUtils.utc_now()
        lots = []
        for step in plan:
            lot = self._apply(step.batch, step.weight_kg, step.units, packaging, recipe_name, packed_at)
            if lot is not None:
                lots.append(lot)

        self.log_operation('pack_recipe', {
            'recipe': recipe_name,
            'weight_kg': weight,
            'units': units,
            'packaging': packaging,
            'batches': [step.batch.id for step in plan],
        })
        return ServiceResult.ok(
            lots,
            message=f"Packed {units} {packaging} units of {recipe_name} from {len(plan)} batch(es)",
        )

    @service_operation
    def packing_history(self, limit=10):
        lots = sorted(self.repository.list(FinishedGoodLot), key=lambda lot: lot.date_packed, reverse=True)
        return lots[:limit] if limit else lots

    @service_operation
    def set_product_price(self, recipe_name, packaging_type, price):
        packaging = _validate_packaging_type(packaging_type)
        value = finite_number('Price', price, minimum=0)
        matching = [
            lot for lot in self.repository.list(FinishedGoodLot)
            if lot.recipe_name == recipe_name and lot.packaging_type == packaging
        ]
        if not matching:
            raise NotFound(f"No finished goods for {make_product_key(recipe_name, packaging)}")
        for lot in matching:
            lot.selling_price = value
            self.repository.save(lot)
        self.log_operation('set_product_price', {'product': make_product_key(recipe_name, packaging), 'price': value})
        return matching

    @service_operation
    def available_products(self):
        """Sellable stock grouped by ``recipe|packaging``."""
        default_price = float(self.config_value('DEFAULT_SELLING_PRICE', DEFAULT_SELLING_PRICE))
        grouped = {}
        for lot in sorted(self.repository.list(FinishedGoodLot), key=lambda lot: lot.date_packed):
            if lot.quantity <= 0:
                continue
            entry = grouped.setdefault(lot.product_key, {
                'key': lot.product_key,
                'recipeName': lot.recipe_name,
                'packagingType': lot.packaging_type,
                'totalQty': 0,
                'price': default_price,
            })
            entry['totalQty'] += lot.quantity
            if lot.selling_price is not None:
                entry['price'] = float(lot.selling_price)
        return sorted(grouped.values(), key=lambda entry: entry['key'])
