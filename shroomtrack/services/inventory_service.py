from __future__ import annotations

import logging

from ..models import InventoryItem, InventorySubtype, InventoryType, PackagingType
from ..utils.code_generator import generate_record_id
from ..utils.validation_helpers import finite_number, whole_number
from .base_service import BaseService
from .errors import NotFound, ValidationError
from .results import service_operation

logger = logging.getLogger(__name__)

DEFAULT_PACKAGING_ITEMS = (
    {'name': 'Standup Pouch (100g)', 'type': 'PACKAGING', 'subtype': 'POUCH', 'quantity': 500,
     'threshold': 100, 'unit': 'pcs', 'unit_cost': 25.0, 'pack_size': 100},
    {'name': 'Tin Can (200g)', 'type': 'PACKAGING', 'subtype': 'TIN', 'quantity': 200,
     'threshold': 50, 'unit': 'pcs', 'unit_cost': 60.0, 'pack_size': 50},
    {'name': 'Brand Sticker', 'type': 'LABEL', 'subtype': 'STICKER', 'quantity': 1000,
     'threshold': 200, 'unit': 'pcs', 'unit_cost': 10.0, 'pack_size': 500},
)


class InventoryService(BaseService):
    """Packaging and label supplies."""

    def _items(self) -> list:
        return sorted(self.repository.list(InventoryItem), key=lambda i: (i.name or '').lower())

    def find_by_name(self, name: str):
        wanted = (name or '').strip().lower()
        for item in self._items():
            if (item.name or '').strip().lower() == wanted:
                return item
        return None

    def container_for(self, packaging_type: str):
        for item in self._items():
            if item.type == InventoryType.PACKAGING.value and item.subtype == packaging_type:
                return item
        return None

    def label_item(self):
        for item in self._items():
            if item.type == InventoryType.LABEL.value and item.subtype == InventorySubtype.STICKER.value:
                return item
        return None

    def consume(self, item: InventoryItem, units: int) -> InventoryItem:
        """Decrement stock for packing; the balance may go negative and is flagged."""
        item.quantity = (item.quantity or 0) - units
        self.repository.save(item)
        if item.is_negative:
            logger.warning(f"INVENTORY: {item.name} ({item.id}) is negative: {item.quantity}")
        elif item.is_low_stock:
            logger.info(f"INVENTORY: {item.name} ({item.id}) below threshold: {item.quantity} < {item.threshold}")
        return item

    def restock(self, item: InventoryItem, units: float) -> InventoryItem:
        item.quantity = (item.quantity or 0) + units
        self.repository.save(item)
        logger.info(f"INVENTORY: restocked {item.name} ({item.id}) by {units}, now {item.quantity}")
        return item

    @service_operation
    def list_items(self):
        return self._items()

    @service_operation
    def add_inventory_item(self, name, type='OTHER', subtype=None, quantity=0, threshold=10, unit='pcs',
                           unit_cost=0.0, pack_size=1, supplier=None):
        """Upsert by name; an existing item only picks up the new supplier."""
        name = (name or '').strip()
        if not name:
            raise ValidationError('Item name is required')

        existing = self.find_by_name(name)
        if existing is not None:
            if supplier:
                existing.supplier = supplier
                self.repository.save(existing)
            self.log_operation('update_inventory_item', {'item_id': existing.id, 'supplier': supplier})
            return existing

        item_type = (type or InventoryType.OTHER.value).upper()
        if item_type not in {t.value for t in InventoryType}:
            raise ValidationError(f"Unknown inventory type: {type}")
        item_subtype = subtype.upper() if subtype else None
        if item_subtype and item_subtype not in {s.value for s in InventorySubtype}:
            raise ValidationError(f"Unknown inventory subtype: {subtype}")

        pack = whole_number('packSize', pack_size or 1)
        item = InventoryItem(
            id=generate_record_id('inventory_item'),
            organization_id=self.organization_id,
            name=name,
            type=item_type,
            subtype=item_subtype,
            quantity=finite_number('quantity', quantity or 0),
            threshold=finite_number('threshold', threshold or 0, minimum=0),
            unit=unit or 'pcs',
            unit_cost=finite_number('unitCost', unit_cost or 0, minimum=0),
            pack_size=pack,
            supplier=supplier,
        )
        self.repository.add(item)
        self.log_operation('add_inventory_item', {'item_id': item.id, 'name': name})
        return item

    @service_operation
    def adjust_inventory(self, item_id, change, new_unit_cost=None):
        item = self.repository.get(InventoryItem, item_id)
        if item is None:
            raise NotFound(f"Inventory item {item_id} not found")
        delta = finite_number('change', change)
        if new_unit_cost is not None:
            item.unit_cost = finite_number('unitCost', new_unit_cost, minimum=0)
        item.quantity = (item.quantity or 0) + delta
        self.repository.save(item)
        self.log_operation('adjust_inventory', {'item_id': item.id, 'change': delta, 'quantity': item.quantity})
        return item

    @service_operation
    def low_stock_items(self):
        return [item for item in self._items() if item.is_low_stock]

    @service_operation
    def negative_stock_items(self):
        return [item for item in self._items() if item.is_negative]

    @service_operation
    def seed_packaging(self):
        created = []
        for template in DEFAULT_PACKAGING_ITEMS:
            if self.find_by_name(template['name']):
                continue
            item = InventoryItem(
                id=generate_record_id('inventory_item'),
                organization_id=self.organization_id,
                supplier=None,
                **template,
            )
            self.repository.add(item)
            created.append(item)
        if created:
            self.log_operation('seed_packaging', {'created': [i.name for i in created]})
        return created

    def packaging_requirements(self, packaging_type: str, units: int) -> dict:
        """Container and label demand for ``units`` packs; read only."""
        if packaging_type not in {p.value for p in PackagingType}:
            raise ValidationError(f"Packaging type must be TIN or POUCH, got {packaging_type!r}")
        report = {}
        for role, item in (('container', self.container_for(packaging_type)), ('label', self.label_item())):
            available = float(item.quantity) if item is not None else 0.0
            report[role] = {
                'itemId': item.id if item is not None else None,
                'name': item.name if item is not None else None,
                'required': units,
                'available': available,
                'shortfall': max(0.0, units - available),
            }
        report['sufficient'] = all(report[role]['shortfall'] == 0 for role in ('container', 'label'))
        return report
