from __future__ import annotations

from ..models import InventoryItem, PurchaseOrder, PurchaseOrderStatus, Supplier, round_currency
from ..utils.code_generator import generate_record_id
from ..utils.timezone_utils import TimezoneUtils
from ..utils.validation_helpers import whole_number
from .base_service import BaseService
from .errors import NotFound, ValidationError
from .inventory_service import InventoryService
from .results import service_operation

DEFAULT_QC_FAILURE_REASON = 'QC Failed on Receipt'
RESTOCK_KEYWORDS = ('replacement', 'received')


class ProcurementService(BaseService):
    """Suppliers and purchase orders for packaging stock."""

    def __init__(self, repository, inventory=None):
        super().__init__(repository)
        self.inventory = inventory or InventoryService(repository)

    def _order(self, po_id) -> PurchaseOrder:
        order = self.repository.get(PurchaseOrder, po_id)
        if order is None:
            raise NotFound(f"Purchase order {po_id} not found")
        return order

    def _restock(self, order: PurchaseOrder) -> None:
        item = self.repository.get(InventoryItem, order.item_id)
        if item is None:
            self.logger.warning(f"PO {order.id}: inventory item {order.item_id} no longer exists; stock not updated")
            return
        self.inventory.restock(item, order.total_units)

    # --- Suppliers ---

    @service_operation
    def add_supplier(self, name, contact=None, address=None, items_supplied=None):
        name = (name or '').strip()
        if not name:
            raise ValidationError('Supplier name is required')
        supplier = Supplier(
            id=generate_record_id('supplier'),
            organization_id=self.organization_id,
            name=name,
            contact=contact,
            address=address,
            items_supplied=list(items_supplied or []),
        )
        self.repository.add(supplier)
        self.log_operation('add_supplier', {'supplier_id': supplier.id})
        return supplier

    @service_operation
    def delete_supplier(self, supplier_id):
        """Remove a supplier; purchase orders keep the supplier name."""
        supplier = self.repository.get(Supplier, supplier_id)
        if supplier is None:
            raise NotFound(f"Supplier {supplier_id} not found")
        self.repository.delete(supplier)
        self.log_operation('delete_supplier', {'supplier_id': supplier_id})
        return supplier_id

    @service_operation
    def list_suppliers(self):
        return sorted(self.repository.list(Supplier), key=lambda s: s.name.lower())

    # --- Purchase orders ---

    @service_operation
    def create_purchase_order(self, item_id, packs, supplier=None, notes=None):
        item = self.repository.get(InventoryItem, item_id)
        if item is None:
            raise NotFound(f"Inventory item {item_id} not found")
        quantity = whole_number('Pack quantity', packs)

        pack_size = int(item.pack_size or 1)
        order = PurchaseOrder(
            id=generate_record_id('purchase_order'),
            organization_id=self.organization_id,
            item_id=item.id,
            item_name=item.name,
            quantity=quantity,
            pack_size=pack_size,
            total_units=quantity * pack_size,
            unit_cost=float(item.unit_cost or 0.0),
            total_cost=round_currency(quantity * float(item.unit_cost or 0.0)),
            status=PurchaseOrderStatus.ORDERED.value,
            date_ordered=TimezoneUtils.utc_now(),
            date_received=None,
            supplier=supplier or item.supplier,
            notes=notes,
            qc_passed=None,
            complaint_reason=None,
            complaint_resolution=None,
        )
        self.repository.add(order)
        self.log_operation('create_purchase_order', {
            'po_id': order.id,
            'item_id': item.id,
            'packs': quantity,
            'total_units': order.total_units,
        })
        return order

    @service_operation
    def receive_purchase_order(self, po_id, qc_passed=True, notes=None):
        order = self._order(po_id)
        if order.status != PurchaseOrderStatus.ORDERED.value:
            raise ValidationError(f"Purchase order {po_id} is {order.status}; only ORDERED can be received")

        order.date_received = TimezoneUtils.utc_now()
        order.qc_passed = bool(qc_passed)
        if notes:
            order.notes = notes
        if order.qc_passed:
            order.status = PurchaseOrderStatus.RECEIVED.value
            self._restock(order)
        else:
            order.status = PurchaseOrderStatus.COMPLAINT.value
            order.complaint_reason = notes or DEFAULT_QC_FAILURE_REASON
        self.repository.save(order)
        self.log_operation('receive_purchase_order', {'po_id': order.id, 'status': order.status})
        return order

    @service_operation
    def file_complaint(self, po_id, reason):
        order = self._order(po_id)
        if order.status not in (PurchaseOrderStatus.ORDERED.value, PurchaseOrderStatus.RECEIVED.value):
            raise ValidationError(f"Purchase order {po_id} is {order.status}; a complaint cannot be filed")
        reason = (reason or '').strip()
        if not reason:
            raise ValidationError('Complaint reason is required')
        order.status = PurchaseOrderStatus.COMPLAINT.value
        order.complaint_reason = reason
        self.repository.save(order)
        self.log_operation('file_complaint', {'po_id': order.id})
        return order

    @service_operation
    def resolve_complaint(self, po_id, resolution):
        """Close a complaint; a resolution mentioning a replacement or receipt restocks."""
        order = self._order(po_id)
        if order.status != PurchaseOrderStatus.COMPLAINT.value:
            raise ValidationError(f"Purchase order {po_id} is {order.status}; only COMPLAINT can be resolved")
        resolution = (resolution or '').strip()
        if not resolution:
            raise ValidationError('Resolution is required')

        order.status = PurchaseOrderStatus.RESOLVED.value
        order.complaint_resolution = resolution
        restocked = any(word in resolution.lower() for word in RESTOCK_KEYWORDS)
        if restocked:
            self._restock(order)
        self.repository.save(order)
        self.log_operation('resolve_complaint', {'po_id': order.id, 'restocked': restocked})
        return order

    @service_operation
    def list_purchase_orders(self):
        return sorted(self.repository.list(PurchaseOrder), key=lambda o: (o.date_ordered, o.id), reverse=True)
