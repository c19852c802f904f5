from __future__ import annotations

import logging

from ..models import (
    Customer,
    FinishedGoodLot,
    PaymentMethod,
    SalesRecord,
    SalesStatus,
    round_currency,
    split_product_key,
)
from ..utils.code_generator import generate_invoice_id, generate_record_id
from ..utils.timezone_utils import TimezoneUtils
from ..utils.validation_helpers import finite_number, whole_number
from .base_service import BaseService
from .errors import InsufficientStock, NotFound, ValidationError
from .results import service_operation

logger = logging.getLogger(__name__)

UNKNOWN_CUSTOMER = 'Unknown'


class SalesService(BaseService):
    """Invoices drain finished-good lots oldest packed first, all or nothing."""

    @service_operation
    def create_sale(self, customer_id, product_key, quantity, unit_price, payment_method):
        parts = split_product_key(product_key)
        if parts is None:
            raise ValidationError(f"Invalid product key: {product_key!r}")
        recipe_name, packaging_type = parts

        qty = whole_number('Quantity', quantity)
        price = finite_number('Unit price', unit_price, minimum=0)
        method = str(payment_method or '').upper()
        if method not in {m.value for m in PaymentMethod}:
            raise ValidationError(f"Unknown payment method: {payment_method!r}")

        lots = sorted(
            (
                lot for lot in self.repository.list(FinishedGoodLot)
                if lot.recipe_name == recipe_name
                and lot.packaging_type == packaging_type
                and lot.quantity > 0
            ),
            key=lambda lot: (lot.date_packed, lot.id),
        )
        available = sum(lot.quantity for lot in lots)
        if available < qty:
            raise InsufficientStock(
                f"Insufficient stock for {product_key}: need {qty}, have {available}",
                shortfall=qty - available,
            )

        items = []
        outstanding = qty
        for lot in lots:
            if outstanding <= 0:
                break
            take = min(lot.quantity, outstanding)
            lot.drain(take)
            self.repository.save(lot)
            outstanding -= take
            items.append({
                'finishedGoodId': lot.id,
                'recipeName': recipe_name,
                'packagingType': packaging_type,
                'quantity': take,
                'unitPrice': price,
            })

        customer = self.repository.get(Customer, customer_id) if customer_id else None
        sale = SalesRecord(
            id=generate_record_id('sale'),
            organization_id=self.organization_id,
            invoice_id=generate_invoice_id(),
            customer_id=customer_id,
            customer_name=customer.name if customer else UNKNOWN_CUSTOMER,
            customer_email=customer.email if customer else None,
            customer_phone=customer.contact if customer else None,
            items=items,
            total_amount=round_currency(qty * price),
            payment_method=method,
            status=SalesStatus.INVOICED.value,
            date_created=TimezoneUtils.utc_now(),
            date_delivered=None,
        )
        self.repository.add(sale)
        self.log_operation('create_sale', {
            'sale_id': sale.id,
            'invoice_id': sale.invoice_id,
            'product': product_key,
            'quantity': qty,
            'lots': [line['finishedGoodId'] for line in items],
        })
        return sale

    @service_operation
    def update_sale_status(self, sale_id, status):
        sale = self.repository.get(SalesRecord, sale_id)
        if sale is None:
            raise NotFound(f"Sale {sale_id} not found")
        target = str(status or '').upper()
        if target != SalesStatus.DELIVERED.value or sale.status != SalesStatus.INVOICED.value:
            raise ValidationError(f"Cannot move sale {sale_id} from {sale.status} to {target or status}")
        sale.status = SalesStatus.DELIVERED.value
        sale.date_delivered = TimezoneUtils.utc_now()
        self.repository.save(sale)
        self.log_operation('update_sale_status', {'sale_id': sale.id, 'status': sale.status})
        return sale

    @service_operation
    def list_sales(self):
        return sorted(self.repository.list(SalesRecord), key=lambda s: (s.date_created, s.id), reverse=True)

    @service_operation
    def add_customer(self, name, contact=None, email=None, address=None):
        name = (name or '').strip()
        if not name:
            raise ValidationError('Customer name is required')
        customer = Customer(
            id=generate_record_id('customer'),
            organization_id=self.organization_id,
            name=name,
            contact=contact,
            email=email,
            address=address,
        )
        self.repository.add(customer)
        self.log_operation('add_customer', {'customer_id': customer.id})
        return customer

    @service_operation
    def list_customers(self):
        return sorted(self.repository.list(Customer), key=lambda c: c.name.lower())
