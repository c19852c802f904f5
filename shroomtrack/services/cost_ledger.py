"""Append-only cost ledger and its read-side aggregator.

Every row's ``total_cost`` is produced by ``CostTransaction.recompute_total``;
nothing else assigns it.
"""
from __future__ import annotations

import logging
from datetime import date as date_type, datetime, timedelta
from typing import Iterable, Optional

from ..models import COST_FIELDS, CostTransaction, round_currency
from ..utils.code_generator import generate_record_id
from ..utils.timezone_utils import TimezoneUtils
from ..utils.validation_helpers import finite_number
from .base_service import BaseService
from .errors import NotFound, ValidationError
from .results import service_operation

logger = logging.getLogger(__name__)

# wire key -> attribute, for manual corrections
EDITABLE_FIELDS = {
    'rawMaterialCost': 'raw_material_cost',
    'packagingCost': 'packaging_cost',
    'laborCost': 'labor_cost',
    'wastageCost': 'wastage_cost',
    'weightProcessed': 'weight_processed',
    'processingHours': 'processing_hours',
}
IMMUTABLE_FIELDS = {'id', 'referenceId', 'date', 'totalCost', 'createdAt'}


def _coerce_date(value) -> date_type:
    if value is None:
        return TimezoneUtils.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date_type):
        return value
    try:
        return date_type.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError(f"Invalid transaction date: {value!r}")


def _non_negative(name: str, value) -> float:
    return finite_number(name, 0.0 if value in (None, '') else value, minimum=0)


class CostLedger(BaseService):
    """Write side: record and correct cost transactions."""

    def append(self, reference_id: Optional[str], date=None, raw_cost=0.0, packaging_cost=0.0,
               labor_cost=0.0, wastage_cost=0.0, weight_processed=0.0, processing_hours=0.0) -> CostTransaction:
        """Raise-on-error primitive shared by the event producers."""
        transaction = CostTransaction(
            id=generate_record_id('cost'),
            reference_id=reference_id,
            date=_coerce_date(date),
            raw_material_cost=round_currency(_non_negative('rawMaterialCost', raw_cost)),
            packaging_cost=round_currency(_non_negative('packagingCost', packaging_cost)),
            labor_cost=round_currency(_non_negative('laborCost', labor_cost)),
            wastage_cost=round_currency(_non_negative('wastageCost', wastage_cost)),
            weight_processed=_non_negative('weightProcessed', weight_processed),
            processing_hours=_non_negative('processingHours', processing_hours),
            created_at=TimezoneUtils.utc_now(),
            organization_id=self.organization_id,
        )
        transaction.recompute_total()
        self.repository.add(transaction)
        logger.info(f"LEDGER: recorded {transaction.id} ref={reference_id} total={transaction.total_cost}")
        return transaction

    @service_operation
    def record_transaction(self, reference_id, date=None, raw_cost=0.0, packaging_cost=0.0, labor_cost=0.0,
                           wastage_cost=0.0, weight_processed=0.0, processing_hours=0.0):
        return self.append(
            reference_id,
            date=date,
            raw_cost=raw_cost,
            packaging_cost=packaging_cost,
            labor_cost=labor_cost,
            wastage_cost=wastage_cost,
            weight_processed=weight_processed,
            processing_hours=processing_hours,
        )

    @service_operation
    def update_transaction(self, transaction_id: str, fields: dict):
        """Manual correction: merge cost/quantity fields and recompute the total."""
        transaction = self.repository.get(CostTransaction, transaction_id)
        if transaction is None:
            raise NotFound(f"Cost transaction {transaction_id} not found")

        fields = fields or {}
        locked = sorted(set(fields) & IMMUTABLE_FIELDS)
        if locked:
            raise ValidationError(f"Fields cannot be changed: {', '.join(locked)}")
        unknown = sorted(set(fields) - set(EDITABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(unknown)}")

        # Validate everything before touching the record
        values = {EDITABLE_FIELDS[key]: _non_negative(key, value) for key, value in fields.items()}
        for attribute, value in values.items():
            if attribute in COST_FIELDS:
                value = round_currency(value)
            setattr(transaction, attribute, value)

        transaction.recompute_total()
        self.repository.save(transaction)
        logger.info(f"LEDGER: corrected {transaction.id} fields={sorted(values)} total={transaction.total_cost}")
        return transaction

    @service_operation
    def list_transactions(self):
        return sorted(
            self.repository.list(CostTransaction),
            key=lambda t: (t.created_at or datetime.min, t.id),
            reverse=True,
        )


class CostAggregator:
    """Read side: on-demand aggregates over ledger, lots and sales."""

    def __init__(self, transactions: Iterable[CostTransaction]):
        self.transactions = list(transactions)

    def totals(self) -> dict:
        totals = {
            'rawMaterialCost': 0.0,
            'packagingCost': 0.0,
            'laborCost': 0.0,
            'wastageCost': 0.0,
        }
        for transaction in self.transactions:
            totals['rawMaterialCost'] += transaction.raw_material_cost or 0.0
            totals['packagingCost'] += transaction.packaging_cost or 0.0
            totals['laborCost'] += transaction.labor_cost or 0.0
            totals['wastageCost'] += transaction.wastage_cost or 0.0
        totals = {key: round_currency(value) for key, value in totals.items()}
        totals['totalCost'] = round_currency(sum(totals.values()))
        return totals

    def breakdown(self) -> dict:
        """Percentage of the grand total per dimension; 0 when nothing is recorded."""
        totals = self.totals()
        grand_total = totals.pop('totalCost')
        if grand_total <= 0:
            return {key: 0.0 for key in totals}
        return {key: round(value / grand_total * 100.0, 2) for key, value in totals.items()}

    @staticmethod
    def weekly_revenue(sales, today: Optional[date_type] = None, tz_name: Optional[str] = None) -> list:
        """Delivered revenue for the 7 calendar days ending ``today``, oldest first."""
        today = today or TimezoneUtils.today(tz_name)
        days = [today - timedelta(days=offset) for offset in range(6, -1, -1)]
        buckets = {day: 0.0 for day in days}
        for sale in sales:
            if not sale.is_delivered:
                continue
            sale_day = TimezoneUtils.local_date(sale.date_created, tz_name)
            if sale_day in buckets:
                buckets[sale_day] += sale.total_amount or 0.0
        return [
            {'date': day.isoformat(), 'day': day.strftime('%a'), 'revenue': round_currency(buckets[day])}
            for day in days
        ]

    def average_cost_per_unit(self, lots) -> float:
        units = sum(lot.units_produced for lot in lots)
        if units <= 0:
            return 0.0
        return round_currency(self.totals()['totalCost'] / units)

    @staticmethod
    def delivered_revenue(sales) -> float:
        return round_currency(sum(
            sale.total_amount or 0.0 for sale in sales if sale.is_delivered
        ))

    def net_profit(self, sales) -> float:
        return round_currency(self.delivered_revenue(sales) - self.totals()['totalCost'])
