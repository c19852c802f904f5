from __future__ import annotations

from ..models import Batch, BatchStatus, CostTransaction, FinishedGoodLot, InventoryItem, SalesRecord, SalesStatus
from ..utils.timezone_utils import TimezoneUtils
from .base_service import BaseService
from .batch_allocator import BatchAllocator
from .cost_ledger import CostAggregator
from .results import service_operation


class ReportingService(BaseService):
    """Dashboard and finance figures computed from the full tables on demand."""

    def aggregator(self) -> CostAggregator:
        return CostAggregator(self.repository.list(CostTransaction))

    @service_operation
    def finance_summary(self, today=None):
        aggregator = self.aggregator()
        sales = self.repository.list(SalesRecord)
        lots = self.repository.list(FinishedGoodLot)
        available = BatchAllocator(self.repository).available_products()

        return {
            'totals': aggregator.totals(),
            'breakdown': aggregator.breakdown(),
            'deliveredRevenue': aggregator.delivered_revenue(sales),
            'netProfit': aggregator.net_profit(sales),
            'averageCostPerUnit': aggregator.average_cost_per_unit(lots),
            'unitsProduced': sum(lot.units_produced for lot in lots),
            'weeklyRevenue': aggregator.weekly_revenue(sales, today=today),
            'availableGoods': available.data if available.success else [],
            'outstandingInvoices': sum(1 for sale in sales if sale.status == SalesStatus.INVOICED.value),
        }

    @service_operation
    def weekly_revenue(self, today=None):
        return CostAggregator.weekly_revenue(self.repository.list(SalesRecord), today=today)

    @service_operation
    def overview(self):
        batches = self.repository.list(Batch)
        items = self.repository.list(InventoryItem)
        lots = self.repository.list(FinishedGoodLot)
        status_counts = {status.value: 0 for status in BatchStatus}
        for batch in batches:
            status_counts[batch.status] = status_counts.get(batch.status, 0) + 1

        today = TimezoneUtils.today()
        received_today = [b for b in batches if TimezoneUtils.local_date(b.date_received) == today]
        packable = [
            b for b in batches
            if b.status in (BatchStatus.DRYING_COMPLETE.value, BatchStatus.PACKED.value)
        ]
        return {
            'batchCounts': status_counts,
            'receivedTodayKg': round(sum(b.raw_weight_kg for b in received_today), 2),
            'packableWeightKg': round(sum(b.available_weight_kg for b in packable), 2),
            'finishedUnitsInStock': sum(lot.quantity for lot in lots),
            'lowStockItems': [item.to_dict() for item in items if item.is_low_stock],
            'negativeStockItems': [item.to_dict() for item in items if item.is_negative],
        }
