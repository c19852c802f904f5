from .batch_allocator import BatchAllocator, plan_allocation
from .cost_ledger import CostAggregator, CostLedger
from .errors import InsufficientStock, NotFound, PersistenceFailure, ServiceError, ValidationError
from .inventory_service import InventoryService
from .processing_service import ProcessingService
from .procurement_service import ProcurementService
from .rate_settings import RateSettingsService
from .receiving_service import ReceivingService
from .recipe_service import RecipeService
from .reporting_service import ReportingService
from .repository import InMemoryRepository, SqlAlchemyRepository, get_repository
from .results import ServiceResult, service_operation
from .sales_service import SalesService
from .sheet_sync_service import SheetSyncService

__all__ = [
    'BatchAllocator',
    'plan_allocation',
    'CostAggregator',
    'CostLedger',
    'InsufficientStock',
    'NotFound',
    'PersistenceFailure',
    'ServiceError',
    'ValidationError',
    'InventoryService',
    'ProcessingService',
    'ProcurementService',
    'RateSettingsService',
    'ReceivingService',
    'RecipeService',
    'ReportingService',
    'InMemoryRepository',
    'SqlAlchemyRepository',
    'get_repository',
    'ServiceResult',
    'service_operation',
    'SalesService',
    'SheetSyncService',
]
