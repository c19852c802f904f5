"""Models package - imports all models for the application"""
from ..extensions import db
from .mixins import ScopedModelMixin, SerializableMixin

# Import in dependency order for table creation
from .models import Organization, User, UserRole
from .batch import Batch, BatchStatus, ProcessConfig, BATCH_STATUS_ORDER, is_forward_transition
from .recipe import Recipe, RECIPE_TYPES
from .finished_good import FinishedGoodLot, PackagingType, make_product_key, split_product_key
from .inventory import InventoryItem, InventoryType, InventorySubtype
from .procurement import Supplier, PurchaseOrder, PurchaseOrderStatus
from .sales import Customer, SalesRecord, SalesStatus, PaymentMethod
from .cost_transaction import CostTransaction, COST_FIELDS, round_currency
from .workspace_setting import WorkspaceSetting

__all__ = [
    'db',
    'ScopedModelMixin',
    'SerializableMixin',
    'Organization',
    'User',
    'UserRole',
    'Batch',
    'BatchStatus',
    'ProcessConfig',
    'BATCH_STATUS_ORDER',
    'is_forward_transition',
    'Recipe',
    'RECIPE_TYPES',
    'FinishedGoodLot',
    'PackagingType',
    'make_product_key',
    'split_product_key',
    'InventoryItem',
    'InventoryType',
    'InventorySubtype',
    'Supplier',
    'PurchaseOrder',
    'PurchaseOrderStatus',
    'Customer',
    'SalesRecord',
    'SalesStatus',
    'PaymentMethod',
    'CostTransaction',
    'COST_FIELDS',
    'round_currency',
    'WorkspaceSetting',
]
