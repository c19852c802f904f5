from . import inventory_bp
from ...models import UserRole
from ...services import InventoryService, get_repository
from ...utils.api_responses import APIResponse, serialize_many, serialize_one
from ...utils.permissions import role_required

INVENTORY_ROLES = (UserRole.PACKING_STAFF, UserRole.FINANCE_CLERK)


@inventory_bp.route('/', methods=['GET'])
@role_required(*INVENTORY_ROLES)
def list_inventory():
    return APIResponse.from_result(InventoryService(get_repository()).list_items(), serializer=serialize_many)


@inventory_bp.route('/', methods=['POST'])
@role_required(*INVENTORY_ROLES)
def add_inventory():
    data = APIResponse.handle_request_content()
    result = InventoryService(get_repository()).add_inventory_item(
        name=data.get('name'),
        type=data.get('type', 'OTHER'),
        subtype=data.get('subtype'),
        quantity=data.get('quantity', 0),
        threshold=data.get('threshold', 10),
        unit=data.get('unit', 'pcs'),
        unit_cost=data.get('unitCost', 0),
        pack_size=data.get('packSize', 1),
        supplier=data.get('supplier'),
    )
    return APIResponse.from_result(result, serializer=serialize_one, status_code=201)


@inventory_bp.route('/<item_id>/adjust', methods=['POST'])
@role_required(*INVENTORY_ROLES)
def adjust_inventory(item_id):
    data = APIResponse.handle_request_content()
    result = InventoryService(get_repository()).adjust_inventory(
        item_id,
        data.get('change'),
        new_unit_cost=data.get('unitCost'),
    )
    return APIResponse.from_result(result, serializer=serialize_one)


@inventory_bp.route('/low-stock', methods=['GET'])
@role_required(*INVENTORY_ROLES)
def low_stock():
    return APIResponse.from_result(InventoryService(get_repository()).low_stock_items(), serializer=serialize_many)


@inventory_bp.route('/negative-stock', methods=['GET'])
@role_required(*INVENTORY_ROLES)
def negative_stock():
    result = InventoryService(get_repository()).negative_stock_items()
    return APIResponse.from_result(result, serializer=serialize_many)
