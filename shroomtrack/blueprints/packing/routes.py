from flask import request

from . import packing_bp
from ...models import UserRole
from ...services import BatchAllocator, get_repository
from ...utils.api_responses import APIResponse, serialize_many, serialize_one
from ...utils.permissions import role_required


def _enforce_flag(data: dict):
    value = data.get('enforcePackagingStock')
    return None if value is None else bool(value)


@packing_bp.route('/candidates', methods=['GET'])
@role_required(UserRole.PACKING_STAFF)
def list_candidates():
    recipe_name = request.args.get('recipeName', '')
    batches = BatchAllocator(get_repository()).candidates(recipe_name)
    return APIResponse.success(data=serialize_many(batches))


@packing_bp.route('/pack', methods=['POST'])
@role_required(UserRole.PACKING_STAFF)
def pack_recipe():
    data = APIResponse.handle_request_content()
    result = BatchAllocator(get_repository()).pack_recipe(
        data.get('recipeName'),
        data.get('weightKg'),
        data.get('units'),
        data.get('packagingType'),
        enforce_packaging_stock=_enforce_flag(data),
    )
    return APIResponse.from_result(result, serializer=serialize_many, status_code=201)


@packing_bp.route('/batches/<batch_id>/pack', methods=['POST'])
@role_required(UserRole.PACKING_STAFF)
def pack_batch_partial(batch_id):
    data = APIResponse.handle_request_content()
    result = BatchAllocator(get_repository()).pack_batch_partial(
        batch_id,
        data.get('weightKg'),
        data.get('units'),
        data.get('packagingType'),
        recipe_name=data.get('recipeName'),
        enforce_packaging_stock=_enforce_flag(data),
    )
    return APIResponse.from_result(result, serializer=serialize_one, status_code=201)


@packing_bp.route('/packaging-check', methods=['GET'])
@role_required(UserRole.PACKING_STAFF)
def check_packaging_stock():
    units = request.args.get('units', type=int, default=0)
    result = BatchAllocator(get_repository()).check_packaging_stock(request.args.get('packagingType'), units)
    return APIResponse.from_result(result)


@packing_bp.route('/history', methods=['GET'])
@role_required(UserRole.PACKING_STAFF, UserRole.FINANCE_CLERK)
def packing_history():
    limit = request.args.get('limit', type=int, default=10)
    result = BatchAllocator(get_repository()).packing_history(limit=limit)
    return APIResponse.from_result(result, serializer=serialize_many)


@packing_bp.route('/products', methods=['GET'])
@role_required(UserRole.PACKING_STAFF, UserRole.FINANCE_CLERK)
def available_products():
    return APIResponse.from_result(BatchAllocator(get_repository()).available_products())


@packing_bp.route('/products/price', methods=['POST'])
@role_required(UserRole.FINANCE_CLERK)
def set_product_price():
    data = APIResponse.handle_request_content()
    result = BatchAllocator(get_repository()).set_product_price(
        data.get('recipeName'),
        data.get('packagingType'),
        data.get('price'),
    )
    return APIResponse.from_result(result, serializer=serialize_many)
