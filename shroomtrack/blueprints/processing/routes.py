from . import processing_bp
from ...models import UserRole
from ...services import ProcessingService, RecipeService, get_repository
from ...utils.api_responses import APIResponse, serialize_many, serialize_one
from ...utils.permissions import role_required

_RECIPE_FIELDS = {
    'name': 'name',
    'type': 'type',
    'baseWeightKg': 'base_weight_kg',
    'cookTimeMinutes': 'cook_time_minutes',
    'temperature': 'temperature',
    'notes': 'notes',
    'imageUrl': 'image_url',
    'yieldRatio': 'yield_ratio',
    'defaultPackSizeKg': 'default_pack_size_kg',
}


def _recipe_fields(data: dict) -> dict:
    return {attr: data[key] for key, attr in _RECIPE_FIELDS.items() if key in data}


@processing_bp.route('/batches/<batch_id>/start', methods=['POST'])
@role_required(UserRole.PROCESSING_WORKER)
def start_processing(batch_id):
    data = APIResponse.handle_request_content()
    result = ProcessingService(get_repository()).start_processing(batch_id, data.get('recipeName'))
    return APIResponse.from_result(result, serializer=serialize_one)


@processing_bp.route('/batches/<batch_id>/recipe', methods=['POST'])
@role_required(UserRole.PROCESSING_WORKER)
def switch_recipe(batch_id):
    data = APIResponse.handle_request_content()
    result = ProcessingService(get_repository()).switch_recipe(batch_id, data.get('recipeName'))
    return APIResponse.from_result(result, serializer=serialize_one)


@processing_bp.route('/batches/<batch_id>/complete', methods=['POST'])
@role_required(UserRole.PROCESSING_WORKER)
def complete_processing(batch_id):
    data = APIResponse.handle_request_content()
    result = ProcessingService(get_repository()).complete_processing(
        batch_id,
        good_weight_kg=data.get('goodWeightKg'),
        wastage_kg=data.get('wastageKg', 0),
        wastage_reason=data.get('wastageReason'),
        quality_notes=data.get('qualityNotes'),
    )
    return APIResponse.from_result(result, serializer=serialize_one)


@processing_bp.route('/batches/<batch_id>/store', methods=['POST'])
@role_required(UserRole.PROCESSING_WORKER, UserRole.PACKING_STAFF)
def mark_stored(batch_id):
    data = APIResponse.handle_request_content()
    result = ProcessingService(get_repository()).mark_stored(batch_id, data.get('storageLocation'))
    return APIResponse.from_result(result, serializer=serialize_one)


# --- Recipes ---

@processing_bp.route('/recipes', methods=['GET'])
@role_required(UserRole.PROCESSING_WORKER, UserRole.PACKING_STAFF)
def list_recipes():
    return APIResponse.from_result(RecipeService(get_repository()).list_recipes(), serializer=serialize_many)


@processing_bp.route('/recipes', methods=['POST'])
@role_required(UserRole.PROCESSING_WORKER)
def add_recipe():
    data = APIResponse.handle_request_content()
    fields = _recipe_fields(data)
    fields.setdefault('name', None)
    result = RecipeService(get_repository()).add_recipe(**fields)
    return APIResponse.from_result(result, serializer=serialize_one, status_code=201)


@processing_bp.route('/recipes/<recipe_id>', methods=['PATCH'])
@role_required(UserRole.PROCESSING_WORKER)
def update_recipe(recipe_id):
    data = APIResponse.handle_request_content()
    result = RecipeService(get_repository()).update_recipe(recipe_id, _recipe_fields(data))
    return APIResponse.from_result(result, serializer=serialize_one)


@processing_bp.route('/recipes/<recipe_id>', methods=['DELETE'])
@role_required(UserRole.PROCESSING_WORKER)
def delete_recipe(recipe_id):
    return APIResponse.from_result(RecipeService(get_repository()).delete_recipe(recipe_id))
