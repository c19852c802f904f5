from flask import request

from . import receiving_bp
from ...models import UserRole
from ...services import ReceivingService, get_repository
from ...utils.api_responses import APIResponse, serialize_many, serialize_one
from ...utils.permissions import role_required


@receiving_bp.route('/batches', methods=['GET'])
@role_required(UserRole.PROCESSING_WORKER)
def list_batches():
    result = ReceivingService(get_repository()).list_batches(status=request.args.get('status'))
    return APIResponse.from_result(result, serializer=serialize_many)


@receiving_bp.route('/batches', methods=['POST'])
@role_required(UserRole.PROCESSING_WORKER)
def receive_batch():
    data = APIResponse.handle_request_content()
    result = ReceivingService(get_repository()).receive_batch(
        source_farm=data.get('sourceFarm'),
        raw_weight_kg=data.get('rawWeightKg'),
        spoiled_weight_kg=data.get('spoiledWeightKg', 0),
        batch_id=data.get('id'),
        received_at=data.get('dateReceived'),
    )
    return APIResponse.from_result(result, serializer=serialize_one, status_code=201)


@receiving_bp.route('/batches/<batch_id>', methods=['GET'])
@role_required(UserRole.PROCESSING_WORKER, UserRole.PACKING_STAFF)
def get_batch(batch_id):
    result = ReceivingService(get_repository()).get_batch(batch_id)
    return APIResponse.from_result(result, serializer=serialize_one)
