import logging

from flask import current_app

from . import settings_bp
from ...models import UserRole
from ...services import RateSettingsService, SheetSyncService, get_repository
from ...utils.api_responses import APIResponse
from ...utils.permissions import role_required

logger = logging.getLogger(__name__)


def _sync_service(repository) -> SheetSyncService:
    url = RateSettingsService(repository).sheet_sync_url()
    return SheetSyncService(url, timeout=current_app.config.get('SHEET_SYNC_TIMEOUT_SECONDS', 15.0))


@settings_bp.route('/rates', methods=['GET'])
@role_required()
def get_rates():
    result = RateSettingsService(get_repository()).get_rates()
    return APIResponse.from_result(result, serializer=lambda rates: rates.to_dict())


@settings_bp.route('/rates', methods=['PUT'])
@role_required(UserRole.ADMIN)
def set_rates():
    data = APIResponse.handle_request_content()
    result = RateSettingsService(get_repository()).set_rates(
        labor_rate_per_hour=data.get('laborRatePerHour'),
        raw_material_rate_per_kg=data.get('rawMaterialRatePerKg'),
    )
    return APIResponse.from_result(result, serializer=lambda rates: rates.to_dict())


@settings_bp.route('/sync-url', methods=['PUT'])
@role_required(UserRole.ADMIN)
def set_sync_url():
    data = APIResponse.handle_request_content()
    result = RateSettingsService(get_repository()).set_sheet_sync_url(data.get('url'))
    return APIResponse.from_result(result)


@settings_bp.route('/sync/push', methods=['POST'])
@role_required(UserRole.ADMIN)
def sync_push():
    repository = get_repository()
    return APIResponse.from_result(_sync_service(repository).push_full_database(repository))


@settings_bp.route('/sync/pull', methods=['POST'])
@role_required(UserRole.ADMIN)
def sync_pull():
    repository = get_repository()
    result = _sync_service(repository).pull_full_database(repository)
    if result.success:
        logger.info(f"Sheet pull replaced collections: {result.data}")
    return APIResponse.from_result(result)
