from . import overview_bp
from ...services import ReportingService, get_repository
from ...utils.api_responses import APIResponse
from ...utils.permissions import role_required


@overview_bp.route('/', methods=['GET'])
@role_required()
def dashboard():
    return APIResponse.from_result(ReportingService(get_repository()).overview())
