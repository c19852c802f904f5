from typing import Any, Dict, List, Optional

from flask import jsonify, request

from ..services.results import ServiceResult

_ERROR_STATUS = {
    'not_found': 404,
    'insufficient_stock': 409,
    'validation_error': 422,
    'persistence_failure': 503,
}


class APIResponse:
    """Standardized API response handler"""

    @staticmethod
    def success(data: Any = None, message: str = "Success", status_code: int = 200):
        response_data = {
            'success': True,
            'message': message,
            'data': data
        }
        return jsonify(response_data), status_code

    @staticmethod
    def error(message: str, errors: Optional[Dict] = None, status_code: int = 400):
        response_data = {
            'success': False,
            'message': message,
            'errors': errors or {}
        }
        return jsonify(response_data), status_code

    @staticmethod
    def validation_error(errors: Dict[str, List[str]]):
        return APIResponse.error(
            message="Validation failed",
            errors=errors,
            status_code=422
        )

    @staticmethod
    def forbidden(message: str = "Access denied", roles=()):
        return APIResponse.error(
            message=message,
            errors={'roles': list(roles)},
            status_code=403
        )

    @staticmethod
    def from_result(result: ServiceResult, serializer=None, status_code: int = 200):
        """Translate a service result into the JSON envelope and status code."""
        if result.success:
            data = result.data
            if serializer is not None and data is not None:
                data = serializer(data)
            return APIResponse.success(data=data, message=result.message or "Success", status_code=status_code)

        errors = {'code': result.error}
        if result.shortfall is not None:
            errors['shortfall'] = result.shortfall
        return APIResponse.error(
            message=result.message,
            errors=errors,
            status_code=_ERROR_STATUS.get(result.error, 400),
        )

    @staticmethod
    def handle_request_content() -> Dict[str, Any]:
        """Smart request content handling"""
        if request.is_json:
            return request.get_json(silent=True) or {}
        if request.form:
            return request.form.to_dict()
        return {}


def serialize_many(items):
    return [item.to_dict() for item in items]


def serialize_one(item):
    return item.to_dict()
