import logging
from functools import wraps

from flask import current_app
from flask_login import current_user

from ..models import UserRole
from .api_responses import APIResponse

logger = logging.getLogger(__name__)


def _role_value(role) -> str:
    return role.value if isinstance(role, UserRole) else str(role)


def role_required(*roles):
    """
    Gate a view on the operator's role. ADMIN passes every gate; with no
    roles given any logged-in operator passes. In demo mode anonymous callers
    pass and work against the in-memory store.
    """
    wanted = tuple(_role_value(role) for role in roles)

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user or not current_user.is_authenticated:
                if current_app.config.get('DEMO_MODE', False):
                    return f(*args, **kwargs)
                return APIResponse.error("Authentication required", status_code=401)

            if not wanted or current_user.has_role(*wanted):
                return f(*args, **kwargs)

            logger.warning(f"Role check failed for user {current_user.id}: has {current_user.role}, needs {wanted}")
            return APIResponse.forbidden(f"Requires one of: {', '.join(wanted)}", roles=wanted)

        return decorated_function
    return decorator
