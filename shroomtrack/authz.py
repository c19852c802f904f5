from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from .extensions import db, login_manager
from .utils.api_responses import APIResponse

logger = logging.getLogger(__name__)


def configure_login_manager(app):
    login_manager.init_app(app)

    @login_manager.unauthorized_handler
    def _unauthorized():
        return APIResponse.error('Authentication required', status_code=401)

    @login_manager.user_loader
    def load_user(user_id: str):
        return _active_operator(user_id)


def _active_operator(user_id: str):
    """The session's operator, or None once the account, its workspace or its role is no longer valid."""
    from .models import User, UserRole

    try:
        user = db.session.get(User, int(user_id))
    except (ValueError, TypeError):
        return None
    except SQLAlchemyError:
        logger.exception("Could not load operator %s", user_id)
        db.session.rollback()
        return None

    if user is None or not user.is_active:
        return None
    if user.organization is None or not user.organization.is_active:
        return None
    if user.role not in {role.value for role in UserRole}:
        logger.warning("Operator %s has unknown role %r", user.id, user.role)
        return None
    return user
