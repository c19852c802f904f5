import logging
from typing import Any, Dict, Optional

from flask import current_app, has_app_context

from ..models import BatchStatus, is_forward_transition
from .errors import ValidationError


class BaseService:
    """Base service class: injected repository, logging and config lookup"""

    def __init__(self, repository):
        self.repository = repository
        self.logger = logging.getLogger(self.__class__.__module__)

    @property
    def organization_id(self) -> Optional[int]:
        return getattr(self.repository, 'organization_id', None)

    def config_value(self, key: str, default: Any = None) -> Any:
        if has_app_context():
            value = current_app.config.get(key)
            if value is not None:
                return value
        return default

    def advance_status(self, batch, target: BatchStatus) -> None:
        """Every batch status change goes through here; stages never move backwards."""
        if not is_forward_transition(batch.status, target.value):
            raise ValidationError(f"Batch {batch.id} cannot move from {batch.status} to {target.value}")
        batch.status = target.value

    def log_operation(self, operation: str, data: Dict[str, Any]):
        """Centralized operation logging"""
        self.logger.info(f"Operation: {operation}", extra={
            'operation': operation,
            'data': data,
            'organization_id': self.organization_id,
            'service': self.__class__.__name__
        })
