from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from .errors import InsufficientStock, ServiceError

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class ServiceResult(Generic[T]):
    """Tagged outcome of a public service operation."""
    success: bool
    data: Optional[T] = None
    message: str = ''
    error: Optional[str] = None
    shortfall: Optional[float] = None

    @classmethod
    def ok(cls, data: Any = None, message: str = 'Success') -> 'ServiceResult':
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: ServiceError) -> 'ServiceResult':
        return cls(
            success=False,
            message=error.message,
            error=error.code,
            shortfall=error.shortfall if isinstance(error, InsufficientStock) else None,
        )

    def __bool__(self) -> bool:
        return self.success


def service_operation(func):
    """
    Wrap a service method so callers always receive a ServiceResult.

    The wrapped method returns its payload (or a ServiceResult) and raises
    ServiceError subclasses for expected failures.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            outcome = func(*args, **kwargs)
        except ServiceError as exc:
            logger.warning(f"{func.__qualname__} failed ({exc.code}): {exc.message}")
            return ServiceResult.fail(exc)
        if isinstance(outcome, ServiceResult):
            return outcome
        return ServiceResult.ok(outcome)

    return wrapper
