"""Service error taxonomy.

Services raise these internally; ``service_operation`` turns them into
failed ``ServiceResult`` values at the public boundary.
"""


class ServiceError(Exception):
    code = 'service_error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(ServiceError):
    code = 'not_found'


class InsufficientStock(ServiceError):
    code = 'insufficient_stock'

    def __init__(self, message: str, shortfall: float):
        super().__init__(message)
        self.shortfall = shortfall


class ValidationError(ServiceError):
    code = 'validation_error'


class PersistenceFailure(ServiceError):
    code = 'persistence_failure'
