from .code_generator import generate_invoice_id, generate_record_id
from .timezone_utils import TimezoneUtils

__all__ = [
    "generate_invoice_id",
    "generate_record_id",
    "TimezoneUtils",
]
