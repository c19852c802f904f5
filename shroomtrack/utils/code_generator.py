from __future__ import annotations

import secrets
import time
from typing import Dict, TypedDict

__all__ = [
    "generate_record_id",
    "generate_invoice_id",
    "parse_record_id",
    "validate_record_id",
]

BASE36_CHARS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
DEFAULT_PREFIX = "REC"

RECORD_PREFIXES: Dict[str, str] = {
    "batch": "BATCH",
    "finished_good": "FG",
    "cost": "COST",
    "purchase_order": "PO",
    "sale": "SALE",
    "customer": "CUST",
    "supplier": "SUP",
    "inventory_item": "ITEM",
    "recipe": "RCP",
    "setting": "SET",
}


class ParsedRecordId(TypedDict):
    prefix: str | None
    suffix: str | None
    record_type: str | None


def _int_to_base36(num: int) -> str:
    if num == 0:
        return "0"

    digits = []
    while num:
        num, remainder = divmod(num, 36)
        digits.append(BASE36_CHARS[remainder])

    return "".join(reversed(digits))


def _generate_suffix() -> str:
    timestamp_component = _int_to_base36(int(time.time() * 1000)).rjust(6, "0")[-6:]
    random_component = _int_to_base36(secrets.randbelow(36**4)).rjust(4, "0")
    return f"{timestamp_component}{random_component}".upper()


def generate_record_id(record_type: str) -> str:
    """Build a prefixed, time-ordered id such as ``BATCH-K3Z9QF01AB``."""
    normalized = (record_type or "").strip().lower()
    prefix = RECORD_PREFIXES.get(normalized, DEFAULT_PREFIX)
    return f"{prefix}-{_generate_suffix()}"


def generate_invoice_id() -> str:
    return f"INV-{secrets.randbelow(100000):05d}"


def parse_record_id(record_id: str) -> ParsedRecordId:
    if not record_id or "-" not in record_id:
        return {"prefix": None, "suffix": None, "record_type": None}

    prefix, suffix = record_id.split("-", 1)
    record_type = next((key for key, value in RECORD_PREFIXES.items() if value == prefix), None)
    return {"prefix": prefix, "suffix": suffix, "record_type": record_type}


def validate_record_id(record_id: str) -> bool:
    parsed = parse_record_id(record_id)
    return bool(parsed["prefix"]) and parsed["prefix"] in {DEFAULT_PREFIX, *RECORD_PREFIXES.values()}
