"""Mutable per-workspace cost rates.

Rates are read when a cost transaction is recorded; the ledger stores only
the computed cost, never the rate.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from flask import has_app_context

from ..extensions import cache
from ..models import WorkspaceSetting
from ..utils.code_generator import generate_record_id
from ..utils.validation_helpers import finite_number
from .base_service import BaseService
from .errors import ValidationError
from .results import service_operation

logger = logging.getLogger(__name__)

LABOR_RATE_KEY = 'labor_rate_per_hour'
RAW_RATE_KEY = 'raw_material_rate_per_kg'
SHEET_SYNC_URL_KEY = 'sheet_sync_url'

DEFAULT_LABOR_RATE_PER_HOUR = 12.50
DEFAULT_RAW_MATERIAL_RATE_PER_KG = 8.00


@dataclass(frozen=True)
class Rates:
    labor_rate_per_hour: float
    raw_material_rate_per_kg: float

    def to_dict(self) -> dict:
        return {
            'laborRatePerHour': self.labor_rate_per_hour,
            'rawMaterialRatePerKg': self.raw_material_rate_per_kg,
        }


def _rates_cache_key(organization_id) -> str:
    return f"rate_settings:{organization_id}"


class RateSettingsService(BaseService):

    def _cache_enabled(self) -> bool:
        return has_app_context() and self.organization_id is not None

    def _setting(self, key: str):
        for setting in self.repository.list(WorkspaceSetting):
            if setting.key == key:
                return setting
        return None

    def _read_rates(self) -> Rates:
        labor_default = self.config_value('DEFAULT_LABOR_RATE_PER_HOUR', DEFAULT_LABOR_RATE_PER_HOUR)
        raw_default = self.config_value('DEFAULT_RAW_MATERIAL_RATE_PER_KG', DEFAULT_RAW_MATERIAL_RATE_PER_KG)
        labor = self._setting(LABOR_RATE_KEY)
        raw = self._setting(RAW_RATE_KEY)
        return Rates(
            labor_rate_per_hour=float(labor.value) if labor and labor.value is not None else float(labor_default),
            raw_material_rate_per_kg=float(raw.value) if raw and raw.value is not None else float(raw_default),
        )

    def current_rates(self) -> Rates:
        """Plain accessor used by the cost producers at recording time."""
        if not self._cache_enabled():
            return self._read_rates()
        key = _rates_cache_key(self.organization_id)
        cached = cache.get(key)
        if cached is not None:
            return Rates(**cached)
        rates = self._read_rates()
        cache.set(
            key,
            {'labor_rate_per_hour': rates.labor_rate_per_hour,
             'raw_material_rate_per_kg': rates.raw_material_rate_per_kg},
            timeout=self.config_value('RATE_SETTINGS_CACHE_TTL', 300),
        )
        return rates

    @service_operation
    def get_rates(self):
        return self.current_rates()

    @service_operation
    def set_rates(self, labor_rate_per_hour=None, raw_material_rate_per_kg=None):
        updates = {}
        for key, value in ((LABOR_RATE_KEY, labor_rate_per_hour), (RAW_RATE_KEY, raw_material_rate_per_kg)):
            if value is None:
                continue
            updates[key] = finite_number(key, value, minimum=0)

        if not updates:
            raise ValidationError('No rate values supplied')

        for key, value in updates.items():
            self._write_setting(key, value)

        if self._cache_enabled():
            cache.delete(_rates_cache_key(self.organization_id))

        self.log_operation('set_rates', updates)
        return self._read_rates()

    def _write_setting(self, key: str, value) -> WorkspaceSetting:
        setting = self._setting(key)
        if setting is None:
            setting = WorkspaceSetting(
                id=generate_record_id('setting'),
                key=key,
                value=value,
                organization_id=self.organization_id,
            )
            return self.repository.add(setting)
        setting.value = value
        return self.repository.save(setting)

    def sheet_sync_url(self):
        setting = self._setting(SHEET_SYNC_URL_KEY)
        if setting and setting.value:
            return setting.value
        return self.config_value('SHEET_SYNC_URL')

    @service_operation
    def set_sheet_sync_url(self, url):
        cleaned = (url or '').strip()
        if cleaned and not cleaned.startswith(('http://', 'https://')):
            raise ValidationError('Sync URL must start with http:// or https://')
        self._write_setting(SHEET_SYNC_URL_KEY, cleaned or None)
        self.log_operation('set_sheet_sync_url', {'configured': bool(cleaned)})
        return cleaned or None
