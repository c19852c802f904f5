from __future__ import annotations

import os
from datetime import timedelta
from typing import Mapping

ENVIRONMENTS = ("development", "testing", "staging", "production")
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class EnvReader:
    """Typed access to environment variables.

    Malformed values fall back to the default and are collected in
    ``warnings`` so the app factory can log them once logging is up.
    """

    def __init__(self, data: Mapping[str, str] | None = None):
        self._data = dict(os.environ if data is None else data)
        self.warnings: list[str] = []

    def _value(self, key: str) -> str | None:
        value = (self._data.get(key) or '').strip()
        return value or None

    def _fallback(self, key, value, kind, default):
        self.warnings.append(f"{key} expected {kind} but received {value!r}; falling back to {default}.")
        return default

    def str(self, key: str, default: str | None = None) -> str | None:
        value = self._value(key)
        return default if value is None else value

    def int(self, key: str, default: int = 0) -> int:
        value = self._value(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return self._fallback(key, value, 'integer', default)

    def float(self, key: str, default: float = 0.0) -> float:
        value = self._value(key)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            return self._fallback(key, value, 'float', default)

    def bool(self, key: str, default: bool = False) -> bool:
        value = self._value(key)
        if value is None:
            return default
        if value.lower() in _TRUE_VALUES:
            return True
        if value.lower() in _FALSE_VALUES:
            return False
        return self._fallback(key, value, 'boolean', default)


def database_url(reader: EnvReader, key: str = 'DATABASE_URL') -> str | None:
    url = reader.str(key)
    if url and url.startswith('postgres://'):
        return 'postgresql://' + url[len('postgres://'):]
    return url


env = EnvReader()
ACTIVE_ENV = (env.str('FLASK_ENV', 'development') or 'development').lower()
if ACTIVE_ENV not in ENVIRONMENTS:
    raise RuntimeError(f"Invalid FLASK_ENV={ACTIVE_ENV!r}. Expected one of {list(ENVIRONMENTS)}.")


class BaseConfig:
    FLASK_ENV = ACTIVE_ENV
    SECRET_KEY = env.str('FLASK_SECRET_KEY', 'devkey-please-change-in-production')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_CREATE_ALL = env.bool('SQLALCHEMY_CREATE_ALL', False)
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True, 'pool_recycle': 1800}

    # Sessions and CSRF
    PERMANENT_SESSION_LIFETIME = timedelta(minutes=env.int('SESSION_LIFETIME_MINUTES', 60))
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    WTF_CSRF_ENABLED = True

    RATELIMIT_ENABLED = env.bool('RATELIMIT_ENABLED', True)
    RATELIMIT_STORAGE_URI = env.str('RATELIMIT_STORAGE_URI', 'memory://')
    RATELIMIT_DEFAULT = env.str('RATELIMIT_DEFAULT', '5000 per hour;1000 per minute')
    LOGIN_RATE_LIMIT = env.str('LOGIN_RATE_LIMIT', '20 per minute')

    CACHE_TYPE = env.str('CACHE_TYPE', 'SimpleCache')
    CACHE_DEFAULT_TIMEOUT = env.int('CACHE_DEFAULT_TIMEOUT', 120)
    RATE_SETTINGS_CACHE_TTL = env.int('RATE_SETTINGS_CACHE_TTL', 300)

    LOG_LEVEL = env.str('LOG_LEVEL', 'WARNING')
    LOG_REDACT_PII = env.bool('LOG_REDACT_PII', True)

    # Costing and packing
    DEFAULT_LABOR_RATE_PER_HOUR = env.float('DEFAULT_LABOR_RATE_PER_HOUR', 12.50)
    DEFAULT_RAW_MATERIAL_RATE_PER_KG = env.float('DEFAULT_RAW_MATERIAL_RATE_PER_KG', 8.00)
    DEFAULT_SELLING_PRICE = env.float('DEFAULT_SELLING_PRICE', 15.00)
    PACKING_WEIGHT_TOLERANCE_KG = env.float('PACKING_WEIGHT_TOLERANCE_KG', 0.1)
    PACKING_ENFORCE_PACKAGING_STOCK = env.bool('PACKING_ENFORCE_PACKAGING_STOCK', False)
    WORKSPACE_TIMEZONE = env.str('WORKSPACE_TIMEZONE', 'UTC')

    # Spreadsheet mirror
    SHEET_SYNC_URL = env.str('SHEET_SYNC_URL')
    SHEET_SYNC_TIMEOUT_SECONDS = env.float('SHEET_SYNC_TIMEOUT_SECONDS', 15.0)

    # Anonymous callers work against a process-local in-memory store
    DEMO_MODE = env.bool('SHROOMTRACK_DEMO_MODE', False)


class DevelopmentConfig(BaseConfig):
    ENV = 'development'
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = database_url(env)


class TestingConfig(BaseConfig):
    ENV = 'testing'
    TESTING = True
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    CACHE_TYPE = 'SimpleCache'


class StagingConfig(BaseConfig):
    ENV = 'staging'
    SESSION_COOKIE_SECURE = True
    PREFERRED_URL_SCHEME = 'https'
    SQLALCHEMY_DATABASE_URI = database_url(env)


class ProductionConfig(StagingConfig):
    ENV = 'production'
    LOG_LEVEL = env.str('LOG_LEVEL', 'INFO')
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': env.int('SQLALCHEMY_POOL_SIZE', 10),
        'max_overflow': env.int('SQLALCHEMY_MAX_OVERFLOW', 20),
        'pool_pre_ping': True,
        'pool_recycle': 1800,
    }


config_map = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'staging': StagingConfig,
    'production': ProductionConfig,
}

Config = config_map[ACTIVE_ENV]
