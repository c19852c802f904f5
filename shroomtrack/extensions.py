from __future__ import annotations

from flask import current_app
from flask_caching import Cache
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager, current_user
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect

__all__ = ["db", "migrate", "csrf", "cache", "limiter", "login_manager"]

db = SQLAlchemy()
migrate = Migrate(compare_type=True, render_as_batch=True)
csrf = CSRFProtect()
cache = Cache()
login_manager = LoginManager()


def _default_rate_limits() -> str:
    return current_app.config.get("RATELIMIT_DEFAULT") or "5000 per hour;1000 per minute"


def _limiter_key_func() -> str:
    """Operators are limited per account, anonymous callers per address."""
    if current_user and current_user.is_authenticated:
        return f"user:{current_user.get_id()}"
    return get_remote_address()


limiter = Limiter(key_func=_limiter_key_func, default_limits=[_default_rate_limits])
