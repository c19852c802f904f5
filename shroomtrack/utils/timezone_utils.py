from __future__ import annotations

from datetime import date, datetime, timezone as dt_timezone

import pytz
from flask import current_app, has_app_context

DEFAULT_TIMEZONE = "UTC"


class TimezoneUtils:
    """Naive-UTC storage helpers plus workspace-local calendar conversion."""

    @staticmethod
    def utc_now() -> datetime:
        """Current UTC time as a naive datetime, the form every model stores."""
        return datetime.now(dt_timezone.utc).replace(tzinfo=None)

    @staticmethod
    def validate_timezone(tz_name: str | None) -> bool:
        return bool(tz_name) and tz_name in pytz.all_timezones_set

    @staticmethod
    def workspace_timezone() -> str:
        if has_app_context():
            candidate = current_app.config.get("WORKSPACE_TIMEZONE")
            if TimezoneUtils.validate_timezone(candidate):
                return candidate
        return DEFAULT_TIMEZONE

    @staticmethod
    def to_local(dt: datetime | None, tz_name: str | None = None) -> datetime | None:
        if dt is None:
            return None
        aware = dt if dt.tzinfo else pytz.utc.localize(dt)
        target = pytz.timezone(tz_name or TimezoneUtils.workspace_timezone())
        return aware.astimezone(target)

    @staticmethod
    def local_date(dt: datetime | None, tz_name: str | None = None) -> date | None:
        localized = TimezoneUtils.to_local(dt, tz_name)
        return localized.date() if localized else None

    @staticmethod
    def today(tz_name: str | None = None) -> date:
        return TimezoneUtils.local_date(TimezoneUtils.utc_now(), tz_name)

    @staticmethod
    def to_naive_utc(dt: datetime | None) -> datetime | None:
        if dt is None or dt.tzinfo is None:
            return dt
        return dt.astimezone(dt_timezone.utc).replace(tzinfo=None)

    @staticmethod
    def isoformat(dt: datetime | None) -> str | None:
        return dt.isoformat() if dt else None

    @staticmethod
    def parse(value) -> datetime | None:
        """Accept ISO strings (with or without ``Z``), epoch millis, or datetimes."""
        if value in (None, ""):
            return None
        if isinstance(value, datetime):
            return TimezoneUtils.to_naive_utc(value)
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value / 1000.0, tz=dt_timezone.utc).replace(tzinfo=None)
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return TimezoneUtils.to_naive_utc(datetime.fromisoformat(text))
