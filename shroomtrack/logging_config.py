from __future__ import annotations

import logging
import re

from flask import Flask

DEV_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
PROD_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
NOISY_LOGGERS = ("werkzeug", "flask_limiter", "sqlalchemy.engine", "urllib3")

_REDACTIONS = (
    # Customer contact details
    (re.compile(r"[A-Za-z0-9_.+-]+@[A-Za-z0-9-]+\.[A-Za-z0-9-.]+"), "[REDACTED_EMAIL]"),
    (re.compile(r"\+\d[\d\s-]{7,}\d"), "[REDACTED_PHONE]"),
    # A sheet script deployment URL grants write access to the mirror
    (re.compile(r"(https://script\.google\.com/macros/s/)[^/\s]+"), r"\1[REDACTED]"),
    (re.compile(r"(token|api[_-]?key|secret|password)\s*[:=]\s*([^\s,;]+)", re.IGNORECASE), r"\1=[REDACTED]"),
)


def redact(message: str) -> str:
    for pattern, replacement in _REDACTIONS:
        message = pattern.sub(replacement, message)
    return message


class PiiRedactionFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact(record.getMessage())
        record.args = ()
        return True


def configure_logging(app: Flask) -> None:
    """Set levels and formats for the root, Flask and package loggers.

    Gunicorn installs its own handlers; the dev server gets a stderr one.
    """
    level = logging.getLevelName(str(app.config.get("LOG_LEVEL") or "INFO").strip().upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    app.logger.setLevel(level)
    if not root.handlers:
        root.addHandler(logging.StreamHandler())

    if level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    is_production = app.config.get("ENV") == "production" and not app.debug
    formatter = logging.Formatter(PROD_FORMAT if is_production else DEV_FORMAT)
    for handler in root.handlers + app.logger.handlers:
        handler.setFormatter(formatter)
        if app.config.get("LOG_REDACT_PII", True) and not any(
            isinstance(f, PiiRedactionFilter) for f in handler.filters
        ):
            handler.addFilter(PiiRedactionFilter())
