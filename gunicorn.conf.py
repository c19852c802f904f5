from __future__ import annotations

import logging
import os
import sys
from typing import Final

LOGGER: Final = logging.getLogger("gunicorn.config")


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.environ.get(key, default))
    except (TypeError, ValueError):
        return default


def _single_writer_workers() -> int:
    """Batch allocation assumes one writer per workspace.

    Anything above one worker/thread is an explicit operator choice.
    """
    requested = _env_int("GUNICORN_WORKERS", 1)
    if requested > 1:
        sys.stderr.write(
            f"GUNICORN_WORKERS={requested}: concurrent packing or sales for one "
            "workspace may double-allocate stock\n"
        )
    return max(requested, 1)


# Server socket
bind = f"0.0.0.0:{os.environ.get('PORT', 5000)}"

# Workers
worker_class = "gthread"
workers = _single_writer_workers()
threads = _env_int("GUNICORN_THREADS", 1)

# Sheet sync calls can take up to SHEET_SYNC_TIMEOUT_SECONDS
timeout = _env_int("GUNICORN_TIMEOUT", 60)
graceful_timeout = _env_int("GUNICORN_GRACEFUL_TIMEOUT", 20)
keepalive = _env_int("GUNICORN_KEEPALIVE", 5)

# Logging
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(D)s'
errorlog = "-"
accesslog = "-"
loglevel = os.environ.get("GUNICORN_LOG_LEVEL", "info")

proc_name = "shroomtrack"

LOGGER.info("gunicorn bind=%s workers=%s threads=%s", bind, workers, threads)
