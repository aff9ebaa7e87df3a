"""Log rotation and credential scrubbing for printprobe.

Files may be fetched from signed or authenticated URLs, and those URLs end
up in log messages.  :class:`ScrubFilter` redacts the credentials they carry
before a record is written to the log file.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler


LOG_FILENAME = "printprobe.log"

_REDACTED = "***REDACTED***"

_SCRUB_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    # user:password@ in URLs
    (re.compile(r"(https?://[^/\s:@]+:)([^@\s/]+)(@)", re.IGNORECASE),
     rf"\1{_REDACTED}\3"),
    (re.compile(r"([?&](?:token|access_token|api_key|key|signature|sig)=)([^&\s]+)", re.IGNORECASE),
     rf"\1{_REDACTED}"),
    (re.compile(r"(Authorization:\s*(?:Bearer|Basic)\s+)(\S+)", re.IGNORECASE),
     rf"\1{_REDACTED}"),
]


class ScrubFilter(logging.Filter):
    """Logging filter that redacts credentials from log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg and isinstance(record.msg, str):
            record.msg = _scrub(record.msg)
        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    k: _scrub(v) if isinstance(v, str) else v
                    for k, v in record.args.items()
                }
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    _scrub(a) if isinstance(a, str) else a
                    for a in record.args
                )
        return True


def _scrub(text: str) -> str:
    """Apply all scrub patterns to *text*."""
    for pattern, replacement in _SCRUB_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def configure_logging(
    log_dir: str,
    *,
    level: str = "WARNING",
    max_bytes: int = 5_000_000,
    backup_count: int = 3,
) -> str:
    """Send ``printprobe`` log records to a rotating file in *log_dir*.

    Repeated calls for the same directory reuse the existing handler.
    Returns the path of the log file.
    """
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.abspath(os.path.join(log_dir, LOG_FILENAME))

    package_logger = logging.getLogger("printprobe")
    package_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    for handler in package_logger.handlers:
        if isinstance(handler, RotatingFileHandler) and handler.baseFilename == log_path:
            return log_path

    handler = RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    handler.addFilter(ScrubFilter())
    package_logger.addHandler(handler)
    return log_path
