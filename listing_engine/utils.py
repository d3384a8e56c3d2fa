"""
Utility functions for number/date parsing, phone normalization, and logging.
"""
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Optional


def init_logger(
    name: str = "listing_engine",
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_file: Optional[str] = "listing_engine.log"
) -> logging.Logger:
    """Initialize logger with console and optional file handlers."""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return logger

    console_level_num = getattr(logging, console_level.upper(), logging.INFO)
    ch = logging.StreamHandler()
    ch.setLevel(console_level_num)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:  # Create file handler only if log_file is provided
        file_level_num = getattr(logging, file_level.upper(), logging.DEBUG)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level_num)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger


def now_iso() -> str:
    """Return current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def digits_only(s: Optional[str]) -> str:
    """Strip every non-digit character, e.g. "(02) 123-4567" -> "021234567"."""
    if not s:
        return ""
    return re.sub(r"\D", "", s)


def parse_number(value: Any) -> Optional[float]:
    """
    Convert a number or numeric string to float.

    Returns None for missing, blank, boolean, or non-numeric input and for NaN,
    so callers can treat "not a number" uniformly.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number):
        return None
    return number


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Naive values are read as UTC. Unparsable values give None.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        ts = datetime.fromisoformat(text)
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def days_since(ts: datetime, now: Optional[datetime] = None) -> int:
    """Whole days elapsed between ts and now, truncated toward zero."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return int((now - ts).total_seconds() / 86400)


def format_timestamp(value: Optional[str]) -> str:
    """Format a timestamp as DD/MM/YYYY HH:MM:SS, or "-" when missing."""
    ts = parse_timestamp(value)
    if ts is None:
        return "-"
    return ts.strftime("%d/%m/%Y %H:%M:%S")
