"""
Duration and clock-time normalization. Pure functions, never raise.
Invalid input degrades to a documented default (60 minutes, (0, 0)).
"""

import logging
import math
import re
from datetime import date, datetime, time, timezone as dt_timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60
MINUTES_PER_WORKDAY = 480
MAX_REASONABLE_DURATION_MINUTES = 2400  # 5 work days

_HOURS_RE = re.compile(r"([\d.]+)\s*(hours?|hrs?)")
_MINUTES_RE = re.compile(r"([\d.]+)\s*(minutes?|mins?)")
_DAYS_RE = re.compile(r"([\d.]+)\s*(days?)")
_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _match_number(pattern: re.Pattern, text: str) -> Optional[float]:
    m = pattern.search(text)
    if not m:
        return None
    try:
        return float(m.group(1))
    except ValueError:
        return None


def parse_duration_to_minutes(value: Any) -> int:
    """
    Number -> minutes. Text: "2 hours" -> 120, "1.5 hrs" -> 90, "45 minutes" -> 45,
    "2 days" -> 960 (8h workday). Anything else -> 60.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_DURATION_MINUTES
    if isinstance(value, (int, float)):
        if not math.isfinite(value) or value <= 0:
            return DEFAULT_DURATION_MINUTES
        if value > MAX_REASONABLE_DURATION_MINUTES:
            logger.warning(
                "Unusually high duration: %s min (%sh). Max is %s min.",
                value, round_half_up(value / 60), MAX_REASONABLE_DURATION_MINUTES,
            )
        return round_half_up(value)
    if not isinstance(value, str):
        return DEFAULT_DURATION_MINUTES

    text = value.strip().lower()
    if not text:
        return DEFAULT_DURATION_MINUTES

    hours = _match_number(_HOURS_RE, text)
    if hours is not None:
        return round_half_up(hours * 60)
    minutes = _match_number(_MINUTES_RE, text)
    if minutes is not None:
        return round_half_up(minutes)
    days = _match_number(_DAYS_RE, text)
    if days is not None:
        return round_half_up(days * MINUTES_PER_WORKDAY)
    return DEFAULT_DURATION_MINUTES


def sanitize_job_duration(duration_minutes: Any) -> dict:
    """Cap at MAX_REASONABLE_DURATION_MINUTES and flag whether the original was unrealistic."""
    original = duration_minutes if isinstance(duration_minutes, (int, float)) else DEFAULT_DURATION_MINUTES
    unrealistic = original > MAX_REASONABLE_DURATION_MINUTES
    return {
        "sanitized": MAX_REASONABLE_DURATION_MINUTES if unrealistic else original,
        "was_unrealistic": unrealistic,
        "original_minutes": original,
        "max_allowed": MAX_REASONABLE_DURATION_MINUTES,
    }


def _resolve_zone(tz_name: Optional[str]):
    if not tz_name:
        return dt_timezone.utc
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using UTC", tz_name)
        return dt_timezone.utc


def _wall_clock(moment: datetime, tz_name: Optional[str]) -> tuple[int, int]:
    if tz_name is None:
        logger.warning("Normalizing an ISO timestamp without a timezone; assuming UTC")
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=dt_timezone.utc)
    local = moment.astimezone(_resolve_zone(tz_name))
    return local.hour, local.minute


def _parse_hh_mm(text: str) -> tuple[int, int]:
    parts = text.split(":")
    if len(parts) < 2:
        return 0, 0
    try:
        h, m = int(parts[0]), int(parts[1])
    except ValueError:
        return 0, 0
    if h == 24 and m == 0:
        return 0, 0
    if not (0 <= h < 24 and 0 <= m < 60):
        return 0, 0
    return h, m


def normalize_clock_time(value: Any, timezone: Optional[str] = None) -> tuple[int, int]:
    """
    (h, m) sequence, datetime/time/date, ISO-8601 string or "HH:MM" -> (hour, minute).
    ISO timestamps are converted to wall-clock time in `timezone` (UTC when absent).
    """
    if value is None or value == "":
        return 0, 0
    if isinstance(value, (list, tuple)):
        if len(value) < 2:
            return 0, 0
        try:
            h, m = int(value[0]), int(value[1])
        except (TypeError, ValueError):
            return 0, 0
        return (0, m) if h == 24 else (h, m)
    if isinstance(value, datetime):
        return _wall_clock(value, timezone)
    if isinstance(value, time):
        return value.hour, value.minute
    if isinstance(value, date):
        return 0, 0
    if not isinstance(value, str):
        return 0, 0

    text = value.strip()
    if _DATE_ONLY_RE.match(text):
        return 0, 0
    if "T" in text or text.endswith("Z"):
        try:
            moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            logger.error("Error normalizing time %r", value)
            return 0, 0
        return _wall_clock(moment, timezone)
    if ":" in text:
        return _parse_hh_mm(text)
    return 0, 0


def clock_to_minutes(value: Any, timezone: Optional[str] = None) -> int:
    h, m = normalize_clock_time(value, timezone)
    return h * 60 + m


def minutes_to_clock(minutes: int) -> str:
    h, m = divmod(int(minutes), 60)
    return f"{h:02d}:{m:02d}"


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[day.weekday()]


def coerce_date(value: Any) -> Optional[date]:
    """date, datetime or ISO string -> date. None if not parseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if _DATE_ONLY_RE.match(text):
                return date.fromisoformat(text)
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None
