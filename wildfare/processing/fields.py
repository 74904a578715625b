"""Per-field parsers for scraped flight data.

Every function here is total: garbled input maps to a neutral default (0, None, False or the
input string itself) instead of raising. The ``parse_*`` variants also report whether the value
was recognised so callers can count what got defaulted.
"""
import math
import re
from datetime import datetime
from typing import Any

from ..models import Fare, Fares

MINUTES_PER_DAY = 24 * 60

# Digit runs longer than nine characters never match, so oversized values take the defaults.
_LEADING_INT = re.compile(r'\s*\+?(\d{1,9})(?!\d)')
_DAYS = re.compile(r'(?<!\d)(\d{1,9})\s*day', re.IGNORECASE)
_HOURS = re.compile(r'(?<!\d)(\d{1,9})\s*(hr|hrs|hour|hours|h)\b', re.IGNORECASE)
_MINUTES = re.compile(r'(?<!\d)(\d{1,9})\s*(min|mins|minute|minutes|m)\b', re.IGNORECASE)
_CLOCK = re.compile(r'^(\d{1,9}):(\d{2})(?::(\d{2}))?$')
_NONSTOP = re.compile(r'non-?stop', re.IGNORECASE)
_FIRST_INT = re.compile(r'(?<!\d)\d{1,9}(?!\d)')

_DISPLAY_FORMATS = (
    "%Y-%m-%d %I:%M %p",
    "%Y-%m-%d %H:%M",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
)

UNAVAILABLE_FARE = -1


def _leading_int(text: str) -> int:
    m = _LEADING_INT.match(text)
    return int(m.group(1)) if m else 0


def _is_finite(number: int | float) -> bool:
    try:
        return math.isfinite(number)
    except OverflowError:
        return False


# ---------------- Durations -----------------
def _parse_clock_duration(raw: str) -> tuple[int, bool]:
    parts = [p.strip() for p in raw.split(':')]
    hours_part = parts[0]
    days = 0
    if '.' in hours_part:
        days_part, hours_part = hours_part.split('.', 1)
        days = _leading_int(days_part)
    hours = _leading_int(hours_part)
    minutes = _leading_int(parts[1]) if len(parts) > 1 else 0
    recognised = bool(_LEADING_INT.match(hours_part) or (len(parts) > 1 and _LEADING_INT.match(parts[1])))
    return days * MINUTES_PER_DAY + hours * 60 + minutes, recognised


def _parse_text_duration(raw: str) -> tuple[int, bool]:
    total = 0
    recognised = False
    if m := _DAYS.search(raw):
        total += int(m.group(1)) * MINUTES_PER_DAY
        recognised = True
    if m := _HOURS.search(raw):
        total += int(m.group(1)) * 60
        recognised = True
    if m := _MINUTES.search(raw):
        total += int(m.group(1))
        recognised = True
    return total, recognised


def parse_duration(value: Any) -> tuple[int, bool]:
    """Total minutes and whether the value was in a recognised format.

    Colon formats ("HH:MM", "HH:MM:SS", "D.HH:MM:SS") are tried first, then free text such as
    "1 day(s) 2 hrs 5 min" or "2h 21m". Seconds are ignored.
    """
    raw = "" if value is None else str(value).strip()
    if not raw:
        return 0, False
    if ':' in raw:
        return _parse_clock_duration(raw)
    return _parse_text_duration(raw)


def parse_duration_minutes(value: Any) -> int:
    return parse_duration(value)[0]


def duration_label(value: Any) -> str:
    """'02:44:00' -> '2 hrs 44 min'. Anything that is not a clock string is returned unchanged."""
    text = "" if value is None else str(value)
    m = _CLOCK.match(text)
    if not m:
        return text
    hours = int(m.group(1))
    minutes = int(m.group(2))
    parts = []
    if hours > 0:
        parts.append(f"{hours} hrs")
    if minutes > 0:
        parts.append(f"{minutes} min")
    return " ".join(parts) or "0 min"


# ---------------- Dates -----------------
def parse_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    text = "" if value is None else str(value).strip()
    if not text:
        return None
    if text[-1] in 'Zz':
        text = f"{text[:-1]}+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _DISPLAY_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def is_plus_one_day(depart: Any, arrive: Any) -> bool:
    """True when the arrival calendar date is after the departure one.

    Each timestamp keeps the offset it was written in, so the comparison is between the dates a
    traveller reads on the itinerary.
    """
    depart_dt = parse_datetime(depart)
    arrive_dt = parse_datetime(arrive)
    if depart_dt is None or arrive_dt is None:
        return False
    return arrive_dt.date() > depart_dt.date()


# ---------------- Fares -----------------
def clean_fare(value: Any) -> Fare:
    """None and the -1 'unavailable' sentinel become None; 0 is a real fare and stays 0."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        text = value.strip().replace('$', '').replace(',', '')
        try:
            number = float(text)
        except ValueError:
            return None
        if number.is_integer():
            number = int(number)
    else:
        return None
    if not _is_finite(number) or number == UNAVAILABLE_FARE:
        return None
    return number


def lowest_non_null(*values: Fare) -> Fare:
    """Smallest non-null value; on ties the first listed one is kept."""
    lowest = None
    for value in values:
        if value is None or not _is_finite(value):
            continue
        if lowest is None or value < lowest:
            lowest = value
    return lowest


def map_flat_fares(fares: dict) -> Fares:
    standard = clean_fare(fares.get('standard'))
    discount_den = clean_fare(fares.get('discount_den'))
    go_wild = clean_fare(fares.get('go_wild'))
    return Fares(
        basic=lowest_non_null(go_wild, discount_den, standard),
        economy=discount_den,
        premium=standard,
        business=None,
    )


def map_leg_fares(fares: dict) -> Fares:
    return Fares(
        basic=clean_fare(fares.get('basic')),
        economy=clean_fare(fares.get('economy')),
        premium=clean_fare(fares.get('premium')),
        business=clean_fare(fares.get('business')),
    )


# ---------------- Stops -----------------
def parse_stops(value: Any) -> tuple[int, bool]:
    """Stop count and whether it was stated. Unknown counts default to 1, never to nonstop."""
    if isinstance(value, bool) or value is None:
        return 1, False
    if isinstance(value, (int, float)):
        if not _is_finite(value) or value < 0:
            return 1, False
        return int(value), True
    text = str(value).strip()
    if _NONSTOP.search(text) or text == '0':
        return 0, True
    if m := _FIRST_INT.search(text):
        return int(m.group()), True
    return 1, False


def normalize_stops(value: Any) -> int:
    return parse_stops(value)[0]
