"""GoWild blackout calendar.

The table is static: it is read from JSON once, when this module is imported, and never changes
afterwards. Lookups compare zero-padded ``YYYY-MM-DD`` strings lexically, which matches
chronological order for that format only, so the loader rejects anything else.
"""
import json
import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable

import dacite

from .models import BlackoutPeriod, CalendarEntry

DEFAULT_TABLE = Path(__file__).resolve().parent / 'data' / 'blackout_periods.json'

_ISO_DAY = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def _validate_day(value: str) -> str:
    if not _ISO_DAY.match(value):
        raise ValueError(f"Blackout date '{value}' is not zero-padded YYYY-MM-DD")
    datetime.strptime(value, "%Y-%m-%d")
    return value


def _parse_period(item: dict) -> BlackoutPeriod:
    period = dacite.from_dict(data_class=BlackoutPeriod, data=item)
    _validate_day(period.start_date)
    _validate_day(period.end_date)
    if period.start_date > period.end_date:
        raise ValueError(f"Blackout period {period.start_date}..{period.end_date} ends before it starts")
    return period


def load_blackout_periods(path: Path = DEFAULT_TABLE) -> tuple[BlackoutPeriod, ...]:
    with open(path, 'rt', encoding='utf-8') as f:
        loaded_data = json.load(f)
    periods = tuple(_parse_period(item) for item in loaded_data['periods'])
    logging.debug("Loaded %d blackout periods from %s", len(periods), path)
    return periods


def _day_key(day: Any) -> str:
    if isinstance(day, (date, datetime)):
        return day.isoformat()[:10]
    if not day or not isinstance(day, str):
        return ""
    return day[:10]


class BlackoutCalendar:
    def __init__(self, periods: Iterable[BlackoutPeriod]):
        self.periods: tuple[BlackoutPeriod, ...] = tuple(periods)

    @classmethod
    def from_json(cls, path: Path = DEFAULT_TABLE) -> "BlackoutCalendar":
        return cls(load_blackout_periods(path))

    def find_period(self, day: str | date | None) -> BlackoutPeriod | None:
        """First period containing the day (ends inclusive). Full ISO timestamps are cut to the date."""
        key = _day_key(day)
        if not key:
            return None
        return next((p for p in self.periods if p.start_date <= key <= p.end_date), None)

    def is_blackout(self, day: str | date | None) -> bool:
        return self.find_period(day) is not None

    def annotate(self, days: Iterable[str | date]) -> list[CalendarEntry]:
        entries = []
        for day in days:
            period = self.find_period(day)
            entries.append(CalendarEntry(
                date=_day_key(day),
                is_blackout=period is not None,
                description=period.description if period else None,
            ))
        return entries


DEFAULT_CALENDAR = BlackoutCalendar.from_json()


def is_blackout_date(day: str | date | None) -> bool:
    return DEFAULT_CALENDAR.is_blackout(day)
