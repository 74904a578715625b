import logging
from abc import ABC, abstractmethod
from collections import Counter
from typing import Any, Iterable

from ..models import Leg, NormalizedFlight, RawFlight, RawKind, RawLeg
from .fields import is_plus_one_day, parse_datetime, parse_duration, parse_stops

Anchor = tuple[str, str]


class BaseFlightNormalizer(ABC):
    """Common helpers for concrete flight normalizers.

    Fields that had to fall back to a default are counted in ``warnings`` (keyed by field name)
    and reported once per batch instead of failing the record.
    """
    kind: RawKind

    def __init__(self):
        self.warnings: Counter[str] = Counter()
        self.logger = logging.getLogger(f"{__name__}.{type(self).__name__}")

    # ---------------- Parsing helpers -----------------
    def _warn(self, field_name: str, value: Any) -> None:
        self.warnings[field_name] += 1
        self.logger.debug("Defaulted %s from %r", field_name, value)

    def _duration_minutes(self, value: Any) -> int:
        minutes, recognised = parse_duration(value)
        if not recognised:
            self._warn('duration', value)
        return minutes

    def _stops(self, value: Any) -> int:
        stops, recognised = parse_stops(value)
        if not recognised:
            self._warn('stops', value)
        return stops

    def _plus_one_day(self, depart: str, arrive: str) -> bool:
        if parse_datetime(depart) is None or parse_datetime(arrive) is None:
            self._warn('timestamps', (depart, arrive))
            return False
        return is_plus_one_day(depart, arrive)

    @staticmethod
    def _to_legs(raw_legs: Iterable[RawLeg]) -> list[Leg]:
        return [Leg(r.origin, r.destination, r.departure_time, r.arrival_time) for r in raw_legs]

    # ---------------- public API -----------------
    @abstractmethod
    def normalize_record(self, record: RawFlight, anchor: Anchor = ("", "")) -> NormalizedFlight:  # pragma: no cover
        raise NotImplementedError

    def select(self, records: Iterable[RawFlight]) -> list[RawFlight]:
        return [r for r in records if r.kind is self.kind]
