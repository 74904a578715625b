from typing import Iterable

from ..models import FlatShapeRecord, NormalizedFlight, RawFlight, RawKind
from .base import Anchor, BaseFlightNormalizer
from .fields import duration_label, map_flat_fares
from .grouping import deduplicate


class AllDestinationsNormalizer(BaseFlightNormalizer):
    """Normalize flat rows from an "all destinations from X" search.

    The scraper repeats rows, so duplicates are dropped before any field is parsed.
    Fare tiers: basic is the cheapest of go_wild/discount_den/standard, economy is
    discount_den, premium is standard, business is never offered.
    """
    kind = RawKind.FLAT

    def select(self, records: Iterable[RawFlight]) -> list[RawFlight]:
        selected = super().select(records)
        unique = deduplicate(selected)
        if len(unique) != len(selected):
            self.logger.info("Dropped %d duplicate rows", len(selected) - len(unique))
        return unique

    def normalize_record(self, record: FlatShapeRecord, anchor: Anchor = ("", "")) -> NormalizedFlight:
        return NormalizedFlight(
            total_duration=duration_label(record.duration),
            total_duration_minutes=self._duration_minutes(record.duration),
            is_plus_one_day=self._plus_one_day(record.depart_time, record.arrive_time),
            fares=map_flat_fares(record.fares),
            legs=self._to_legs(record.legs),
            stops=self._stops(record.stops),
            search_origin=anchor[0],
            search_destination=anchor[1],
        )
