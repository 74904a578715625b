from ..models import LegShapeRecord, NormalizedFlight, RawKind
from .base import Anchor, BaseFlightNormalizer
from .fields import duration_label, is_plus_one_day, map_leg_fares


class SingleRouteNormalizer(BaseFlightNormalizer):
    """Normalize leg-shaped rows from a single origin/destination search.

    Fares map one to one by tier name. The scraper's "+1 day" flag is kept; when both leg
    timestamps are full dates it is also derived from them.
    """
    kind = RawKind.LEG

    def normalize_record(self, record: LegShapeRecord, anchor: Anchor = ("", "")) -> NormalizedFlight:
        legs = self._to_legs(record.legs)
        if not legs:
            self._warn('legs', record.legs)
        plus_one = record.is_plus_one_day
        if legs and not plus_one:
            plus_one = is_plus_one_day(legs[0].departure_time, legs[-1].arrival_time)
        return NormalizedFlight(
            total_duration=duration_label(record.total_duration),
            total_duration_minutes=self._duration_minutes(record.total_duration),
            is_plus_one_day=plus_one,
            fares=map_leg_fares(record.fares),
            legs=legs,
            stops=max(len(legs) - 1, 0),
            search_origin=anchor[0],
            search_destination=anchor[1],
        )
