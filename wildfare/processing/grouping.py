import logging
from collections import defaultdict
from typing import Iterable, Mapping, Protocol

from ..models import DestinationGroup, DestinationSnapshot, FlatShapeRecord, NormalizedFlight
from .fields import lowest_non_null

logger = logging.getLogger(__name__)


class AirportLabels(Protocol):
    def label(self, code: str) -> str: ...


def deduplicate(records: Iterable[FlatShapeRecord]) -> list[FlatShapeRecord]:
    """Drop repeated flat rows; the first occurrence wins and encounter order is kept."""
    seen: set[tuple] = set()
    unique: list[FlatShapeRecord] = []
    for record in records:
        key = record.dedup_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique


def group_flights_by_key(flights: Iterable[NormalizedFlight], key: str) -> dict[str, list[NormalizedFlight]]:
    grouped = defaultdict(list)
    for flight in flights:
        grouped[getattr(flight, key)].append(flight)
    return dict(grouped)


def _label_for(code: str, airports: AirportLabels | Mapping[str, str] | None) -> str:
    if airports is None:
        return code
    if isinstance(airports, Mapping):
        return airports.get(code) or code
    return airports.label(code) or code


def group_by_destination(
        flights: Iterable[NormalizedFlight],
        airports: AirportLabels | Mapping[str, str] | None = None,
) -> list[DestinationGroup]:
    """Group by the final arrival airport and sort groups by city label (stable, case-sensitive)."""
    grouped = group_flights_by_key(flights, 'destination')
    groups = [
        DestinationGroup(destination_code=code, label=_label_for(code, airports), flights=members)
        for code, members in grouped.items()
    ]
    groups.sort(key=lambda g: g.label)
    logger.debug("Grouped %d flights into %d destinations", sum(g.count for g in groups), len(groups))
    return groups


def summarize_groups(groups: Iterable[DestinationGroup], origin: str, travel_date: str) -> list[DestinationSnapshot]:
    """Per-destination availability counts, as stored by the daily snapshot job."""
    snapshots = []
    for group in groups:
        flights = group.flights
        snapshots.append(DestinationSnapshot(
            origin_code=origin,
            destination_code=group.destination_code,
            travel_date=travel_date,
            total_flights=group.count,
            gowild_flights=group.gowild_count,
            nonstop_total=sum(1 for f in flights if f.stops == 0),
            nonstop_gowild=sum(1 for f in flights if f.stops == 0 and f.has_gowild_fare),
            min_fare=lowest_non_null(*(f.fares.lowest() for f in flights)),
            min_gowild_fare=lowest_non_null(*(f.fares.basic for f in flights)),
        ))
    return snapshots
