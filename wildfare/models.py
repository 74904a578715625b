from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Literal, TypeAlias

Fare: TypeAlias = int | float | None


class RawKind(str, Enum):
    LEG = "leg"
    FLAT = "flat"


@dataclass(slots=True)
class RawLeg:
    origin: str = ""
    destination: str = ""
    departure_time: str = ""
    arrival_time: str = ""


@dataclass(slots=True)
class LegShapeRecord:
    """Single-route scrape: already split into legs, fares keyed basic/economy/premium/business."""
    total_duration: str
    is_plus_one_day: bool
    fares: dict
    legs: list[RawLeg]
    flight_numbers: str = ""
    kind: Literal[RawKind.LEG] = RawKind.LEG


@dataclass(slots=True)
class FlatShapeRecord:
    """All-destinations scrape: one row per flight, fares keyed standard/discount_den/go_wild."""
    origin: str
    destination: str
    depart_time: str
    arrive_time: str
    duration: str
    stops: str | int | float | None
    fares: dict
    kind: Literal[RawKind.FLAT] = RawKind.FLAT

    @property
    def legs(self) -> list[RawLeg]:
        return [RawLeg(self.origin, self.destination, self.depart_time, self.arrive_time)]

    @property
    def dedup_key(self) -> tuple:
        return self.origin, self.destination, self.depart_time, self.arrive_time, self.duration, self.stops


RawFlight: TypeAlias = LegShapeRecord | FlatShapeRecord


@dataclass(slots=True)
class Fares:
    basic: Fare = None
    economy: Fare = None
    premium: Fare = None
    business: Fare = None

    def lowest(self) -> Fare:
        values = [v for v in (self.basic, self.economy, self.premium, self.business) if v is not None]
        return min(values) if values else None


@dataclass(slots=True)
class Leg:
    origin: str
    destination: str
    departure_time: str
    arrival_time: str


@dataclass(slots=True)
class NormalizedFlight:
    """Canonical flight consumed by the presentation layer.

    total_duration keeps a display label ("2 hrs 5 min"); total_duration_minutes is the parsed value.
    search_origin / search_destination hold the searched route when the payload carried one.
    """
    total_duration: str
    total_duration_minutes: int
    is_plus_one_day: bool
    fares: Fares
    legs: list[Leg]
    stops: int = 0
    search_origin: str = ""
    search_destination: str = ""

    @property
    def origin(self) -> str:
        return self.legs[0].origin if self.legs else self.search_origin

    @property
    def destination(self) -> str:
        return self.legs[-1].destination if self.legs else self.search_destination

    @property
    def departure_time(self) -> str:
        return self.legs[0].departure_time if self.legs else ""

    @property
    def arrival_time(self) -> str:
        return self.legs[-1].arrival_time if self.legs else ""

    @property
    def is_nonstop(self) -> bool:
        return len(self.legs) == 1

    @property
    def has_gowild_fare(self) -> bool:
        return self.fares.basic is not None

    def identity(self, kind: str) -> str:
        """Composite key used when a selected flight gets persisted."""
        return f"{kind}{self.origin}{self.destination}{self.departure_time}{self.arrival_time}"


@dataclass(slots=True)
class NormalizedFlightsResponse:
    flights: list[NormalizedFlight] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {'flights': [asdict(f) for f in self.flights]}


@dataclass(slots=True)
class DestinationGroup:
    destination_code: str
    label: str
    flights: list[NormalizedFlight] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.flights)

    @property
    def nonstop_count(self) -> int:
        return sum(1 for f in self.flights if f.is_nonstop)

    @property
    def gowild_count(self) -> int:
        return sum(1 for f in self.flights if f.has_gowild_fare)

    @property
    def has_gowild_fare(self) -> bool:
        return any(f.has_gowild_fare for f in self.flights)

    @property
    def has_nonstop(self) -> bool:
        return any(f.is_nonstop for f in self.flights)


@dataclass(frozen=True, slots=True)
class DestinationSnapshot:
    origin_code: str
    destination_code: str
    travel_date: str
    total_flights: int
    gowild_flights: int
    nonstop_total: int
    nonstop_gowild: int
    min_fare: Fare
    min_gowild_fare: Fare


@dataclass(frozen=True, slots=True)
class BlackoutPeriod:
    """Inclusive date interval; both ends are zero-padded YYYY-MM-DD strings."""
    start_date: str
    end_date: str
    description: str


@dataclass(frozen=True, slots=True)
class CalendarEntry:
    date: str
    is_blackout: bool
    description: str | None = None


@dataclass(frozen=True, slots=True)
class AirportInfo:
    iata_code: str
    name: str = ""
    city: str | None = None
    state: str | None = None
    region: str | None = None
    country: str | None = None
