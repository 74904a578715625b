"""Raw ingestion of scraped flight payloads.

The scraping service wraps its extraction in an envelope whose nesting varies
(``data.json.flights`` for on-demand scrapes, ``json.flights`` for some batch
responses, or a bare ``flights`` list once unwrapped). Each flight row comes in
one of two shapes, told apart by the presence of a ``legs`` field:

* leg shape  - single-route search, multi-leg, fares basic/economy/premium/business
* flat shape - all-destinations search, one row per flight, fares standard/discount_den/go_wild

Nothing here cleans fares or drops duplicates; that belongs to the normalizers.
"""
import logging
from typing import Any, Iterable

from .models import FlatShapeRecord, LegShapeRecord, RawFlight, RawKind, RawLeg

logger = logging.getLogger(__name__)

ENVELOPE_PATHS: tuple[tuple[str, ...], ...] = (
    ('data', 'json'),
    ('json',),
    (),
)


def _dig(obj: Any, path: Iterable[str]) -> Any:
    for key in path:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _body(envelope: Any) -> dict:
    for path in ENVELOPE_PATHS:
        body = _dig(envelope, path)
        if isinstance(body, dict) and isinstance(body.get('flights'), list):
            return body
    return {}


def extract_flights(envelope: Any) -> list[dict]:
    """Return the raw flight rows of an envelope, or [] when the expected path is missing."""
    flights = _body(envelope).get('flights', [])
    rows = [f for f in flights if isinstance(f, dict)]
    if len(rows) != len(flights):
        logger.debug("Skipped %d non-object flight rows", len(flights) - len(rows))
    return rows


def extract_anchor(envelope: Any) -> tuple[str, str]:
    """Searched route (origin, destination) reported next to the flights, if any."""
    for path in ENVELOPE_PATHS[:-1]:
        anchor = _dig(envelope, (*path, 'anchor'))
        if isinstance(anchor, dict):
            return _text(anchor.get('origin')).strip(), _text(anchor.get('destination')).strip()
    return "", ""


def detect_kind(raw: dict) -> RawKind:
    return RawKind.LEG if 'legs' in raw else RawKind.FLAT


def _fares(raw: dict) -> dict:
    fares = raw.get('fares')
    return fares if isinstance(fares, dict) else {}


def adapt_leg_record(raw: dict) -> LegShapeRecord:
    raw_legs = raw.get('legs')
    legs = [
        RawLeg(
            origin=_text(leg.get('origin')),
            destination=_text(leg.get('destination')),
            departure_time=_text(leg.get('departure_time')),
            arrival_time=_text(leg.get('arrival_time')),
        )
        for leg in (raw_legs if isinstance(raw_legs, list) else [])
        if isinstance(leg, dict)
    ]
    return LegShapeRecord(
        total_duration=_text(raw.get('total_duration')),
        is_plus_one_day=raw.get('is_plus_one_day') is True,
        fares=_fares(raw),
        legs=legs,
        flight_numbers=_text(raw.get('flight_numbers')),
    )


def adapt_flat_record(raw: dict) -> FlatShapeRecord:
    stops = raw.get('stops')
    if stops is not None and not isinstance(stops, (str, int, float)):
        stops = str(stops)
    return FlatShapeRecord(
        origin=_text(raw.get('origin')),
        destination=_text(raw.get('destination')),
        depart_time=_text(raw.get('depart_time')),
        arrive_time=_text(raw.get('arrive_time')),
        duration=_text(raw.get('duration')),
        stops=stops,
        fares=_fares(raw),
    )


def adapt_record(raw: dict) -> RawFlight:
    if detect_kind(raw) is RawKind.LEG:
        return adapt_leg_record(raw)
    return adapt_flat_record(raw)


def ingest(envelope: Any) -> list[RawFlight]:
    records = [adapt_record(row) for row in extract_flights(envelope)]
    logger.debug("Ingested %d raw flight records", len(records))
    return records
