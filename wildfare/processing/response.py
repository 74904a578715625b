import logging
from collections import Counter
from typing import Any

from ..ingestion import extract_anchor, ingest
from ..models import NormalizedFlightsResponse, RawKind
from .all_destinations import AllDestinationsNormalizer
from .base import BaseFlightNormalizer
from .single_route import SingleRouteNormalizer

logger = logging.getLogger(__name__)


def normalize_response(envelope: Any) -> NormalizedFlightsResponse:
    """Normalize every flight of a scrape envelope, whatever shape its rows come in.

    Each row goes to the normalizer registered for its kind. Rows keep their encounter
    order; rows a normalizer does not select (repeated flat rows) are dropped.
    """
    records = ingest(envelope)
    anchor = extract_anchor(envelope)
    normalizers: dict[RawKind, BaseFlightNormalizer] = {
        n.kind: n for n in (SingleRouteNormalizer(), AllDestinationsNormalizer())
    }
    selected = {id(r) for n in normalizers.values() for r in n.select(records)}

    flights = []
    for record in records:
        if id(record) in selected:
            flights.append(normalizers[record.kind].normalize_record(record, anchor))

    defaulted = sum((n.warnings for n in normalizers.values()), Counter())
    logger.info("Normalized %d of %d raw flights", len(flights), len(records))
    if defaulted:
        logger.warning("Defaulted fields: %s", dict(defaulted))
    return NormalizedFlightsResponse(flights=flights)
