import json
import logging
from datetime import datetime
from pathlib import Path

from bs4 import BeautifulSoup
from jinja2 import Environment, FileSystemLoader, select_autoescape

from .airports import AirportDirectory
from .blackouts import BlackoutCalendar
from .models import CalendarEntry, DestinationGroup, NormalizedFlight, NormalizedFlightsResponse

TEMPLATES_DIR = Path(__file__).resolve().parent / 'templates'


def _format_fare(value) -> str:
    return "N/A" if value is None else f"${value:,.2f}"


def _format_flight(flight: NormalizedFlight) -> dict:
    return {
        'route': " → ".join([flight.legs[0].origin, *(leg.destination for leg in flight.legs)]) if flight.legs else "",
        'depart': flight.departure_time,
        'arrive': flight.arrival_time,
        'plus_one_day': flight.is_plus_one_day,
        'duration': flight.total_duration or f"{flight.total_duration_minutes} min",
        'stops': "Nonstop" if flight.stops == 0 else f"{flight.stops} stop{'s' if flight.stops > 1 else ''}",
        'gowild': _format_fare(flight.fares.basic),
        'economy': _format_fare(flight.fares.economy),
        'premium': _format_fare(flight.fares.premium),
        'business': _format_fare(flight.fares.business),
    }


def format_groups(groups: list[DestinationGroup], airports: AirportDirectory | None = None) -> list[dict]:
    formatted = []
    for group in groups:
        basic_fares = [f.fares.basic for f in group.flights if f.fares.basic is not None]
        formatted.append({
            'iata': group.destination_code,
            'destination_name': group.label,
            'display_name': airports.display_name(group.destination_code) if airports is not None else group.label,
            'count': group.count,
            'nonstop_count': group.nonstop_count,
            'gowild_count': group.gowild_count,
            'has_gowild_fare': group.has_gowild_fare,
            'has_nonstop': group.has_nonstop,
            'lowest_gowild': _format_fare(min(basic_fares)) if basic_fares else None,
            'flights': [_format_flight(f) for f in group.flights],
        })
    return formatted


def render_destinations_html(
        groups: list[DestinationGroup],
        calendar_entries: list[CalendarEntry] | None = None,
        origin: str = "",
        travel_date: str | None = None,
        calendar: BlackoutCalendar | None = None,
        airports: AirportDirectory | None = None,
) -> str:
    blackout = calendar.find_period(travel_date) if calendar and travel_date else None
    env = Environment(loader=FileSystemLoader(str(TEMPLATES_DIR)), autoescape=select_autoescape(['html', 'xml']))
    tpl = env.get_template('destinations.html.j2')
    rendered = tpl.render(
        destinations=format_groups(groups, airports),
        calendar=calendar_entries or [],
        origin=origin,
        travel_date=travel_date,
        blackout=blackout,
        generated_at=datetime.now().strftime("%Y-%m-%d %H:%M"),
    )
    soup = BeautifulSoup(rendered, 'lxml')
    return soup.prettify()


def write_json(response: NormalizedFlightsResponse, path: Path) -> Path:
    path.write_text(json.dumps(response.to_dict(), indent=2, ensure_ascii=False), encoding='utf-8')
    logging.info("Normalized flights written to %s", path)
    return path
