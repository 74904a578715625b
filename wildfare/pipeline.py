"""High-level orchestration: scraped payload files in, destination report out.

Usage patterns:

1. Normalize an all-destinations scrape and render the HTML report:
   wildfare --input atl_2025-06-01.json --date 2025-06-01

2. Also dump normalized flights and per-destination snapshot counts:
   wildfare --input atl.json --json --snapshot snapshots.json

3. Re-run every day while the scraper keeps overwriting the payload file:
   wildfare --input atl.json --schedule-at 06:00
"""
import argparse
import json
import logging
import time
from dataclasses import asdict
from datetime import date, timedelta
from pathlib import Path
from typing import Sequence

import schedule
from tqdm import tqdm

from wildfare.airports import AirportDirectory
from wildfare.blackouts import BlackoutCalendar
from wildfare.config import Settings, get_settings
from wildfare.logging_config import setup_logging, summarize_payload
from wildfare.models import NormalizedFlightsResponse
from wildfare.processing.grouping import group_by_destination, summarize_groups
from wildfare.processing.response import normalize_response
from wildfare.report import render_destinations_html, write_json


def _load_payloads(inputs: Sequence[Path], settings: Settings) -> list:
    payloads = []
    for path in tqdm(inputs, desc="Reading payloads", disable=len(inputs) < 2):
        if not path.exists():
            raise FileNotFoundError(f"Payload file {path} not found.")
        with open(path, 'rt', encoding='utf-8') as f:
            payload = json.load(f)
        logging.debug("Loaded %s: %s", path, summarize_payload(payload, settings.log.show_raw_payload))
        payloads.append(payload)
    return payloads


def _calendar_days(travel_date: str, days: int) -> list[str]:
    start = date.fromisoformat(travel_date[:10])
    return [(start + timedelta(days=i)).isoformat() for i in range(days)]


def run_pipeline(
        inputs: Sequence[Path],
        settings: Settings,
        origin: str | None = None,
        travel_date: str | None = None,
        calendar_days: int = 14,
        output_json: bool = False,
        snapshot_path: Path | None = None,
) -> Path:
    travel_date = (travel_date or date.today().isoformat())[:10]
    calendar = BlackoutCalendar.from_json(settings.blackout_table)
    airports = AirportDirectory.from_json(settings.airports_file)

    flights = []
    for payload in _load_payloads(inputs, settings):
        flights.extend(normalize_response(payload).flights)
    response = NormalizedFlightsResponse(flights=flights)

    origin = origin or settings.default_origin or (flights[0].search_origin or flights[0].origin if flights else "")
    groups = group_by_destination(flights, airports)
    logging.info(f"{len(flights)} flights to {len(groups)} destinations from {origin or 'unknown origin'}")

    if calendar.is_blackout(travel_date):
        logging.warning(f"{travel_date} is a GoWild blackout date")
    entries = calendar.annotate(_calendar_days(travel_date, calendar_days)) if calendar_days > 0 else []

    html = render_destinations_html(groups, entries, origin=origin, travel_date=travel_date, calendar=calendar,
                                    airports=airports)
    settings.output_html.write_text(html, encoding="utf-8")
    logging.info(f"Output written to {settings.output_html}")

    if output_json:
        write_json(response, settings.output_json)
    if snapshot_path:
        snapshots = summarize_groups(groups, origin, travel_date)
        snapshot_path.write_text(json.dumps([asdict(s) for s in snapshots], indent=2), encoding="utf-8")
        logging.info(f"{len(snapshots)} destination snapshots written to {snapshot_path}")

    return settings.output_html


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="GoWild flight normalization pipeline")
    p.add_argument("--input", nargs="+", type=Path, required=True, help="Scraped payload JSON file(s)")
    p.add_argument("--origin", help="Origin IATA code shown in the report")
    p.add_argument("--date", help="Travel date YYYY-MM-DD (default: today)")
    p.add_argument("--calendar-days", type=int, default=14, help="Days annotated against blackout dates")
    p.add_argument("--json", action="store_true", help="Also write normalized flights JSON")
    p.add_argument("--snapshot", type=Path, help="Write per-destination snapshot counts to this file")
    p.add_argument("--log-level", default=None)
    p.add_argument(
        "--schedule-at",
        metavar="HH:MM",
        default=None,
        help="Run the pipeline every day at the given time (e.g. 06:00). "
             "Without this flag the pipeline runs once and exits.",
    )
    return p


def _run_once(args: argparse.Namespace, settings: Settings) -> bool:
    try:
        run_pipeline(
            inputs=args.input,
            settings=settings,
            origin=args.origin,
            travel_date=args.date,
            calendar_days=args.calendar_days,
            output_json=args.json,
            snapshot_path=args.snapshot,
        )
    except Exception:  # noqa: BLE001
        logging.exception("Pipeline failed")
        return False
    return True


def _scheduled_run(args: argparse.Namespace, settings: Settings) -> Settings:
    """Re-read .env, reinstall logging with the new switches and run once."""
    settings = settings.refresh()
    setup_logging(args.log_level or settings.log.log_level, settings.log)
    _run_once(args, settings)
    return settings


def main_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(args.log_level or settings.log.log_level, settings.log)

    if not args.schedule_at:
        return 0 if _run_once(args, settings) else 1

    def _run() -> None:
        nonlocal settings
        settings = _scheduled_run(args, settings)

    logging.info(f"Scheduler started – pipeline will run every day at {args.schedule_at}")
    _run()
    schedule.every().day.at(args.schedule_at).do(_run)
    while True:
        try:
            schedule.run_pending()
        except Exception:  # noqa: BLE001
            logging.exception("Scheduler error:")
            time.sleep(60 * 60)
        time.sleep(1)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main_cli())
