"""Shared payload fixtures shaped like real scraper responses."""

import pytest

from payloads import flat_row, leg_row


@pytest.fixture
def all_destinations_envelope() -> dict:
    return {
        "success": True,
        "data": {
            "json": {
                "flights": [
                    flat_row("DEN"),
                    flat_row("ORD", stops="1 stop", duration="1.03:06:00", go_wild=None,
                             arrive="2025-06-02T11:06:00"),
                    flat_row("DEN"),
                    flat_row("MCO", stops="TBD", standard=-1, discount_den=None, go_wild=0),
                    flat_row("DEN", depart="2025-06-01T18:00:00", arrive="2025-06-01T20:05:00"),
                ]
            }
        },
    }


@pytest.fixture
def single_route_envelope() -> dict:
    return {
        "data": {
            "json": {
                "anchor": {"origin": "ATL", "destination": "LAS"},
                "flights": [
                    leg_row([
                        {"origin": "ATL", "destination": "DEN", "departure_time": "6:30 AM",
                         "arrival_time": "8:05 AM"},
                        {"origin": "DEN", "destination": "LAS", "departure_time": "9:15 AM",
                         "arrival_time": "10:40 AM"},
                    ]),
                    leg_row(
                        [{"origin": "ATL", "destination": "LAS", "departure_time": "11:50 PM",
                          "arrival_time": "1:10 AM"}],
                        total_duration="04:20:00",
                        is_plus_one_day=True,
                        fares={"basic": None, "economy": 0, "premium": -1},
                    ),
                ],
            }
        }
    }
