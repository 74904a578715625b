import json
import logging
from pathlib import Path

import dacite

from .models import AirportInfo


class AirportDirectory:
    """IATA code -> airport/location lookup used for group labels.

    Codes without an entry (or without a city) label as the code itself.
    """

    def __init__(self, airports: dict[str, AirportInfo] | None = None):
        self.airports = airports or {}

    @classmethod
    def from_json(cls, path: Path) -> "AirportDirectory":
        if not path.exists():
            logging.warning("Airport file %s not found, labels fall back to IATA codes", path)
            return cls()
        with open(path, 'rt', encoding='utf-8') as f:
            loaded_data = json.load(f)
        airports = {}
        for row in loaded_data:
            info = dacite.from_dict(data_class=AirportInfo, data=row)
            airports[info.iata_code.upper()] = info
        return cls(airports)

    def get(self, code: str) -> AirportInfo | None:
        return self.airports.get(code.strip().upper()) if code else None

    def label(self, code: str) -> str:
        info = self.get(code)
        return info.city if info and info.city else code

    def display_name(self, code: str) -> str:
        info = self.get(code)
        if not info or not info.city:
            return code
        return f"{info.city}, {info.state}" if info.state else info.city

    def __len__(self) -> int:
        return len(self.airports)
