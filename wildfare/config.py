"""Configuration utilities.

Central place to load environment driven settings (data files, output paths, logging switches).
Avoids scattering os.getenv calls around the codebase.

Settings are read when an instance is created, not at import time, so callers own the object
they pass around and can ask for a fresh one with ``refresh()``.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env once on module import
load_dotenv()

_PACKAGE_DIR = Path(__file__).resolve().parent


def _env_path(name: str, default: Path) -> Path:
    return Path(os.getenv(name, str(default)))


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]


@dataclass(slots=True)
class LogSettings:
    """Developer logging switches.

    When logging is disabled only errors get through. enabled_components narrows non-error
    output to the listed logger namespaces (e.g. ``wildfare.ingestion``); empty means all.
    """
    logging_enabled: bool = field(default_factory=lambda: _env_bool("LOGGING_ENABLED", True))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    enabled_components: list[str] = field(default_factory=lambda: _env_list("LOG_COMPONENTS"))
    show_raw_payload: bool = field(default_factory=lambda: _env_bool("LOG_SHOW_RAW_PAYLOAD"))


@dataclass(slots=True)
class Settings:
    blackout_table: Path = field(
        default_factory=lambda: _env_path("BLACKOUT_TABLE", _PACKAGE_DIR / "data" / "blackout_periods.json"))
    airports_file: Path = field(
        default_factory=lambda: _env_path("AIRPORTS_FILE", _PACKAGE_DIR / "data" / "airports.json"))
    output_html: Path = field(default_factory=lambda: _env_path("OUTPUT_HTML", Path("destinations.html")))
    output_json: Path = field(default_factory=lambda: _env_path("OUTPUT_JSON", Path("flights.json")))
    default_origin: str = field(default_factory=lambda: os.getenv("DEFAULT_ORIGIN", ""))
    log: LogSettings = field(default_factory=LogSettings)

    def refresh(self) -> "Settings":
        """Re-read .env and the environment, returning a new Settings object."""
        load_dotenv(override=True)
        return Settings()


def get_settings() -> Settings:
    return Settings()
