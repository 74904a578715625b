"""
Tests for the airport directory, HTML/JSON report output and the CLI pipeline.
"""

import json
import logging

import pytest

from wildfare.airports import AirportDirectory
from wildfare.config import LogSettings, Settings
from wildfare.logging_config import ComponentFilter, setup_logging, summarize_payload
from wildfare.pipeline import _scheduled_run, build_arg_parser, main_cli, run_pipeline
from wildfare.processing.grouping import group_by_destination
from wildfare.processing.response import normalize_response
from wildfare.report import format_groups, render_destinations_html


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        output_html=tmp_path / "destinations.html",
        output_json=tmp_path / "flights.json",
        default_origin="",
        log=LogSettings(logging_enabled=True, log_level="INFO", enabled_components=[], show_raw_payload=False),
    )


@pytest.fixture
def payload_file(tmp_path, all_destinations_envelope):
    path = tmp_path / "atl.json"
    path.write_text(json.dumps(all_destinations_envelope), encoding="utf-8")
    return path


@pytest.fixture
def airports() -> AirportDirectory:
    return AirportDirectory.from_json(Settings().airports_file)


# =============================================================================
# AIRPORTS
# =============================================================================


class TestAirportDirectory:

    def test_bundled_file_loads(self, airports):
        assert len(airports) > 0
        assert airports.get("den").city == "Denver"

    def test_labels(self, airports):
        assert airports.label("ORD") == "Chicago"
        assert airports.display_name("ORD") == "Chicago, IL"
        assert airports.display_name("CUN") == "Cancún"

    def test_unknown_code_falls_back(self, airports):
        assert airports.label("XXX") == "XXX"
        assert airports.display_name("XXX") == "XXX"
        assert airports.get("") is None

    def test_missing_file_gives_empty_directory(self, tmp_path):
        directory = AirportDirectory.from_json(tmp_path / "missing.json")
        assert len(directory) == 0
        assert directory.label("DEN") == "DEN"


# =============================================================================
# REPORT
# =============================================================================


class TestReport:

    def test_format_groups(self, all_destinations_envelope, airports):
        groups = group_by_destination(normalize_response(all_destinations_envelope).flights, airports)
        formatted = format_groups(groups)
        assert [g["destination_name"] for g in formatted] == ["Chicago", "Denver", "Orlando"]
        denver = formatted[1]
        assert denver["count"] == 2
        assert denver["lowest_gowild"] == "$80.00"
        assert denver["flights"][0]["stops"] == "Nonstop"
        orlando = formatted[2]
        assert orlando["flights"][0]["premium"] == "N/A"
        assert orlando["flights"][0]["gowild"] == "$0.00"

    def test_render_html(self, all_destinations_envelope, airports):
        from wildfare.blackouts import DEFAULT_CALENDAR
        groups = group_by_destination(normalize_response(all_destinations_envelope).flights, airports)
        entries = DEFAULT_CALENDAR.annotate(["2025-07-03", "2025-07-08"])
        html = render_destinations_html(groups, entries, origin="ATL", travel_date="2025-07-04",
                                        calendar=DEFAULT_CALENDAR)
        assert "Destinations from ATL" in html
        assert "Independence Day Weekend" in html
        assert "Denver (DEN)" in html
        assert "(+1 day)" in html

    def test_render_html_uses_display_names(self, all_destinations_envelope, airports):
        groups = group_by_destination(normalize_response(all_destinations_envelope).flights, airports)
        assert format_groups(groups, airports)[0]["display_name"] == "Chicago, IL"
        html = render_destinations_html(groups, airports=airports)
        assert "Denver, CO (DEN)" in html
        assert "Orlando, FL (MCO)" in html

    def test_render_empty(self):
        assert "No flights found." in render_destinations_html([])


# =============================================================================
# PIPELINE
# =============================================================================


class TestRunPipeline:

    def test_writes_html_and_json(self, payload_file, settings, tmp_path):
        snapshot = tmp_path / "snapshots.json"
        out = run_pipeline([payload_file], settings, travel_date="2025-06-01", output_json=True,
                           snapshot_path=snapshot)
        assert out == settings.output_html
        assert "Denver" in out.read_text(encoding="utf-8")

        flights = json.loads(settings.output_json.read_text(encoding="utf-8"))["flights"]
        assert len(flights) == 4

        snapshots = json.loads(snapshot.read_text(encoding="utf-8"))
        assert {s["destination_code"] for s in snapshots} == {"DEN", "ORD", "MCO"}
        assert all(s["origin_code"] == "ATL" for s in snapshots)
        assert all(s["travel_date"] == "2025-06-01" for s in snapshots)

    def test_travel_date_timestamp_is_cut_to_the_day(self, payload_file, settings, tmp_path):
        snapshot = tmp_path / "snapshots.json"
        run_pipeline([payload_file], settings, travel_date="2025-07-04T08:00", calendar_days=2,
                     snapshot_path=snapshot)
        html = settings.output_html.read_text(encoding="utf-8")
        assert "2025-07-05" in html
        assert "Independence Day Weekend" in html
        assert {s["travel_date"] for s in json.loads(snapshot.read_text(encoding="utf-8"))} == {"2025-07-04"}

    def test_empty_payload(self, tmp_path, settings):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"success": False}), encoding="utf-8")
        run_pipeline([path], settings, travel_date="2025-06-01", calendar_days=0)
        assert "No flights found." in settings.output_html.read_text(encoding="utf-8")

    def test_missing_input(self, tmp_path, settings):
        with pytest.raises(FileNotFoundError):
            run_pipeline([tmp_path / "nope.json"], settings)

    @pytest.fixture(autouse=True)
    def _keep_test_logging(self, monkeypatch):
        monkeypatch.setattr("wildfare.pipeline.setup_logging", lambda *args, **kwargs: None)

    def test_cli(self, payload_file, tmp_path, monkeypatch):
        monkeypatch.setenv("OUTPUT_HTML", str(tmp_path / "cli.html"))
        assert main_cli(["--input", str(payload_file), "--date", "2025-06-01", "--origin", "ATL"]) == 0
        assert (tmp_path / "cli.html").exists()

    def test_cli_failure_returns_one(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OUTPUT_HTML", str(tmp_path / "cli.html"))
        assert main_cli(["--input", str(tmp_path / "missing.json")]) == 1


# =============================================================================
# CONFIG & LOGGING
# =============================================================================


class TestConfigAndLogging:

    def test_settings_read_environment_per_instance(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_ORIGIN", "DEN")
        monkeypatch.setenv("LOG_COMPONENTS", "wildfare.ingestion, wildfare.blackouts")
        settings = Settings()
        assert settings.default_origin == "DEN"
        assert settings.log.enabled_components == ["wildfare.ingestion", "wildfare.blackouts"]
        monkeypatch.setenv("DEFAULT_ORIGIN", "ORD")
        assert settings.refresh().default_origin == "ORD"
        assert settings.default_origin == "DEN"

    @staticmethod
    def _record(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    def test_component_filter(self):
        log_filter = ComponentFilter(LogSettings(True, "INFO", ["wildfare.ingestion"], False))
        assert log_filter.filter(self._record("wildfare.ingestion", logging.INFO))
        assert not log_filter.filter(self._record("wildfare.blackouts", logging.INFO))
        assert not log_filter.filter(self._record("wildfare.ingestion_extra", logging.INFO))
        assert log_filter.filter(self._record("wildfare.blackouts", logging.ERROR))

    def test_disabled_logging_keeps_errors(self):
        log_filter = ComponentFilter(LogSettings(False, "INFO", [], False))
        assert not log_filter.filter(self._record("wildfare", logging.WARNING))
        assert log_filter.filter(self._record("wildfare", logging.ERROR))

    def test_summarize_payload(self):
        assert summarize_payload([1, 2, 3]) == "[Array(3)]"
        assert summarize_payload([1, 2, 3], show_raw=True) == [1, 2, 3]
        wide = {str(i): i for i in range(10)}
        assert summarize_payload(wide).startswith("{Object: 10 keys: 0, 1, 2, 3, 4")
        assert summarize_payload({"a": 1}) == {"a": 1}

    def test_setup_logging_installs_filtered_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging("debug", LogSettings(True, "DEBUG", [], False))
            assert root.level == logging.DEBUG
            assert any(isinstance(f, ComponentFilter) for h in root.handlers for f in h.filters)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_scheduled_run_applies_refreshed_log_switches(self, payload_file, tmp_path, monkeypatch):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging("INFO", LogSettings(True, "INFO", [], False))
            monkeypatch.setenv("LOGGING_ENABLED", "false")
            monkeypatch.setenv("LOG_COMPONENTS", "wildfare.ingestion")
            monkeypatch.setenv("OUTPUT_HTML", str(tmp_path / "scheduled.html"))
            args = build_arg_parser().parse_args(["--input", str(payload_file), "--date", "2025-06-01"])

            refreshed = _scheduled_run(args, Settings())

            assert refreshed.log.logging_enabled is False
            filters = [f for h in root.handlers for f in h.filters if isinstance(f, ComponentFilter)]
            assert len(filters) == 1
            assert filters[0].log_settings.logging_enabled is False
            assert filters[0].log_settings.enabled_components == ["wildfare.ingestion"]
            assert (tmp_path / "scheduled.html").exists()
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
