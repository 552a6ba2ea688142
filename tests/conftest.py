"""Shared test fixtures for geoscope tests."""

from __future__ import annotations

import os
import textwrap

import pytest

from geoscope.config import GeoConfig
from geoscope.engines.base import Engine
from geoscope.errors import EngineError
from geoscope.models import CityRecord, Edition, RegionRecord

COUNTRY_NAMES = ("", "United States", "Germany", "Antarctica")
COUNTRY_CODES = ("", "US", "DE", "AQ")
CONTINENTS = ("", "NA", "EU", "")


class FakeHandle:
    """Stand-in for an engine's open database."""

    def __init__(self, database_type: str):
        self.database_type = database_type
        self.closed = False


class FakeEngine(Engine):
    """In-memory engine with call recording.

    ``files`` maps paths to database type codes ("country", "region",
    "city", or anything else for an unsupported type). ``defaults`` maps an
    edition to the path opened by open_type.
    """

    name = "fake"

    def __init__(self, files=None, defaults=None, diagnostic=""):
        self.files = dict(files or {})
        self.defaults = dict(defaults or {})
        self.diagnostic = diagnostic
        self.countries = {"8.8.8.8": 1, "dns.google": 1, "141.1.1.1": 2, "10.0.0.9": 3}
        self.regions = {"8.8.8.8": RegionRecord(country_code="US", region="CA")}
        self.cities = {
            "8.8.8.8": CityRecord(
                city="Mountain View",
                postal_code="94043",
                latitude=37.386,
                longitude=-122.0838,
                country_name="United States",
                country_code="US",
                region="CA",
                continent="NA",
            ),
            "1.2.3.4": CityRecord(country_name="Australia", country_code="AU", continent="OC"),
        }
        self.region_names = {("US", "CA"): "California"}
        self.time_zones = {("US", "CA"): "America/Los_Angeles"}
        self.calls: list[tuple] = []

    def _emit(self, text: str) -> None:
        # Native engines write straight to fd 2
        os.write(2, text.encode())

    def open_path(self, path, cache_mode):
        self.calls.append(("open_path", path, cache_mode))
        if path not in self.files:
            if self.diagnostic:
                self._emit(self.diagnostic)
            return None
        return FakeHandle(self.files[path])

    def open_type(self, edition, cache_mode):
        self.calls.append(("open_type", edition, cache_mode))
        path = self.defaults.get(edition)
        if path is None:
            raise EngineError(f"no default {edition.value} database")
        if path not in self.files:
            self._emit(f"Error Opening file {path}\n")
            return None
        return FakeHandle(self.files[path])

    def release_handle(self, handle):
        self.calls.append(("release_handle", handle))
        handle.closed = True

    def release_record(self, record):
        self.calls.append(("release_record", record))

    def release_region(self, region):
        self.calls.append(("release_region", region))

    def database_type(self, handle):
        return handle.database_type

    def edition_for(self, database_type):
        try:
            return Edition(database_type)
        except ValueError:
            return None

    def description(self, database_type):
        return f"Fake {database_type.title()} Edition"

    def country_id_by_name(self, handle, name):
        self.calls.append(("country_id_by_name", name))
        return self.countries.get(name, 0)

    def region_by_name(self, handle, name):
        self.calls.append(("region_by_name", name))
        region = self.regions.get(name)
        return None if region is None else RegionRecord(region.country_code, region.region)

    def city_record_by_name(self, handle, name):
        self.calls.append(("city_record_by_name", name))
        record = self.cities.get(name)
        if record is None:
            return None
        return CityRecord(**vars(record))

    def name_by_id(self, country_id):
        return COUNTRY_NAMES[country_id] or None

    def code_by_id(self, country_id):
        return COUNTRY_CODES[country_id] or None

    def continent_by_id(self, country_id):
        return CONTINENTS[country_id] or None

    def region_name_by_code(self, country_code, region_code):
        self.calls.append(("region_name_by_code", country_code, region_code))
        return self.region_names.get((country_code, region_code))

    def time_zone_by_country_and_region(self, country_code, region_code):
        self.calls.append(("time_zone", country_code, region_code))
        return self.time_zones.get((country_code, region_code))

    def released(self, kind: str) -> list:
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def engine():
    """Fake engine with one database file per edition plus an unsupported one."""
    return FakeEngine(
        files={
            "/data/country.dat": "country",
            "/data/region.dat": "region",
            "/data/city.dat": "city",
            "/data/asn.dat": "asn",
        },
        defaults={
            Edition.COUNTRY: "/data/country.dat",
            Edition.REGION: "/data/region.dat",
            Edition.CITY: "/data/city.dat",
        },
    )


@pytest.fixture
def config():
    """Default GeoConfig, independent of the environment."""
    return GeoConfig()


@pytest.fixture
def sample_config(tmp_path):
    """Create a sample config file and return its path."""
    config_content = textwrap.dedent("""\
        engine = "legacy"
        cache_mode = "memory"
        data_dir = "/opt/geoip"

        [databases]
        city = "GeoLiteCity.dat"
        country = "/srv/GeoIP.dat"
    """)
    config_file = tmp_path / "config.toml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user config files and GEOSCOPE_ variables out of the tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for key in list(os.environ):
        if key.startswith("GEOSCOPE_"):
            monkeypatch.delenv(key)
