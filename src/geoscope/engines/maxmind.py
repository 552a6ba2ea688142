"""MaxMind DB (.mmdb) databases through geoip2."""

from __future__ import annotations

import threading

import geoip2.database
import geoip2.errors
import maxminddb
from maxminddb import MODE_AUTO, MODE_MEMORY, MODE_MMAP

from geoscope.config import GeoConfig
from geoscope.engines.base import Engine
from geoscope.errors import EngineError
from geoscope.models import CacheMode, CityRecord, Edition, RegionRecord
from geoscope.utils import resolve_name

CACHE_MODES = {
    CacheMode.STANDARD: MODE_AUTO,
    CacheMode.INDEX: MODE_MMAP,
    CacheMode.MEMORY: MODE_MEMORY,
}

DEFAULT_FILES = {
    Edition.COUNTRY: "GeoLite2-Country.mmdb",
    Edition.CITY: "GeoLite2-City.mmdb",
}

DESCRIPTIONS = {
    "GeoLite2-Country": "GeoLite2 Country",
    "GeoLite2-City": "GeoLite2 City",
    "GeoIP2-Country": "GeoIP2 Country",
    "GeoIP2-City": "GeoIP2 City",
}


class MaxMindEngine(Engine):
    """Engine over geoip2.database.Reader handles.

    MaxMind DB records carry names inline instead of in static tables, so
    the country, region-name and time-zone tables are filled in from the
    records this engine has returned.
    """

    name = "maxmind"

    def __init__(self, config: GeoConfig | None = None):
        self.config = config or GeoConfig()
        self._lock = threading.Lock()
        self._countries: dict[int, tuple[str | None, str | None, str | None]] = {}
        self._region_names: dict[tuple[str | None, str | None], str] = {}
        self._time_zones: dict[tuple[str | None, str | None], str] = {}

    def open_path(self, path: str, cache_mode: CacheMode) -> geoip2.database.Reader:
        try:
            reader = geoip2.database.Reader(str(path), mode=CACHE_MODES[cache_mode])
        except maxminddb.InvalidDatabaseError as e:
            raise EngineError(f"invalid database file {path}: {e}") from e
        return reader

    def open_type(self, edition: Edition, cache_mode: CacheMode) -> geoip2.database.Reader:
        if edition not in DEFAULT_FILES:
            raise EngineError(f"no {edition.value} edition in MaxMind DB format")
        path = self.config.database_file(edition, DEFAULT_FILES[edition])
        return self.open_path(str(path), cache_mode)

    def release_handle(self, handle: geoip2.database.Reader) -> None:
        handle.close()

    def database_type(self, handle: geoip2.database.Reader) -> str:
        return handle.metadata().database_type

    def edition_for(self, database_type: str) -> Edition | None:
        if "City" in database_type:
            return Edition.CITY
        if "Country" in database_type:
            return Edition.COUNTRY
        return None

    def description(self, database_type: str) -> str:
        return DESCRIPTIONS.get(database_type, database_type)

    def country_id_by_name(self, handle: geoip2.database.Reader, name: str) -> int:
        addr = resolve_name(name)
        if addr is None:
            return 0
        try:
            resp = handle.country(addr)
        except geoip2.errors.AddressNotFoundError:
            return 0
        except (TypeError, ValueError) as e:
            raise EngineError(str(e)) from e

        country_id = resp.country.geoname_id
        if not country_id:
            return 0
        with self._lock:
            self._countries[country_id] = (
                resp.country.name,
                resp.country.iso_code,
                resp.continent.code,
            )
        return country_id

    def region_by_name(self, handle: geoip2.database.Reader, name: str) -> RegionRecord | None:
        raise EngineError("region lookups are not available in MaxMind DB format")

    def city_record_by_name(self, handle: geoip2.database.Reader, name: str) -> CityRecord | None:
        addr = resolve_name(name)
        if addr is None:
            return None
        try:
            resp = handle.city(addr)
        except geoip2.errors.AddressNotFoundError:
            return None
        except (TypeError, ValueError) as e:
            raise EngineError(str(e)) from e

        subdivision = resp.subdivisions.most_specific
        record = CityRecord(
            city=resp.city.name,
            postal_code=resp.postal.code,
            latitude=resp.location.latitude,
            longitude=resp.location.longitude,
            country_name=resp.country.name,
            country_code=resp.country.iso_code,
            region=subdivision.iso_code,
            continent=resp.continent.code,
        )
        key = (record.country_code, record.region)
        with self._lock:
            if subdivision.name:
                self._region_names[key] = subdivision.name
            if resp.location.time_zone:
                self._time_zones[key] = resp.location.time_zone
        return record

    def _country(self, country_id: int) -> tuple[str | None, str | None, str | None]:
        with self._lock:
            return self._countries.get(country_id, (None, None, None))

    def name_by_id(self, country_id: int) -> str | None:
        return self._country(country_id)[0]

    def code_by_id(self, country_id: int) -> str | None:
        return self._country(country_id)[1]

    def continent_by_id(self, country_id: int) -> str | None:
        return self._country(country_id)[2]

    def region_name_by_code(self, country_code, region_code) -> str | None:
        with self._lock:
            return self._region_names.get((country_code, region_code))

    def time_zone_by_country_and_region(self, country_code, region_code) -> str | None:
        with self._lock:
            return self._time_zones.get((country_code, region_code))
