"""Legacy MaxMind GeoIP (.dat) databases through pygeoip."""

from __future__ import annotations

import sys

import pygeoip
from pygeoip import const
from pygeoip.timezone import time_zone_by_country_and_region

from geoscope.config import GeoConfig
from geoscope.engines.base import Engine
from geoscope.errors import EngineError
from geoscope.models import CacheMode, CityRecord, Edition, RegionRecord
from geoscope.utils import blank_to_none, resolve_name

CACHE_FLAGS = {
    CacheMode.STANDARD: const.STANDARD,
    CacheMode.INDEX: const.MMAP_CACHE,
    CacheMode.MEMORY: const.MEMORY_CACHE,
}

# libGeoIP's default file name per edition
DEFAULT_FILES = {
    Edition.COUNTRY: "GeoIP.dat",
    Edition.REGION: "GeoIPRegion.dat",
    Edition.CITY: "GeoIPCity.dat",
}

EDITIONS = {
    const.COUNTRY_EDITION: Edition.COUNTRY,
    const.COUNTRY_EDITION_V6: Edition.COUNTRY,
    const.REGION_EDITION_REV0: Edition.REGION,
    const.REGION_EDITION_REV1: Edition.REGION,
    const.CITY_EDITION_REV0: Edition.CITY,
    const.CITY_EDITION_REV1: Edition.CITY,
    const.CITY_EDITION_REV1_V6: Edition.CITY,
}

IPV6_TYPES = (const.COUNTRY_EDITION_V6, const.CITY_EDITION_REV1_V6)

DESCRIPTIONS = {
    1: "GeoIP Country Edition",
    2: "GeoIP City Edition, Rev 1",
    3: "GeoIP Region Edition, Rev 1",
    4: "GeoIP ISP Edition",
    5: "GeoIP Organization Edition",
    6: "GeoIP City Edition, Rev 0",
    7: "GeoIP Region Edition, Rev 0",
    8: "GeoIP Proxy Edition",
    9: "GeoIP ASNum Edition",
    10: "GeoIP Netspeed Edition",
    11: "GeoIP Domain Name Edition",
    12: "GeoIP Country V6 Edition",
    21: "GeoIP ASNum V6 Edition",
    30: "GeoIP City Edition V6, Rev 1",
}


def _table_entry(table: tuple, index: int) -> str | None:
    if not 0 < index < len(table):
        return None
    return blank_to_none(table[index])


class LegacyEngine(Engine):
    """Engine over pygeoip.GeoIP handles.

    Like libGeoIP, a failed open returns None and leaves its reason on
    stderr, where the caller's capture collects it.
    """

    name = "legacy"

    def __init__(self, config: GeoConfig | None = None):
        self.config = config or GeoConfig()

    def open_path(self, path: str, cache_mode: CacheMode) -> pygeoip.GeoIP | None:
        try:
            handle = pygeoip.GeoIP(str(path), CACHE_FLAGS[cache_mode], cache=False)
        except OSError as e:
            print(f"Error Opening file {path}: {e.strerror or e}", file=sys.stderr)
            return None
        except (pygeoip.GeoIPError, ValueError, IndexError) as e:
            print(f"Invalid database file {path}: {e}", file=sys.stderr)
            return None
        return handle

    def open_type(self, edition: Edition, cache_mode: CacheMode) -> pygeoip.GeoIP | None:
        path = self.config.database_file(edition, DEFAULT_FILES[edition])
        if not path.exists():
            print(f"Error Opening file {path}", file=sys.stderr)
            return None
        return self.open_path(str(path), cache_mode)

    def release_handle(self, handle: pygeoip.GeoIP) -> None:
        # mmap, codecs stream or in-memory buffer depending on the cache flag
        fp = getattr(handle, "_fp", None)
        if fp is not None and hasattr(fp, "close"):
            fp.close()

    def database_type(self, handle: pygeoip.GeoIP) -> int:
        return handle._databaseType

    def edition_for(self, database_type: int) -> Edition | None:
        return EDITIONS.get(database_type)

    def description(self, database_type: int) -> str:
        return DESCRIPTIONS.get(database_type, f"Unknown database type {database_type}")

    def _address(self, handle: pygeoip.GeoIP, name: str) -> str | None:
        return resolve_name(name, ipv6=handle._databaseType in IPV6_TYPES)

    def country_id_by_name(self, handle: pygeoip.GeoIP, name: str) -> int:
        addr = self._address(handle, name)
        if addr is None:
            return 0
        try:
            return handle.id_by_addr(addr) or 0
        except pygeoip.GeoIPError as e:
            raise EngineError(str(e)) from e

    def region_by_name(self, handle: pygeoip.GeoIP, name: str) -> RegionRecord | None:
        addr = self._address(handle, name)
        if addr is None:
            return None
        try:
            region = handle.region_by_addr(addr)
        except pygeoip.GeoIPError as e:
            raise EngineError(str(e)) from e
        if not region or not region.get("country_code"):
            return None
        return RegionRecord(
            country_code=region["country_code"],
            region=blank_to_none(region.get("region_code", region.get("region_name"))),
        )

    def city_record_by_name(self, handle: pygeoip.GeoIP, name: str) -> CityRecord | None:
        addr = self._address(handle, name)
        if addr is None:
            return None
        try:
            rec = handle.record_by_addr(addr)
        except pygeoip.GeoIPError as e:
            raise EngineError(str(e)) from e
        if not rec:
            return None
        return CityRecord(
            city=blank_to_none(rec.get("city")),
            postal_code=blank_to_none(rec.get("postal_code")),
            latitude=rec.get("latitude"),
            longitude=rec.get("longitude"),
            country_name=blank_to_none(rec.get("country_name")),
            country_code=blank_to_none(rec.get("country_code")),
            region=blank_to_none(rec.get("region_code", rec.get("region_name"))),
            continent=blank_to_none(rec.get("continent")),
        )

    def name_by_id(self, country_id: int) -> str | None:
        return _table_entry(const.COUNTRY_NAMES, country_id)

    def code_by_id(self, country_id: int) -> str | None:
        return _table_entry(const.COUNTRY_CODES, country_id)

    def continent_by_id(self, country_id: int) -> str | None:
        return _table_entry(const.CONTINENT_NAMES, country_id)

    def region_name_by_code(self, country_code, region_code) -> str | None:
        # pygeoip ships no region name table
        return None

    def time_zone_by_country_and_region(self, country_code, region_code) -> str | None:
        if not country_code:
            return None
        return blank_to_none(time_zone_by_country_and_region(country_code, region_code))
