"""Engine base class.

An engine wraps one geolocation library. Handles, records and country ids
it returns are opaque to the rest of geoscope; the database and result
wrappers only pass them back into the engine that produced them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from geoscope.models import CacheMode, CityRecord, Edition, RegionRecord


class Engine(ABC):
    """Query contract consumed by GeoIPDatabase and Result."""

    name = "engine"

    # -- opening and closing -------------------------------------------------

    @abstractmethod
    def open_path(self, path: str, cache_mode: CacheMode) -> Any | None:
        """Open a database file. Returns a handle, or None on failure.

        Failures may also be raised as EngineError or OSError. Diagnostics
        may be written to stderr.
        """

    @abstractmethod
    def open_type(self, edition: Edition, cache_mode: CacheMode) -> Any | None:
        """Open the default database for an edition; same failure contract as open_path."""

    @abstractmethod
    def release_handle(self, handle: Any) -> None:
        pass

    def release_record(self, record: CityRecord) -> None:
        """Release a city record. Records are plain Python objects by default."""

    def release_region(self, region: RegionRecord) -> None:
        """Release a region record. Records are plain Python objects by default."""

    # -- database type -------------------------------------------------------

    @abstractmethod
    def database_type(self, handle: Any) -> Any:
        """Engine-specific type code of an open database."""

    @abstractmethod
    def edition_for(self, database_type: Any) -> Edition | None:
        """Edition for a type code, or None when geoscope has no field table for it."""

    @abstractmethod
    def description(self, database_type: Any) -> str:
        pass

    # -- lookups -------------------------------------------------------------

    @abstractmethod
    def country_id_by_name(self, handle: Any, name: str) -> int:
        """Country id for a host name or address; 0 when not found."""

    @abstractmethod
    def region_by_name(self, handle: Any, name: str) -> RegionRecord | None:
        pass

    @abstractmethod
    def city_record_by_name(self, handle: Any, name: str) -> CityRecord | None:
        pass

    # -- static tables -------------------------------------------------------

    @abstractmethod
    def name_by_id(self, country_id: int) -> str | None:
        pass

    @abstractmethod
    def code_by_id(self, country_id: int) -> str | None:
        pass

    @abstractmethod
    def continent_by_id(self, country_id: int) -> str | None:
        pass

    @abstractmethod
    def region_name_by_code(
        self, country_code: str | None, region_code: str | None
    ) -> str | None:
        pass

    @abstractmethod
    def time_zone_by_country_and_region(
        self, country_code: str | None, region_code: str | None
    ) -> str | None:
        pass

    def __str__(self) -> str:
        return self.name
