"""Data models for geoscope."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from geoscope.errors import InvalidArgumentError


class Edition(Enum):
    """Database schemas with a field table."""

    COUNTRY = "country"
    REGION = "region"
    CITY = "city"

    @classmethod
    def from_name(cls, name: str) -> Edition:
        try:
            return cls(name)
        except ValueError:
            raise InvalidArgumentError(
                f"invalid type {name!r} (city, country or region)"
            ) from None


class CacheMode(Enum):
    """How an engine keeps the database file around while it is open."""

    STANDARD = "standard"
    INDEX = "index"
    MEMORY = "memory"

    @classmethod
    def from_name(cls, name: str) -> CacheMode:
        try:
            return cls(name)
        except ValueError:
            raise InvalidArgumentError(
                f"invalid cache mode {name!r} (standard, index or memory)"
            ) from None


@dataclass
class CityRecord:
    """A city-edition lookup result as produced by an engine."""

    city: str | None = None
    postal_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    country_name: str | None = None
    country_code: str | None = None
    region: str | None = None
    continent: str | None = None


@dataclass
class RegionRecord:
    """A region-edition lookup result as produced by an engine."""

    country_code: str | None = None
    region: str | None = None
