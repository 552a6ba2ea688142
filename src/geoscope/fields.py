"""Per-edition field tables.

Each table lists the fields a Result of that edition exposes, in iteration
order. An accessor receives the engine that produced the result and the
result's data (CityRecord, RegionRecord or country id) and returns the
value, or None when the field is absent for that data.
"""

from __future__ import annotations

from dataclasses import dataclass
from operator import attrgetter
from types import MappingProxyType
from typing import Any, Callable

from geoscope.engines.base import Engine
from geoscope.models import Edition

Accessor = Callable[[Engine, Any], Any]


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    accessor: Accessor

    def value(self, engine: Engine, data: Any) -> Any:
        return self.accessor(engine, data)


def _copy(attr: str) -> Accessor:
    """Direct copy of a record attribute (string or number)."""
    getter = attrgetter(attr)
    return lambda engine, data: getter(data)


def _region_name(engine: Engine, data) -> str | None:
    return engine.region_name_by_code(data.country_code, data.region)


def _time_zone(engine: Engine, data) -> str | None:
    return engine.time_zone_by_country_and_region(data.country_code, data.region)


CITY_FIELDS = (
    FieldDescriptor("city", _copy("city")),
    FieldDescriptor("postal_code", _copy("postal_code")),
    FieldDescriptor("latitude", _copy("latitude")),
    FieldDescriptor("longitude", _copy("longitude")),
    FieldDescriptor("country", _copy("country_name")),
    FieldDescriptor("country_code", _copy("country_code")),
    FieldDescriptor("region", _copy("region")),
    FieldDescriptor("continent", _copy("continent")),
    FieldDescriptor("region_name", _region_name),
    FieldDescriptor("time_zone", _time_zone),
)

COUNTRY_FIELDS = (
    FieldDescriptor("country", lambda engine, country_id: engine.name_by_id(country_id)),
    FieldDescriptor("country_code", lambda engine, country_id: engine.code_by_id(country_id)),
    FieldDescriptor("continent", lambda engine, country_id: engine.continent_by_id(country_id)),
)

REGION_FIELDS = (
    FieldDescriptor("country_code", _copy("country_code")),
    FieldDescriptor("region", _copy("region")),
    FieldDescriptor("time_zone", _time_zone),
)

FIELD_TABLES: MappingProxyType[Edition, tuple[FieldDescriptor, ...]] = MappingProxyType(
    {
        Edition.CITY: CITY_FIELDS,
        Edition.COUNTRY: COUNTRY_FIELDS,
        Edition.REGION: REGION_FIELDS,
    }
)
