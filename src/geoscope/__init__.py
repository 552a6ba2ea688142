"""Geolocation database bindings."""

from geoscope.database import GeoIPDatabase, open_type
from geoscope.database import open_path as open
from geoscope.errors import (
    ClosedHandleError,
    EngineError,
    GeoScopeError,
    InvalidArgumentError,
    OpenError,
    UnsupportedEditionError,
)
from geoscope.models import CacheMode, Edition
from geoscope.result import Result

__version__ = "0.1.0"

__all__ = [
    "CacheMode",
    "ClosedHandleError",
    "Edition",
    "EngineError",
    "GeoIPDatabase",
    "GeoScopeError",
    "InvalidArgumentError",
    "OpenError",
    "Result",
    "UnsupportedEditionError",
    "open",
    "open_type",
]
