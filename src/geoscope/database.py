"""Opened geolocation databases."""

from __future__ import annotations

import logging
import os
from typing import Any

from geoscope.capture import capture_stderr
from geoscope.config import GeoConfig
from geoscope.engines import Engine, resolve_engine
from geoscope.errors import (
    ClosedHandleError,
    EngineError,
    InvalidArgumentError,
    OpenError,
    UnsupportedEditionError,
)
from geoscope.models import Edition
from geoscope.result import Result

logger = logging.getLogger(__name__)


class GeoIPDatabase:
    """Wraps one engine handle for an open database."""

    def __init__(self, engine: Engine, handle: Any, path: str | None = None):
        self.engine = engine
        self.path = path
        self.database_type = engine.database_type(handle)
        self.edition: Edition | None = engine.edition_for(self.database_type)
        self._handle = handle

    @property
    def closed(self) -> bool:
        return self._handle is None

    def describe(self) -> str:
        """Engine description of the database type, e.g. "GeoIP City Edition, Rev 1"."""
        return self.engine.description(self.database_type)

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<GeoIPDatabase {self.describe()!r} {state}>"

    def lookup(self, name: str) -> Result | None:
        """Look up a host name or IP address.

        Returns None when the database has no entry for the name.
        """
        if not isinstance(name, str):
            raise TypeError(f"name must be str, not {type(name).__name__}")
        handle = self._handle
        if handle is None:
            raise ClosedHandleError("database has been closed")

        match self.edition:
            case Edition.COUNTRY:
                data = self.engine.country_id_by_name(handle, name) or None
            case Edition.REGION:
                data = self.engine.region_by_name(handle, name)
            case Edition.CITY:
                data = self.engine.city_record_by_name(handle, name)
            case _:
                raise UnsupportedEditionError(
                    f"no field mapping for {self.describe()!r}"
                )

        if data is None:
            logger.debug("No %s entry for %s", self.edition.value, name)
            return None
        return Result(self.edition, data, self.engine)

    def close(self) -> None:
        """Release the engine handle. Safe to call repeatedly."""
        handle, self._handle = self._handle, None
        if handle is not None:
            self.engine.release_handle(handle)
            logger.debug("Closed %s", self.path or self.describe())

    release = close

    def __enter__(self) -> GeoIPDatabase:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __del__(self) -> None:
        if self.__dict__.get("_handle") is not None:
            self.close()


def _wrap(engine: Engine, handle: Any, path: str | None) -> GeoIPDatabase:
    try:
        db = GeoIPDatabase(engine, handle, path)
    except Exception:
        engine.release_handle(handle)
        raise
    if db.edition is None:
        logger.debug("Opened %s with unsupported type %r", path, db.database_type)
    else:
        logger.debug("Opened %s (%s)", path or db.edition.value, db.describe())
    return db


def open_path(
    path: str | os.PathLike,
    *,
    engine: Engine | str | None = None,
    config: GeoConfig | None = None,
) -> GeoIPDatabase:
    """Open a database file.

    Raises OpenError carrying the engine's stderr output when the file
    cannot be opened.
    """
    path = os.fspath(path)
    config = config or GeoConfig.load()
    eng = resolve_engine(engine, config, path)

    handle = None
    failure: Exception | None = None
    with capture_stderr(config.capture_limit) as captured:
        try:
            handle = eng.open_path(path, config.cache)
        except (EngineError, OSError) as e:
            failure = e

    if handle is None:
        message = f"cannot open {path}"
        if failure is not None:
            message = f"{message} ({failure})"
        raise OpenError(message, diagnostic=captured.text)
    return _wrap(eng, handle, path)


def open_type(
    *types: str,
    engine: Engine | str | None = None,
    config: GeoConfig | None = None,
) -> GeoIPDatabase:
    """Open the first available default database among ``types``.

    Each type is one of "city", "country" or "region"; they are tried in
    order. A single list or tuple of names is accepted as well.
    """
    if len(types) == 1 and isinstance(types[0], (list, tuple)):
        types = tuple(types[0])
    if not types:
        raise InvalidArgumentError("at least one type (city, country or region) is required")
    editions = [Edition.from_name(t) for t in types]

    config = config or GeoConfig.load()
    eng = resolve_engine(engine, config)

    handle = None
    failures: list[str] = []
    with capture_stderr(config.capture_limit) as captured:
        for edition in editions:
            try:
                handle = eng.open_type(edition, config.cache)
            except (EngineError, OSError) as e:
                failures.append(f"{edition.value}: {e}")
                continue
            if handle is not None:
                break
            failures.append(f"{edition.value}: not available")

    for failure in failures:
        logger.debug("Skipped default database %s", failure)
    if handle is None:
        names = ", ".join(e.value for e in editions)
        raise OpenError(f"no database available for {names}", diagnostic=captured.text)
    return _wrap(eng, handle, None)
