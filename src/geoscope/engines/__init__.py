"""Engine registry."""

from __future__ import annotations

from pathlib import Path

from geoscope.config import GeoConfig
from geoscope.engines.base import Engine
from geoscope.errors import InvalidArgumentError

MMDB_SUFFIX = ".mmdb"


def _engine_classes() -> dict[str, type[Engine]]:
    from geoscope.engines.legacy import LegacyEngine
    from geoscope.engines.maxmind import MaxMindEngine

    return {
        LegacyEngine.name: LegacyEngine,
        MaxMindEngine.name: MaxMindEngine,
    }


def get_engine(name: str, config: GeoConfig | None = None) -> Engine:
    """Create the engine registered under ``name`` (legacy or maxmind)."""
    engine_class = _engine_classes().get(name)
    if engine_class is None:
        raise InvalidArgumentError(f"unknown engine {name!r} (legacy or maxmind)")
    return engine_class(config)


def resolve_engine(
    engine: Engine | str | None,
    config: GeoConfig,
    path: str | None = None,
) -> Engine:
    """Pick the engine for an open call.

    An Engine instance is used as given. A name, or the configured engine
    when none is given, is looked up in the registry; ``auto`` selects
    maxmind for .mmdb files and legacy for everything else.
    """
    if isinstance(engine, Engine):
        return engine
    name = engine or config.engine
    if name == "auto":
        if path is not None and Path(path).suffix.lower() == MMDB_SUFFIX:
            name = "maxmind"
        else:
            name = "legacy"
    return get_engine(name, config)


__all__ = ["Engine", "get_engine", "resolve_engine"]
