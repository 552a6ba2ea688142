"""Configuration loading and management."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from geoscope.errors import InvalidArgumentError
from geoscope.models import CacheMode, Edition

ENGINE_NAMES = ("auto", "legacy", "maxmind")


@dataclass
class GeoConfig:
    """Library configuration with sensible defaults."""

    # Backend: auto picks by file suffix (.mmdb -> maxmind, else legacy)
    engine: str = "auto"
    cache_mode: str = "index"

    # Default database locations used when opening by type
    data_dir: str = "/usr/share/GeoIP"
    country_db: str | None = None
    region_db: str | None = None
    city_db: str | None = None

    # Max bytes of engine stderr kept per open call
    capture_limit: int = 4096

    @classmethod
    def load(
        cls,
        config_path: str | None = None,
        overrides: dict | None = None,
    ) -> GeoConfig:
        """Load config from TOML file with overrides.

        Resolution order: overrides > env var > config file > defaults
        """
        config = cls()

        toml_path = _resolve_config_path(config_path)
        if toml_path and toml_path.exists():
            with open(toml_path, "rb") as f:
                data = tomllib.load(f)
            _apply_toml(config, data)

        _apply_env(config)

        if overrides:
            _apply_overrides(config, overrides)

        config.validate()
        return config

    def validate(self) -> None:
        if self.engine not in ENGINE_NAMES:
            raise InvalidArgumentError(
                f"invalid engine {self.engine!r} ({', '.join(ENGINE_NAMES)})"
            )
        CacheMode.from_name(self.cache_mode)

    @property
    def cache(self) -> CacheMode:
        return CacheMode.from_name(self.cache_mode)

    def database_file(self, edition: Edition, default_name: str) -> Path:
        """Path of the default database for an edition.

        Configured names are taken relative to ``data_dir`` unless absolute.
        """
        configured = {
            Edition.COUNTRY: self.country_db,
            Edition.REGION: self.region_db,
            Edition.CITY: self.city_db,
        }[edition]
        return Path(self.data_dir) / (configured or default_name)


def _resolve_config_path(explicit_path: str | None) -> Path | None:
    """Resolve config file path."""
    if explicit_path:
        return Path(explicit_path)
    xdg = os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    candidates = [
        Path(xdg) / "geoscope" / "config.toml",
        Path.home() / ".geoscope.toml",
    ]
    for p in candidates:
        if p.exists():
            return p
    return None


def _apply_toml(config: GeoConfig, data: dict) -> None:
    """Apply TOML data to config."""
    for key in ("engine", "cache_mode", "data_dir"):
        if key in data:
            setattr(config, key, str(data[key]))
    if "capture_limit" in data:
        config.capture_limit = int(data["capture_limit"])

    # [databases] country = "GeoIP.dat" -> country_db
    if "databases" in data:
        dbs = data["databases"]
        for edition in Edition:
            if edition.value in dbs:
                setattr(config, f"{edition.value}_db", dbs[edition.value])


def _apply_env(config: GeoConfig) -> None:
    """Apply environment variable overrides (GEOSCOPE_ prefix)."""
    env_map = {
        "GEOSCOPE_ENGINE": ("engine", str),
        "GEOSCOPE_CACHE_MODE": ("cache_mode", lambda v: v.lower()),
        "GEOSCOPE_DATA_DIR": ("data_dir", str),
        "GEOSCOPE_COUNTRY_DB": ("country_db", str),
        "GEOSCOPE_REGION_DB": ("region_db", str),
        "GEOSCOPE_CITY_DB": ("city_db", str),
        "GEOSCOPE_CAPTURE_LIMIT": ("capture_limit", int),
    }
    for env_key, (attr, converter) in env_map.items():
        val = os.environ.get(env_key)
        if val is not None:
            setattr(config, attr, converter(val))


def _apply_overrides(config: GeoConfig, overrides: dict) -> None:
    """Apply explicit overrides."""
    for key, value in overrides.items():
        if value is not None and hasattr(config, key):
            setattr(config, key, value)
