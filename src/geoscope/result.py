"""Lookup results."""

from __future__ import annotations

from typing import Any, Iterator

from geoscope.engines.base import Engine
from geoscope.errors import ClosedHandleError
from geoscope.fields import FIELD_TABLES, FieldDescriptor
from geoscope.models import Edition


def _text(value: Any) -> str:
    return "" if value is None else str(value)


class Result:
    """One lookup outcome with the fields of the edition that produced it.

    City and region results own the engine record they were built from and
    hand it back to the engine on release. Country results hold an integer
    id into the engine's static tables and own nothing.
    """

    def __init__(self, edition: Edition, data: Any, engine: Engine):
        self.edition = edition
        self._fields: tuple[FieldDescriptor, ...] = FIELD_TABLES[edition]
        self._engine = engine
        self._data = data
        self._closed = False

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(f.name for f in self._fields)

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise ClosedHandleError("result has been released")

    # -- field access ----------------------------------------------------------

    def get(self, name: str, default: Any = None) -> Any:
        """Value of a field, or ``default`` for unknown names and absent values."""
        self._check_open()
        for f in self._fields:
            if f.name == name:
                value = f.value(self._engine, self._data)
                return default if value is None else value
        return default

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        if name in (f.name for f in self.__dict__.get("_fields", ())):
            return self.get(name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __getitem__(self, name: str) -> Any:
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    # -- iteration ---------------------------------------------------------------

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        """Yield (name, value) for each present field, in table order."""
        self._check_open()
        return self._iter_fields()

    def _iter_fields(self) -> Iterator[tuple[str, Any]]:
        for f in self._fields:
            value = f.value(self._engine, self._data)
            if value is not None:
                yield f.name, value

    def next_field(self, last: str | None = None) -> tuple[str, Any] | None:
        """Field following ``last``, or the first field when ``last`` is None.

        Returns None once the table is exhausted, and also when ``last`` is
        not a field of this edition. Absent values come back as None here
        instead of being skipped.
        """
        self._check_open()
        index = 0
        if last is not None:
            for i, f in enumerate(self._fields):
                if f.name == last:
                    index = i + 1
                    break
            else:
                return None
        if index >= len(self._fields):
            return None
        f = self._fields[index]
        return f.name, f.value(self._engine, self._data)

    def as_dict(self) -> dict[str, Any]:
        return dict(self)

    # -- string form -------------------------------------------------------------

    def __str__(self) -> str:
        self._check_open()
        data = self._data
        if data is None:
            return ""
        match self.edition:
            case Edition.CITY:
                return (
                    f"{_text(data.city)}, {_text(data.country_name)} "
                    f"({_text(data.country_code)})"
                )
            case Edition.COUNTRY:
                name = self._engine.name_by_id(data)
                code = self._engine.code_by_id(data)
                return f"{_text(name)} ({_text(code)})"
            case Edition.REGION:
                return f"{_text(data.region)}, {_text(data.country_code)}"

    def __repr__(self) -> str:
        if self._closed:
            return f"<Result {self.edition.value} (released)>"
        return f"<Result {self.edition.value}: {self}>"

    # -- lifetime ----------------------------------------------------------------

    def release(self) -> None:
        """Hand the owned record back to the engine. Safe to call repeatedly."""
        if self._closed:
            return
        data, self._data = self._data, None
        self._closed = True
        if data is None:
            return
        match self.edition:
            case Edition.CITY:
                self._engine.release_record(data)
            case Edition.REGION:
                self._engine.release_region(data)
            case Edition.COUNTRY:
                pass

    close = release

    def __enter__(self) -> Result:
        return self

    def __exit__(self, *args) -> None:
        self.release()

    def __del__(self) -> None:
        if not self.__dict__.get("_closed", True):
            self.release()
