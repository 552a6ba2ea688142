"""Tests for geoscope.result and geoscope.fields."""

import pytest

from geoscope.errors import ClosedHandleError, InvalidArgumentError
from geoscope.fields import FIELD_TABLES
from geoscope.models import CityRecord, Edition, RegionRecord
from geoscope.result import Result

CITY_ORDER = (
    "city",
    "postal_code",
    "latitude",
    "longitude",
    "country",
    "country_code",
    "region",
    "continent",
    "region_name",
    "time_zone",
)


def _city(engine, name="8.8.8.8") -> Result:
    return Result(Edition.CITY, engine.city_record_by_name(None, name), engine)


def _region(engine) -> Result:
    return Result(Edition.REGION, RegionRecord(country_code="US", region="CA"), engine)


def _country(engine, country_id=1) -> Result:
    return Result(Edition.COUNTRY, country_id, engine)


class TestEdition:
    def test_from_name(self):
        assert Edition.from_name("city") is Edition.CITY
        assert Edition.from_name("country") is Edition.COUNTRY
        assert Edition.from_name("region") is Edition.REGION

    def test_invalid_name(self):
        with pytest.raises(InvalidArgumentError):
            Edition.from_name("bogus")

    def test_names_are_case_sensitive(self):
        with pytest.raises(InvalidArgumentError):
            Edition.from_name("City")


class TestFieldTables:
    def test_city_order(self, engine):
        assert _city(engine).fields == CITY_ORDER

    def test_country_order(self, engine):
        assert Result(Edition.COUNTRY, 1, engine).fields == ("country", "country_code", "continent")

    def test_region_order(self, engine):
        assert _region(engine).fields == ("country_code", "region", "time_zone")

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            FIELD_TABLES[Edition.CITY] = ()

    def test_results_share_table(self, engine):
        assert _city(engine)._fields is _city(engine, "1.2.3.4")._fields


class TestGet:
    def test_direct_fields(self, engine):
        r = _city(engine)
        assert r.get("city") == "Mountain View"
        assert r.get("postal_code") == "94043"
        assert r.get("latitude") == pytest.approx(37.386)
        assert r.get("country") == "United States"

    def test_derived_fields(self, engine):
        r = _city(engine)
        assert r.get("region_name") == "California"
        assert r.get("time_zone") == "America/Los_Angeles"
        assert ("region_name_by_code", "US", "CA") in engine.calls

    def test_derived_value_not_cached(self, engine):
        r = _city(engine)
        r.get("time_zone")
        r.get("time_zone")
        assert len([c for c in engine.calls if c[0] == "time_zone"]) == 2

    def test_unknown_name_is_absent(self, engine):
        assert _city(engine).get("asn") is None
        assert _country(engine).get("city") is None

    def test_absent_value(self, engine):
        r = _city(engine, "1.2.3.4")
        assert r.get("city") is None
        assert r.get("city", "?") == "?"

    def test_country_fields(self, engine):
        r = _country(engine, 2)
        assert r.get("country") == "Germany"
        assert r.get("country_code") == "DE"
        assert r.get("continent") == "EU"

    def test_region_fields(self, engine):
        r = _region(engine)
        assert r.get("region") == "CA"
        assert r.get("time_zone") == "America/Los_Angeles"
        assert r.get("region_name") is None

    def test_attribute_access(self, engine):
        r = _city(engine)
        assert r.city == "Mountain View"
        assert r.country_code == "US"

    def test_attribute_absent_value_is_none(self, engine):
        assert _city(engine, "1.2.3.4").city is None

    def test_attribute_unknown_raises(self, engine):
        with pytest.raises(AttributeError):
            _region(engine).city

    def test_getitem(self, engine):
        r = _city(engine)
        assert r["city"] == "Mountain View"
        with pytest.raises(KeyError):
            r["asn"]

    def test_contains(self, engine):
        r = _city(engine, "1.2.3.4")
        assert "country_code" in r
        assert "city" not in r
        assert "asn" not in r


class TestIteration:
    def test_city_full(self, engine):
        names = [name for name, _ in _city(engine)]
        assert names == list(CITY_ORDER)

    def test_skips_absent(self, engine):
        pairs = list(_city(engine, "1.2.3.4"))
        assert pairs == [
            ("country", "Australia"),
            ("country_code", "AU"),
            ("continent", "OC"),
        ]

    def test_country_skips_absent_continent(self, engine):
        pairs = list(_country(engine, 3))
        assert pairs == [("country", "Antarctica"), ("country_code", "AQ")]

    def test_matches_get(self, engine):
        r = _city(engine)
        for name, value in r:
            assert r.get(name) == value

    def test_restartable(self, engine):
        r = _region(engine)
        first = list(r)
        second = list(r)
        assert first == second
        assert [n for n, _ in first] == ["country_code", "region", "time_zone"]

    def test_independent_iterators(self, engine):
        r = _region(engine)
        a = iter(r)
        next(a)
        b = iter(r)
        assert next(b)[0] == "country_code"
        assert next(a)[0] == "region"

    def test_as_dict(self, engine):
        assert _country(engine).as_dict() == {
            "country": "United States",
            "country_code": "US",
            "continent": "NA",
        }


class TestNextField:
    def test_first(self, engine):
        assert _region(engine).next_field() == ("country_code", "US")

    def test_resume(self, engine):
        assert _region(engine).next_field("country_code") == ("region", "CA")

    def test_exhausted(self, engine):
        assert _region(engine).next_field("time_zone") is None

    def test_unknown_last_name(self, engine):
        assert _region(engine).next_field("bogus") is None

    def test_walk(self, engine):
        r = _city(engine)
        names = []
        step = r.next_field()
        while step is not None:
            names.append(step[0])
            step = r.next_field(step[0])
        assert tuple(names) == CITY_ORDER

    def test_absent_value_returned_as_none(self, engine):
        r = _city(engine, "1.2.3.4")
        assert r.next_field() == ("city", None)


class TestStr:
    def test_city(self, engine):
        assert str(_city(engine)) == "Mountain View, United States (US)"

    def test_country(self, engine):
        assert str(_country(engine)) == "United States (US)"

    def test_region(self, engine):
        assert str(_region(engine)) == "CA, US"

    def test_city_missing_parts(self, engine):
        assert str(_city(engine, "1.2.3.4")) == ", Australia (AU)"

    def test_region_missing_region(self, engine):
        r = Result(Edition.REGION, RegionRecord(country_code="DE"), engine)
        assert str(r) == ", DE"

    def test_repr(self, engine):
        assert repr(_region(engine)) == "<Result region: CA, US>"


class TestRelease:
    def test_city_releases_record(self, engine):
        r = _city(engine)
        record = r._data
        r.release()
        assert engine.released("release_record") == [("release_record", record)]
        assert r.closed

    def test_region_releases_region(self, engine):
        r = _region(engine)
        r.release()
        assert len(engine.released("release_region")) == 1

    def test_release_twice(self, engine):
        r = _city(engine)
        r.release()
        r.release()
        assert len(engine.released("release_record")) == 1

    def test_country_owns_nothing(self, engine):
        r = _country(engine)
        r.release()
        r.release()
        assert engine.released("release_record") == []
        assert engine.released("release_region") == []

    def test_unpopulated(self, engine):
        r = Result(Edition.CITY, None, engine)
        r.release()
        assert engine.released("release_record") == []

    def test_use_after_release(self, engine):
        r = _city(engine)
        r.close()
        with pytest.raises(ClosedHandleError):
            r.get("city")
        with pytest.raises(ClosedHandleError):
            list(r)
        with pytest.raises(ClosedHandleError):
            str(r)
        assert repr(r) == "<Result city (released)>"

    def test_context_manager(self, engine):
        with _region(engine) as r:
            assert r.region == "CA"
        assert r.closed
        assert len(engine.released("release_region")) == 1

    def test_finalizer_releases(self, engine):
        r = _city(engine)
        r.__del__()
        assert len(engine.released("release_record")) == 1
        del r
        assert len(engine.released("release_record")) == 1

    def test_record_independent_of_engine_record(self, engine):
        r = _city(engine)
        engine.cities["8.8.8.8"].city = "Changed"
        assert r.city == "Mountain View"


class TestCityRecord:
    def test_defaults_absent(self):
        record = CityRecord()
        assert record.city is None
        assert record.latitude is None
