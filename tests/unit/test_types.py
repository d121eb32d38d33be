"""Unit tests for primitive attribute types."""

from __future__ import annotations

import datetime
import decimal

import pytest

from nestmap.core.types import Boolean, Date, Decimal, Float, Integer, String, Time, Value


class TestCast:
    def test_none_passes_through(self) -> None:
        assert String.cast(None) is None
        assert Float.cast(None) is None

    def test_float_coercion(self) -> None:
        assert Float.cast("45") == 45.0
        assert Float.cast(45) == 45.0

    def test_integer_coercion(self) -> None:
        assert Integer.cast("3") == 3

    def test_boolean_coercion(self) -> None:
        assert Boolean.cast("true") is True
        assert Boolean.cast("false") is False

    def test_date_coercion(self) -> None:
        assert Date.cast("2024-01-31") == datetime.date(2024, 1, 31)

    def test_time_coercion(self) -> None:
        assert Time.cast("2024-01-31T10:30:00") == datetime.datetime(2024, 1, 31, 10, 30)

    def test_decimal_coercion(self) -> None:
        assert Decimal.cast("1.50") == decimal.Decimal("1.50")

    def test_value_is_opaque(self) -> None:
        payload = {"any": ["thing"]}
        assert Value.cast(payload) is payload

    def test_rejects_incompatible(self) -> None:
        with pytest.raises(ValueError):
            Integer.cast("abc")

    def test_string_from_scalars(self) -> None:
        assert String.cast(321) == "321"
        assert String.cast(1.5) == "1.5"
        assert String.cast(decimal.Decimal("0.30")) == "0.30"
        assert String.cast(True) == "true"

    def test_string_rejects_containers(self) -> None:
        with pytest.raises(ValueError):
            String.cast(["a"])


class TestDump:
    def test_python_mode_keeps_native_values(self) -> None:
        day = datetime.date(2024, 1, 31)
        assert Date.dump(day) == day

    def test_json_mode(self) -> None:
        assert Date.dump(datetime.date(2024, 1, 31), mode="json") == "2024-01-31"
        assert Decimal.dump(decimal.Decimal("1.50"), mode="json") == "1.50"

    def test_none(self) -> None:
        assert Float.dump(None, mode="json") is None

    def test_repr(self) -> None:
        assert repr(Float) == "<PrimitiveType float>"
