"""Unit tests for the Mapper base class and its serialization."""

from __future__ import annotations

import datetime
import json
from typing import Any

import pytest

from nestmap.core.exceptions import (
    DeserializationError,
    TypeMismatchError,
    UnknownAttributeError,
)
from nestmap.core.types import Boolean, Date, Float, Integer, String
from nestmap.mapping.mapper import Mapper, alias, attribute


class Line(Mapper):
    sku = attribute(String)
    quantity = attribute(Integer)


class Order(Mapper):
    id = attribute(Integer)
    note = attribute(String)
    paid = attribute(Boolean, default=lambda: False)
    placed_on = attribute(Date)
    lines = attribute(Line, collection=True)
    tags = attribute(String, collection=True, default=list)


class Amount(Mapper):
    value = attribute(Float)
    currency = attribute(String)


class Transaction(Mapper):
    cvv_code = attribute(String)
    amount = attribute(Amount)


class Contact(Mapper, render_none=True, xml_root="contact"):
    email = attribute(String)
    mail = alias("email")


class Receipt(Mapper, render_none=True):
    code = attribute(String)
    amount = attribute(Amount)
    lines = attribute(Line, collection=True)


class TestConstruction:
    def test_defaults_applied(self) -> None:
        order = Order()
        assert order.paid is False
        assert order.tags == []
        assert order.note is None

    def test_default_factory_called_per_instance(self) -> None:
        first, second = Order(), Order()
        first.tags.append("x")
        assert second.tags == []

    def test_initial_values(self) -> None:
        order = Order(id=1, note="rush")
        assert order.id == 1
        assert order.note == "rush"

    def test_initial_value_by_alias(self) -> None:
        contact = Contact(mail="a@example.com")
        assert contact.email == "a@example.com"

    def test_unknown_keyword(self) -> None:
        with pytest.raises(UnknownAttributeError, match="bogus"):
            Order(bogus=1)

    def test_values_are_cast(self) -> None:
        order = Order(id="5")
        assert order.id == 5

    def test_initialized_flag(self) -> None:
        assert Order()._initialized is True


class TestAccess:
    def test_assign_and_read(self) -> None:
        amount = Amount()
        amount.value = 12.5
        assert amount.value == 12.5
        assert amount.read_attribute("value") == 12.5

    def test_write_attribute(self) -> None:
        amount = Amount()
        amount.write_attribute("currency", "EUR")
        assert amount.currency == "EUR"

    def test_assign_unknown_attribute(self) -> None:
        amount = Amount()
        with pytest.raises(UnknownAttributeError, match="inexistent"):
            amount.inexistent = 3

    def test_read_unknown_attribute(self) -> None:
        amount = Amount()
        with pytest.raises(UnknownAttributeError):
            amount.inexistent  # noqa: B018
        assert not hasattr(amount, "inexistent")

    def test_type_mismatch(self) -> None:
        amount = Amount()
        with pytest.raises(TypeMismatchError, match="value"):
            amount.value = "not a number"

    def test_mapper_type_mismatch(self) -> None:
        transaction = Transaction()
        with pytest.raises(TypeMismatchError, match="Amount"):
            transaction.amount = {"value": 1.0}

    def test_collection_requires_iterable(self) -> None:
        order = Order()
        with pytest.raises(TypeMismatchError):
            order.tags = "single"

    def test_collection_elements_cast(self) -> None:
        order = Order()
        order.tags = ("a", "b")
        assert order.tags == ["a", "b"]

    def test_collection_element_type_checked(self) -> None:
        order = Order()
        with pytest.raises(TypeMismatchError):
            order.lines = [Amount()]

    def test_alias_reads_and_writes_same_slot(self) -> None:
        contact = Contact()
        contact.mail = "b@example.com"
        assert contact.email == "b@example.com"
        assert contact.mail == "b@example.com"

    def test_repr(self) -> None:
        assert repr(Amount(value=1.0)) == "Amount(value=1.0)"


class TestDict:
    def test_to_dict_omits_none(self, transaction_payload: dict[str, Any]) -> None:
        transaction = Transaction(
            cvv_code="321",
            amount=Amount(value=45.0, currency="USD"),
        )
        assert transaction.to_dict() == transaction_payload
        assert Transaction(cvv_code="1").to_dict() == {"cvv_code": "1"}

    def test_render_none(self) -> None:
        assert Contact().to_dict() == {"email": None}

    def test_to_dict_json_mode(self) -> None:
        order = Order(id=1, placed_on=datetime.date(2024, 3, 1))
        assert order.to_dict()["placed_on"] == datetime.date(2024, 3, 1)
        assert order.to_dict(mode="json")["placed_on"] == "2024-03-01"

    def test_from_dict_nested(self, transaction_payload: dict[str, Any]) -> None:
        transaction = Transaction.from_dict(transaction_payload)
        assert isinstance(transaction.amount, Amount)
        assert transaction.amount.currency == "USD"

    def test_from_dict_collection(self, order_payload: dict[str, Any]) -> None:
        order = Order.from_dict(order_payload)
        assert [line.sku for line in order.lines] == ["A-1", "B-2"]
        assert all(isinstance(line, Line) for line in order.lines)

    def test_from_dict_ignores_unknown_keys(self) -> None:
        amount = Amount.from_dict({"value": 1.0, "extra": True})
        assert amount.to_dict() == {"value": 1.0}

    def test_from_dict_accepts_alias_keys(self) -> None:
        assert Contact.from_dict({"mail": "c@example.com"}).email == "c@example.com"

    def test_from_dict_requires_mapping(self) -> None:
        with pytest.raises(DeserializationError, match="mapping"):
            Amount.from_dict([1, 2])  # type: ignore[arg-type]

    def test_from_dict_collection_requires_list(self) -> None:
        with pytest.raises(DeserializationError, match="lines"):
            Order.from_dict({"lines": {"sku": "A"}})

    def test_from_dict_casts_values(self) -> None:
        assert Order.from_dict({"placed_on": "2024-03-01"}).placed_on == datetime.date(2024, 3, 1)


class TestJson:
    def test_to_json(self) -> None:
        order = Order(id=1, placed_on=datetime.date(2024, 3, 1))
        assert json.loads(order.to_json()) == {
            "id": 1,
            "paid": False,
            "placed_on": "2024-03-01",
            "tags": [],
        }

    def test_to_json_kwargs(self) -> None:
        assert Amount(value=1.0).to_json(indent=2) == '{\n  "value": 1.0\n}'

    def test_from_json(self, order_payload: dict[str, Any]) -> None:
        order = Order.from_json(json.dumps(order_payload))
        assert order.lines[1].quantity == 1

    def test_from_json_number_into_string(self) -> None:
        transaction = Transaction.from_json('{"cvv_code": 321}')
        assert transaction.cvv_code == "321"

    def test_from_json_invalid(self) -> None:
        with pytest.raises(DeserializationError, match="invalid JSON"):
            Order.from_json("{not json")


class TestXml:
    def test_to_xml(self) -> None:
        order = Order(
            id=1,
            note="a & b",
            paid=True,
            lines=[Line(sku="A", quantity=2), Line(sku="B", quantity=1)],
        )
        assert order.to_xml() == (
            "<Order><id>1</id><note>a &amp; b</note><paid>true</paid>"
            "<lines><sku>A</sku><quantity>2</quantity></lines>"
            "<lines><sku>B</sku><quantity>1</quantity></lines></Order>"
        )

    def test_custom_root(self) -> None:
        assert Amount(value=1.5).to_xml(root="amount") == "<amount><value>1.5</value></amount>"

    def test_configured_root_and_render_none(self) -> None:
        assert Contact().to_xml() == (
            '<contact xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
            '<email xsi:nil="true" /></contact>'
        )

    def test_render_none_round_trip(self) -> None:
        receipt = Receipt.from_xml(Receipt(code="x").to_xml())
        assert receipt.to_dict() == {"code": "x", "amount": None, "lines": None}

    def test_empty_nested_element_is_empty_child(self) -> None:
        receipt = Receipt.from_xml("<Receipt><amount /></Receipt>")
        assert isinstance(receipt.amount, Amount)
        assert receipt.amount.to_dict() == {}

    def test_empty_string_round_trip(self) -> None:
        xml = Order(note="").to_xml()
        assert "<note />" in xml
        assert Order.from_xml(xml).note == ""

    def test_empty_non_string_element_is_none(self) -> None:
        assert Order.from_xml("<Order><id /></Order>").id is None

    def test_from_xml(self) -> None:
        xml = (
            "<Order><id>3</id><paid>false</paid><placed_on>2024-03-01</placed_on>"
            "<lines><sku>A</sku><quantity>2</quantity></lines>"
            "<tags>x</tags><tags>y</tags><unknown>1</unknown></Order>"
        )
        order = Order.from_xml(xml)
        assert order.id == 3
        assert order.paid is False
        assert order.placed_on == datetime.date(2024, 3, 1)
        assert order.lines[0].quantity == 2
        assert order.tags == ["x", "y"]

    def test_from_xml_invalid(self) -> None:
        with pytest.raises(DeserializationError, match="invalid XML"):
            Order.from_xml("<Order>")
