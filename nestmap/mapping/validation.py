"""Validation and nested validation.

``Validations`` runs per-attribute rules declared with ``@validates`` and
collects their messages into an ``Errors`` collection. ``NestedValidations``
extends it to cascade into every mapper-typed attribute whose type is
validatable, re-importing nested errors under a prefixed path::

    class Amount(Validations, Mapper):
        value = attribute(Float)

        @validates("value")
        def _positive(self, value):
            if value is None or value <= 0:
                return "must be positive"

    class Transaction(NestedValidations, Mapper):
        amount = attribute(Amount)

    t = Transaction(amount=Amount(value=-1))
    t.validate()            # False
    t.errors.to_dict()      # {"amount.value": ["must be positive"]}

The separator defaults to ``"."`` and is configured per class with the
``nested_attr_name_separator`` class keyword.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

BASE = "base"

Rule = Callable[[Any, Any], "str | None"]


@dataclass(frozen=True)
class ErrorDetail:
    """A single validation message attached to an attribute path."""

    attribute: str
    message: str

    @property
    def full_message(self) -> str:
        if self.attribute == BASE:
            return self.message
        return f"{self.attribute} {self.message}"


class Errors:
    """Ordered collection of validation errors."""

    def __init__(self) -> None:
        self._details: list[ErrorDetail] = []

    def add(self, attribute: str, message: str) -> ErrorDetail:
        detail = ErrorDetail(attribute, message)
        self._details.append(detail)
        return detail

    def import_error(self, error: ErrorDetail, attribute: str | None = None) -> ErrorDetail:
        """Copy ``error`` into this collection, optionally under a new path."""
        return self.add(attribute if attribute is not None else error.attribute, error.message)

    def clear(self) -> None:
        self._details.clear()

    def messages_for(self, attribute: str) -> list[str]:
        return [detail.message for detail in self._details if detail.attribute == attribute]

    def to_dict(self) -> dict[str, list[str]]:
        result: dict[str, list[str]] = {}
        for detail in self._details:
            result.setdefault(detail.attribute, []).append(detail.message)
        return result

    def full_messages(self) -> list[str]:
        return [detail.full_message for detail in self._details]

    @property
    def attributes(self) -> list[str]:
        """Attribute paths with at least one error, in insertion order."""
        return list(dict.fromkeys(detail.attribute for detail in self._details))

    def __iter__(self) -> Iterator[ErrorDetail]:
        return iter(list(self._details))

    def __len__(self) -> int:
        return len(self._details)

    def __contains__(self, attribute: object) -> bool:
        return any(detail.attribute == attribute for detail in self._details)

    def __repr__(self) -> str:
        return f"<Errors {self.to_dict()}>"


def validates(*names: str) -> Callable[[Rule], Rule]:
    """Register a method as a rule for the named attributes.

    The method receives the attribute's current value and returns an error
    message, or ``None`` when the value is valid.
    """
    if not names:
        raise ValueError("validates() needs at least one attribute name")

    def decorator(rule: Rule) -> Rule:
        rule.__validates__ = names  # type: ignore[attr-defined]
        return rule

    return decorator


@functools.lru_cache(maxsize=None)
def _rules_for(cls: type) -> tuple[tuple[tuple[str, ...], Rule], ...]:
    """Collect rules base classes first; overriding methods keep their slot.

    Overriding a rule with an undecorated method disables it.
    """
    rules: dict[str, tuple[tuple[str, ...], Rule]] = {}
    for klass in reversed(cls.__mro__):
        for member_name, member in vars(klass).items():
            names = getattr(member, "__validates__", None)
            if names is not None:
                rules[member_name] = (names, member)
            else:
                rules.pop(member_name, None)
    return tuple(rules.values())


class Validations:
    """Mixin giving a mapper an ``errors`` collection and ``validate()``."""

    @property
    def errors(self) -> Errors:
        errors: Errors | None = self.__dict__.get("_errors")
        if errors is None:
            errors = Errors()
            self._errors = errors
        return errors

    def validate(self) -> bool:
        """Clear errors, run every rule and return True if none failed."""
        errors = self.errors
        errors.clear()
        for names, rule in _rules_for(type(self)):
            for name in names:
                message = rule(self, self.read_attribute(name))  # type: ignore[attr-defined]
                if message:
                    errors.add(name, message)
        self.run_validations()
        return not errors

    def run_validations(self) -> None:
        """Hook for whole-object checks; add messages to ``self.errors``."""


class NestedValidations(Validations):
    """Validations that also cascade into validatable nested attributes.

    Every nested attribute is validated even after a failure so the full
    error set is reported.
    """

    def validate(self) -> bool:
        result = super().validate()
        schema = self.__schema__  # type: ignore[attr-defined]
        separator = schema.nested_attr_name_separator

        for definition in schema.validatable_attributes():
            value = self.read_attribute(definition.name)  # type: ignore[attr-defined]
            if value is None:
                continue
            if definition.collection:
                for index, item in enumerate(value):
                    if item is None:
                        continue
                    path = f"{definition.name}{separator}{index}"
                    if not self._import_nested(item, path, separator):
                        result = False
            elif not self._import_nested(value, definition.name, separator):
                result = False

        return result

    def _import_nested(self, value: Any, path: str, separator: str) -> bool:
        if value.validate():
            return True
        logger.debug("Nested validation failed for %s.%s", type(self).__name__, path)
        for error in value.errors:
            self.errors.import_error(error, attribute=f"{path}{separator}{error.attribute}")
        return False
