"""Nested builder DSL.

Mix ``Builder`` into a mapper to construct object graphs through
callbacks::

    class Transaction(Builder, Mapper):
        cvv_code = attribute(String)
        amount = attribute(Amount)

    def fill_amount(a):
        a.value = 45.0
        a.currency = "USD"

    def fill(t):
        t.cvv_code = "321"
        t.amount(fill_amount)

    transaction = Transaction.build(fill)

Every mapper-typed attribute of a Builder class gets a callable accessor:
``t.amount()`` reads the current value and ``t.amount(fn)`` builds a fresh
child, passes it to ``fn`` and assigns it. For collections ``t.items(fn)``
appends one new element per call. Plain assignment (``t.amount = value``)
keeps normal field semantics. Both ``build`` and the accessors work as
decorators, which is the usual way to pass a multi-statement callback::

    @Transaction.build
    def transaction(t):
        t.cvv_code = "321"

        @t.amount
        def _(a):
            a.value = 45.0
            a.currency = "USD"
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from nestmap.core.schema import AttributeDefinition
from nestmap.mapping.mapper import AttributeField, Mapper

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Mapper)
B = TypeVar("B", bound="Builder")


def build(target_class: type[M], mutate: Callable[[M], Any]) -> M:
    """Create a default ``target_class`` instance and apply ``mutate`` to it.

    Args:
        target_class: Any mapper class.
        mutate: Called synchronously with the new instance; its return
            value is ignored.

    Returns:
        The mutated instance.
    """
    instance = target_class()
    mutate(instance)
    return instance


class NestedAccessor:
    """Callable bound to one mapper-typed attribute of one instance."""

    __slots__ = ("_instance", "_definition")

    def __init__(self, instance: Mapper, definition: AttributeDefinition) -> None:
        self._instance = instance
        self._definition = definition

    @property
    def name(self) -> str:
        return self._definition.name

    def __call__(self, mutate: Callable[[Any], Any] | None = None) -> Any:
        """Read the attribute, or build a new child when ``mutate`` is given."""
        if mutate is None:
            return self._instance.read_attribute(self.name)
        if self._definition.collection:
            return self._append(mutate)
        return self._replace(mutate)

    def _replace(self, mutate: Callable[[Any], Any]) -> Any:
        # Always a fresh child, never the currently bound one.
        child = build(self._definition.type, mutate)
        setattr(self._instance, self.name, child)
        logger.debug(
            "Built %s.%s as new %s",
            type(self._instance).__name__,
            self.name,
            self._definition.type_name,
        )
        return child

    def _append(self, mutate: Callable[[Any], Any]) -> Any:
        items = self._instance.read_attribute(self.name)
        if items is None:
            setattr(self._instance, self.name, [])
            items = self._instance.read_attribute(self.name)
        child = build(self._definition.type, mutate)
        items.append(child)
        logger.debug(
            "Appended %s to %s.%s (%d items)",
            self._definition.type_name,
            type(self._instance).__name__,
            self.name,
            len(items),
        )
        return child

    def __repr__(self) -> str:
        return f"<NestedAccessor {type(self._instance).__name__}.{self.name}>"


class NestedBuilderField(AttributeField):
    """Descriptor returning a NestedAccessor instead of the raw value."""

    def __get__(self, instance: Mapper | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return NestedAccessor(instance, instance.__schema__.resolve(self.name))


class Builder:
    """Mixin adding ``build`` and nested accessors to a Mapper subclass.

    Place it before ``Mapper`` in the bases so its overrides take effect.
    """

    @classmethod
    def build(cls: type[B], mutate: Callable[[B], Any]) -> B:
        """Create an instance, pass it to ``mutate`` and return it."""
        return build(cls, mutate)  # type: ignore[type-var]

    @classmethod
    def _field_for(cls, definition: AttributeDefinition) -> Any:
        if definition.is_mapper:
            return NestedBuilderField(definition.name)
        return super()._field_for(definition)  # type: ignore[misc]
