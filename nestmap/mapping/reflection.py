"""Read-only reflection over mapper schemas.

Type-stub and IDE tooling can call ``describe`` to learn, for every
resolved attribute of a mapper class, its declared type, whether it holds
a list, its documentation, and whether the builder accessor or nested
validation applies to it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from nestmap.mapping.builder import Builder
from nestmap.mapping.mapper import schema_of
from nestmap.mapping.validation import NestedValidations


@dataclass(frozen=True)
class AttributeInfo:
    """Reflection record for one resolved attribute."""

    name: str
    type: Any
    type_name: str
    python_type: Any
    collection: bool
    doc: str | None
    aliases: tuple[str, ...]
    builder: bool
    validatable: bool


def describe(cls: type) -> list[AttributeInfo]:
    """Describe every attribute of ``cls``, inherited ones first.

    Raises:
        SchemaError: If ``cls`` is not a mapper class.
    """
    schema = schema_of(cls)
    is_builder = issubclass(cls, Builder)
    is_nested = issubclass(cls, NestedValidations)

    infos: list[AttributeInfo] = []
    for definition in schema.all_attributes():
        infos.append(
            AttributeInfo(
                name=definition.name,
                type=definition.type,
                type_name=definition.type_name,
                python_type=definition.type if definition.is_mapper else definition.type.python_type,
                collection=definition.collection,
                doc=definition.doc,
                aliases=tuple(sorted(definition.aliases)),
                builder=is_builder and definition.is_mapper,
                validatable=is_nested and definition.validatable,
            )
        )
    return infos
