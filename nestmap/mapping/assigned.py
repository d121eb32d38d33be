"""Tracking of explicitly assigned attributes.

``AssignedAttributes`` records the canonical name of every attribute
written after the instance finished construction. Values passed to the
constructor are not recorded; values read by ``from_dict``, ``from_json``
and ``from_xml`` are, because those go through the setters. This is what
partial updates (PATCH requests) are built on::

    class User(AssignedAttributes, Mapper):
        first_name = attribute(String)
        last_name = attribute(String)

    patch = User.from_dict({"last_name": "Doe"})
    patch.assigned_attribute_names  # {"last_name"}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from nestmap.core.schema import AttributeDefinition


@dataclass(frozen=True)
class AssignedValue:
    """An assigned value together with its attribute definition."""

    attribute: AttributeDefinition
    value: Any

    @property
    def name(self) -> str:
        return self.attribute.name


class AssignedAttributes:
    """Mixin recording attribute names assigned after construction.

    Place it before ``Mapper`` in the bases so its ``write_attribute``
    wraps the base one.
    """

    @property
    def assigned_attribute_names(self) -> set[str]:
        """Canonical names assigned since construction. Never shrinks."""
        names: set[str] | None = self.__dict__.get("_assigned_attribute_names")
        if names is None:
            names = set()
            self._assigned_attribute_names = names
        return names

    def write_attribute(self, name: str, value: Any) -> None:
        super().write_attribute(name, value)  # type: ignore[misc]
        if not self.__dict__.get("_initialized", False):
            return
        self.assigned_attribute_names.add(self.__schema__.canonical_name(name))  # type: ignore[attr-defined]

    def assigned_attributes(self) -> list[AttributeDefinition]:
        """Definitions of the assigned attributes, in schema order."""
        names = self.assigned_attribute_names
        return [
            definition
            for definition in self.__schema__.all_attributes()  # type: ignore[attr-defined]
            if definition.name in names
        ]

    def assigned_values(self) -> list[AssignedValue]:
        """Current values of the assigned attributes, in schema order."""
        return [
            AssignedValue(definition, self.read_attribute(definition.name))  # type: ignore[attr-defined]
            for definition in self.assigned_attributes()
        ]
