"""Attribute schemas.

Every mapper class owns one ObjectSchema. Schemas are chained to the
schema of the parent class, so the resolved attribute list of a subclass
is the parent's list with the subclass's own declarations merged in:
overrides keep the inherited position, new names are appended.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from nestmap.core.config import DEFAULT_SEPARATOR, SchemaConfig
from nestmap.core.exceptions import DuplicateAttributeError, UnknownAttributeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttributeDefinition:
    """A single declared attribute.

    ``is_mapper`` and ``validatable`` are capability flags resolved once
    when the attribute is declared.
    """

    name: str
    type: Any
    collection: bool = False
    default: Callable[[], Any] | None = None
    doc: str | None = None
    aliases: frozenset[str] = field(default_factory=frozenset)
    owner: type | None = None
    is_mapper: bool = False
    validatable: bool = False

    @property
    def type_name(self) -> str:
        if self.is_mapper:
            return self.type.__name__
        return getattr(self.type, "name", repr(self.type))

    def with_alias(self, alias: str) -> AttributeDefinition:
        """Return a copy that also lists ``alias``."""
        return dataclasses.replace(self, aliases=self.aliases | {alias})


class ObjectSchema:
    """Ordered registry of attribute definitions for one class.

    Args:
        owner: The class this schema describes.
        parent: Schema of the nearest mapper base class, if any.
        config: Options declared on this level.
    """

    def __init__(
        self,
        owner: type,
        parent: ObjectSchema | None = None,
        config: SchemaConfig | None = None,
    ) -> None:
        self.owner = owner
        self.parent = parent
        self.config = config or SchemaConfig()
        self._declared: dict[str, AttributeDefinition] = {}
        self._aliases: dict[str, str] = {}  # alias -> canonical name
        self._alias_copies: set[str] = set()  # inherited names copied by alias()
        self._subschemas: list[ObjectSchema] = []
        self._cache: dict[str, Any] = {}
        if parent is not None:
            parent._subschemas.append(self)

    @property
    def owner_name(self) -> str:
        return self.owner.__name__

    # --- declaration ---

    def declare(self, definition: AttributeDefinition) -> AttributeDefinition:
        """Register ``definition`` at this level.

        Redeclaring a name inherited from a parent schema overrides it and
        keeps the aliases already pointing at that name.

        Raises:
            DuplicateAttributeError: If the name is already declared at this
                level or is taken by an alias anywhere in the chain.
        """
        name = definition.name
        if name in self._declared and name not in self._alias_copies:
            raise DuplicateAttributeError(self.owner_name, name)
        if self._alias_target(name) is not None:
            raise DuplicateAttributeError(self.owner_name, name)

        aliases = {alias for alias, canonical in self.aliases.items() if canonical == name}
        if not aliases <= definition.aliases:
            definition = dataclasses.replace(definition, aliases=definition.aliases | aliases)
        self._alias_copies.discard(name)
        self._declared[name] = definition
        self._invalidate()
        logger.debug(
            "Declared %s.%s (%s%s)",
            self.owner_name,
            name,
            definition.type_name,
            ", collection" if definition.collection else "",
        )
        return definition

    def alias(self, new_name: str, existing_name: str) -> AttributeDefinition:
        """Register ``new_name`` as another name for ``existing_name``.

        Raises:
            UnknownAttributeError: If ``existing_name`` is not declared.
            DuplicateAttributeError: If ``new_name`` is already taken.
        """
        definition = self.resolve(existing_name)
        if new_name == definition.name or self.has(new_name):
            raise DuplicateAttributeError(self.owner_name, new_name)

        # Copy inherited definitions into this level so ancestors keep
        # their own alias sets.
        if definition.name not in self._declared:
            self._alias_copies.add(definition.name)
        self._declared[definition.name] = definition.with_alias(new_name)
        self._aliases[new_name] = definition.name
        self._invalidate()
        logger.debug("Aliased %s.%s -> %s", self.owner_name, new_name, definition.name)
        return self._declared[definition.name]

    # --- lookup ---

    def resolve(self, name: str) -> AttributeDefinition:
        """Look up an attribute by canonical or alias name.

        Raises:
            UnknownAttributeError: If no level of the chain declares it.
        """
        canonical = self._alias_target(name) or name
        try:
            return self.attributes[canonical]
        except KeyError:
            raise UnknownAttributeError(self.owner_name, name) from None

    def has(self, name: str) -> bool:
        return name in self.attributes or self._alias_target(name) is not None

    def canonical_name(self, name: str) -> str:
        return self.resolve(name).name

    @property
    def attributes(self) -> dict[str, AttributeDefinition]:
        """Merged attributes, ancestors first, overrides kept in place."""
        if "attributes" not in self._cache:
            merged = dict(self.parent.attributes) if self.parent is not None else {}
            merged.update(self._declared)
            self._cache["attributes"] = merged
        return self._cache["attributes"]  # type: ignore[no-any-return]

    def all_attributes(self) -> list[AttributeDefinition]:
        return list(self.attributes.values())

    def declared_attributes(self) -> list[AttributeDefinition]:
        """Definitions declared (or re-declared) at this level only."""
        return list(self._declared.values())

    @property
    def aliases(self) -> dict[str, str]:
        """All aliases visible from this level, alias -> canonical name."""
        if "aliases" not in self._cache:
            merged = dict(self.parent.aliases) if self.parent is not None else {}
            merged.update(self._aliases)
            self._cache["aliases"] = merged
        return self._cache["aliases"]  # type: ignore[no-any-return]

    def validatable_attributes(self) -> list[AttributeDefinition]:
        if "validatable" not in self._cache:
            self._cache["validatable"] = [
                definition for definition in self.attributes.values() if definition.validatable
            ]
        return self._cache["validatable"]  # type: ignore[no-any-return]

    # --- options ---

    @property
    def nested_attr_name_separator(self) -> str:
        """Separator for nested error paths, inherited unless overridden."""
        if "separator" not in self._cache:
            self._cache["separator"] = self._option("nested_attr_name_separator", DEFAULT_SEPARATOR)
        return self._cache["separator"]  # type: ignore[no-any-return]

    @property
    def render_none(self) -> bool:
        if "render_none" not in self._cache:
            self._cache["render_none"] = self._option("render_none", False)
        return self._cache["render_none"]  # type: ignore[no-any-return]

    @property
    def xml_root(self) -> str | None:
        # Root element names are not inherited: each class names its own.
        return self.config.xml_root

    # --- internals ---

    def _option(self, key: str, default: Any) -> Any:
        schema: ObjectSchema | None = self
        while schema is not None:
            value = getattr(schema.config, key)
            if value is not None:
                return value
            schema = schema.parent
        return default

    def _alias_target(self, name: str) -> str | None:
        return self.aliases.get(name)

    def _invalidate(self) -> None:
        self._cache.clear()
        for subschema in self._subschemas:
            subschema._invalidate()

    def __len__(self) -> int:
        return len(self.attributes)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __repr__(self) -> str:
        return f"<ObjectSchema {self.owner_name} {list(self.attributes)}>"
