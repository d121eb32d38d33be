"""Mapper base class.

Subclasses declare typed attributes in the class body::

    class Amount(Mapper):
        value = attribute(Float)
        currency = attribute(String, doc="ISO 4217 code")

    class Person(Mapper):
        first_name = attribute(String)
        name = alias("first_name")

Each declaration is registered in the class's ObjectSchema and replaced by
a data descriptor. Reads and writes go through ``read_attribute`` and
``write_attribute`` so mixins can layer behaviour on top of them.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar

from nestmap.core.config import load_config
from nestmap.core.exceptions import (
    DeserializationError,
    SchemaError,
    TypeMismatchError,
    UnknownAttributeError,
)
from nestmap.core.schema import AttributeDefinition, ObjectSchema
from nestmap.core.types import PrimitiveType, String
from nestmap.mapping.protocol import supports_validation

M = TypeVar("M", bound="Mapper")

_MISSING = object()
_SCHEMA_OPTIONS = ("nested_attr_name_separator", "render_none", "xml_root")

XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
_XSI_NIL = f"{{{XSI_NAMESPACE}}}nil"
ET.register_namespace("xsi", XSI_NAMESPACE)


@dataclass(frozen=True)
class AttributeDeclaration:
    """Class-body placeholder produced by :func:`attribute`."""

    type: Any
    collection: bool = False
    default: Callable[[], Any] | None = None
    doc: str | None = None


@dataclass(frozen=True)
class AliasDeclaration:
    """Class-body placeholder produced by :func:`alias`."""

    target: str


def attribute(
    type_: Any,
    *,
    collection: bool = False,
    default: Callable[[], Any] | None = None,
    doc: str | None = None,
) -> Any:
    """Declare an attribute in a mapper class body.

    Args:
        type_: A primitive type (``String``, ``Float``...) or a Mapper subclass.
        collection: Store a list of ``type_`` values.
        default: Zero-argument factory applied on construction.
        doc: Documentation exposed through reflection.
    """
    return AttributeDeclaration(type_, collection, default, doc)


def alias(target: str) -> Any:
    """Declare another name for the attribute ``target``."""
    return AliasDeclaration(target)


class AttributeField:
    """Data descriptor installed for every declared attribute."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __get__(self, instance: Mapper | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance.read_attribute(self.name)

    def __set__(self, instance: Mapper, value: Any) -> None:
        instance.write_attribute(self.name, value)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class AliasField:
    """Descriptor forwarding every access to the aliased attribute."""

    def __init__(self, name: str, target: str) -> None:
        self.name = name
        self.target = target

    def __get__(self, instance: Mapper | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return getattr(instance, self.target)

    def __set__(self, instance: Mapper, value: Any) -> None:
        setattr(instance, self.target, value)

    def __repr__(self) -> str:
        return f"<AliasField {self.name} -> {self.target}>"


def schema_of(obj: Any) -> ObjectSchema:
    """Return the schema of a mapper class or instance."""
    cls = obj if isinstance(obj, type) else type(obj)
    try:
        return cls.__schema__  # type: ignore[no-any-return]
    except AttributeError:
        raise SchemaError(f"{cls.__name__} is not a mapper class") from None


def _parent_schema(cls: type) -> ObjectSchema | None:
    for base in cls.__mro__[1:]:
        schema = base.__dict__.get("__schema__")
        if schema is not None:
            return schema  # type: ignore[no-any-return]
    return None


def _cast_one(definition: AttributeDefinition, value: Any) -> Any:
    if value is None:
        return None
    if definition.is_mapper:
        if isinstance(value, definition.type):
            return value
        raise TypeMismatchError(definition.name, definition.type_name, value)
    try:
        return definition.type.cast(value)
    except ValueError as e:
        raise TypeMismatchError(definition.name, definition.type_name, value) from e


def _cast(definition: AttributeDefinition, value: Any) -> Any:
    """Cast a value for assignment to ``definition``."""
    if value is None or not definition.collection:
        return _cast_one(definition, value)
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise TypeMismatchError(definition.name, f"list[{definition.type_name}]", value)
    return [_cast_one(definition, item) for item in value]


def _dump_one(definition: AttributeDefinition, value: Any, mode: str) -> Any:
    if value is None:
        return None
    if definition.is_mapper:
        return value.to_dict(mode=mode)
    return definition.type.dump(value, mode=mode)


def _load_one(definition: AttributeDefinition, raw: Any) -> Any:
    if definition.is_mapper and isinstance(raw, Mapping):
        return definition.type.from_dict(raw)
    return raw


def _xml_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Mapper:
    """Base class for objects described by an attribute schema.

    Class keywords configure the schema level (see SchemaConfig)::

        class Payment(Mapper, nested_attr_name_separator="/"):
            ...

    Args:
        **values: Initial values by attribute (or alias) name. They are
            assigned before the instance counts as initialized.

    Raises:
        UnknownAttributeError: If a keyword names no attribute.
        TypeMismatchError: If a value cannot be cast.
    """

    __schema__: ClassVar[ObjectSchema]

    def __init_subclass__(cls, **options: Any) -> None:
        schema_options = {key: options.pop(key) for key in _SCHEMA_OPTIONS if key in options}
        super().__init_subclass__(**options)
        cls.__schema__ = ObjectSchema(
            cls,
            parent=_parent_schema(cls),
            config=load_config(cls.__name__, schema_options),
        )

        for name, member in list(cls.__dict__.items()):
            if isinstance(member, AttributeDeclaration):
                delattr(cls, name)
                cls.define_attribute(
                    name,
                    member.type,
                    collection=member.collection,
                    default=member.default,
                    doc=member.doc,
                )
            elif isinstance(member, AliasDeclaration):
                delattr(cls, name)
                cls.define_alias(name, member.target)

    # --- declaration ---

    @classmethod
    def define_attribute(
        cls,
        name: str,
        type_: Any,
        *,
        collection: bool = False,
        default: Callable[[], Any] | None = None,
        doc: str | None = None,
    ) -> AttributeDefinition:
        """Declare an attribute on this class at runtime.

        Raises:
            DuplicateAttributeError: If ``name`` is already declared on this class.
            SchemaError: If ``name`` or ``type_`` is not usable.
        """
        cls._check_name(name)
        is_mapper = isinstance(type_, type) and issubclass(type_, Mapper)
        if not is_mapper and not isinstance(type_, PrimitiveType):
            raise SchemaError(f"Unsupported type {type_!r} for {cls.__name__}.{name}")
        if default is not None and not callable(default):
            raise SchemaError(f"Default for {cls.__name__}.{name} must be a callable")

        definition = cls.__schema__.declare(
            AttributeDefinition(
                name=name,
                type=type_,
                collection=collection,
                default=default,
                doc=doc,
                owner=cls,
                is_mapper=is_mapper,
                validatable=is_mapper and supports_validation(type_),
            )
        )
        setattr(cls, name, cls._field_for(definition))
        return definition

    @classmethod
    def define_alias(cls, new_name: str, existing_name: str) -> AttributeDefinition:
        """Make ``new_name`` read and write the same slot as ``existing_name``."""
        cls._check_name(new_name)
        definition = cls.__schema__.alias(new_name, existing_name)
        setattr(cls, new_name, AliasField(new_name, definition.name))
        return definition

    @classmethod
    def _field_for(cls, definition: AttributeDefinition) -> Any:
        """Descriptor installed for ``definition``. Mixins override this."""
        return AttributeField(definition.name)

    @classmethod
    def _check_name(cls, name: str) -> None:
        if not name.isidentifier() or name.startswith("_"):
            raise SchemaError(f"Invalid attribute name {name!r} on {cls.__name__}")
        existing = getattr(cls, name, _MISSING)
        if existing is not _MISSING and not isinstance(existing, (AttributeField, AliasField)):
            raise SchemaError(f"Attribute '{name}' would shadow {cls.__name__}.{name}")

    # --- construction and access ---

    def __init__(self, **values: Any) -> None:
        self._initialized = False
        self._values: dict[str, Any] = {}
        for definition in self.__schema__.all_attributes():
            if definition.default is not None:
                self.write_attribute(definition.name, definition.default())
            else:
                self._values[definition.name] = None
        for name, value in values.items():
            self.write_attribute(name, value)
        self._initialized = True

    def read_attribute(self, name: str) -> Any:
        definition = self.__schema__.resolve(name)
        return self._values.get(definition.name)

    def write_attribute(self, name: str, value: Any) -> None:
        definition = self.__schema__.resolve(name)
        self._values[definition.name] = _cast(definition, value)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or self.__schema__.has(name):
            object.__setattr__(self, name, value)
            return
        raise UnknownAttributeError(type(self).__name__, name)

    def __getattr__(self, name: str) -> Any:
        # Only reached when regular lookup fails.
        if name.startswith("_"):
            raise AttributeError(name)
        raise UnknownAttributeError(type(self).__name__, name)

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{name}={value!r}" for name, value in self._values.items() if value is not None
        )
        return f"{type(self).__name__}({fields})"

    # --- dict / JSON ---

    def to_dict(self, mode: str = "python") -> dict[str, Any]:
        """Serialize to a dict.

        Args:
            mode: ``"python"`` keeps native values (dates, decimals);
                ``"json"`` produces JSON-compatible values.
        """
        schema = self.__schema__
        result: dict[str, Any] = {}
        for definition in schema.all_attributes():
            value = self._values.get(definition.name)
            if value is None:
                if schema.render_none:
                    result[definition.name] = None
                continue
            if definition.collection:
                result[definition.name] = [_dump_one(definition, item, mode) for item in value]
            else:
                result[definition.name] = _dump_one(definition, value, mode)
        return result

    @classmethod
    def from_dict(cls: type[M], data: Mapping[str, Any]) -> M:
        """Build an instance by assigning every known key through its setter.

        Unknown keys are ignored.

        Raises:
            DeserializationError: If ``data`` is not a mapping or a
                collection value is not a list.
            TypeMismatchError: If a value cannot be cast.
        """
        if not isinstance(data, Mapping):
            raise DeserializationError(cls.__name__, f"expected a mapping, got {type(data).__name__}")

        instance = cls()
        schema = cls.__schema__
        for key, raw in data.items():
            if not schema.has(key):
                continue
            definition = schema.resolve(key)
            if raw is None:
                value = None
            elif definition.collection:
                if not isinstance(raw, list):
                    raise DeserializationError(
                        cls.__name__, f"'{key}' must be a list, got {type(raw).__name__}"
                    )
                value = [_load_one(definition, item) for item in raw]
            else:
                value = _load_one(definition, raw)
            setattr(instance, definition.name, value)
        return instance

    def to_json(self, **kwargs: Any) -> str:
        """Serialize to a JSON string; ``kwargs`` go to ``json.dumps``."""
        return json.dumps(self.to_dict(mode="json"), **kwargs)

    @classmethod
    def from_json(cls: type[M], text: str | bytes) -> M:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DeserializationError(cls.__name__, f"invalid JSON: {e}") from e
        return cls.from_dict(data)

    # --- XML ---

    def to_xml(self, root: str | None = None) -> str:
        """Serialize to an XML document, one element per attribute value."""
        tag = root or self.__schema__.xml_root or type(self).__name__
        return ET.tostring(self._to_element(tag), encoding="unicode")

    def _to_element(self, tag: str) -> ET.Element:
        schema = self.__schema__
        element = ET.Element(tag)
        for definition in schema.all_attributes():
            value = self._values.get(definition.name)
            if value is None:
                if schema.render_none:
                    ET.SubElement(element, definition.name, {_XSI_NIL: "true"})
                continue
            items = value if definition.collection else [value]
            for item in items:
                if item is None:
                    continue
                if definition.is_mapper:
                    element.append(item._to_element(definition.name))
                else:
                    child = ET.SubElement(element, definition.name)
                    child.text = _xml_text(definition.type.dump(item, mode="json"))
        return element

    @classmethod
    def from_xml(cls: type[M], text: str | bytes) -> M:
        try:
            element = ET.fromstring(text)
        except ET.ParseError as e:
            raise DeserializationError(cls.__name__, f"invalid XML: {e}") from e
        return cls._from_element(element)

    @classmethod
    def _from_element(cls: type[M], element: ET.Element) -> M:
        instance = cls()
        schema = cls.__schema__
        collections: dict[str, list[Any]] = {}
        for child in element:
            if not schema.has(child.tag):
                continue
            definition = schema.resolve(child.tag)
            if child.get(_XSI_NIL) == "true":
                collections.pop(definition.name, None)
                setattr(instance, definition.name, None)
                continue
            if definition.is_mapper:
                value = definition.type._from_element(child)
            elif child.text is None and definition.type is String:
                value = ""
            else:
                value = child.text
            if definition.collection:
                collections.setdefault(definition.name, []).append(value)
            else:
                setattr(instance, definition.name, value)
        for name, values in collections.items():
            setattr(instance, name, values)
        return instance
