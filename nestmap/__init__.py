"""nestmap - typed data mappers with a nested builder DSL."""

from __future__ import annotations

from nestmap.core.config import SchemaConfig
from nestmap.core.exceptions import (
    DeserializationError,
    DuplicateAttributeError,
    MappingError,
    NestMapError,
    SchemaError,
    TypeMismatchError,
    UnknownAttributeError,
)
from nestmap.core.schema import AttributeDefinition, ObjectSchema
from nestmap.core.types import (
    Boolean,
    Date,
    Decimal,
    Float,
    Integer,
    PrimitiveType,
    String,
    Time,
    Value,
)
from nestmap.mapping.assigned import AssignedAttributes, AssignedValue
from nestmap.mapping.builder import Builder, build
from nestmap.mapping.mapper import Mapper, alias, attribute, schema_of
from nestmap.mapping.reflection import AttributeInfo, describe
from nestmap.mapping.validation import (
    ErrorDetail,
    Errors,
    NestedValidations,
    Validations,
    validates,
)

__all__ = [
    # Mapping
    "Mapper",
    "attribute",
    "alias",
    "schema_of",
    # Builder
    "Builder",
    "build",
    # Assigned attributes
    "AssignedAttributes",
    "AssignedValue",
    # Validation
    "Validations",
    "NestedValidations",
    "validates",
    "Errors",
    "ErrorDetail",
    # Reflection
    "AttributeInfo",
    "describe",
    # Schema
    "ObjectSchema",
    "AttributeDefinition",
    "SchemaConfig",
    # Types
    "PrimitiveType",
    "String",
    "Integer",
    "Float",
    "Boolean",
    "Date",
    "Time",
    "Decimal",
    "Value",
    # Exceptions
    "NestMapError",
    "SchemaError",
    "DuplicateAttributeError",
    "UnknownAttributeError",
    "MappingError",
    "TypeMismatchError",
    "DeserializationError",
]
