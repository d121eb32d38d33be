"""Mapping layer - typed attributes, builders, tracking and validation."""

from __future__ import annotations

from nestmap.mapping.assigned import AssignedAttributes, AssignedValue
from nestmap.mapping.builder import Builder, NestedAccessor, build
from nestmap.mapping.mapper import Mapper, alias, attribute, schema_of
from nestmap.mapping.protocol import Validatable
from nestmap.mapping.reflection import AttributeInfo, describe
from nestmap.mapping.validation import (
    ErrorDetail,
    Errors,
    NestedValidations,
    Validations,
    validates,
)

__all__ = [
    "Mapper",
    "attribute",
    "alias",
    "schema_of",
    "Builder",
    "NestedAccessor",
    "build",
    "AssignedAttributes",
    "AssignedValue",
    "Validations",
    "NestedValidations",
    "Validatable",
    "validates",
    "Errors",
    "ErrorDetail",
    "AttributeInfo",
    "describe",
]
