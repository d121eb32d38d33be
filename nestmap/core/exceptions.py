"""nestmap exception hierarchy.

Schema errors are programming mistakes raised at declaration or access
time. Mapping errors are raised while casting or (de)serializing values.
Third-party exceptions are always wrapped, never exposed directly.
"""

from __future__ import annotations

from typing import Any


class NestMapError(Exception):
    """Base exception for all nestmap errors."""


# --- Schema ---


class SchemaError(NestMapError):
    """Base for schema declaration and lookup errors."""


class DuplicateAttributeError(SchemaError):
    """Raised when a name is declared twice at the same schema level."""

    def __init__(self, owner: str, name: str) -> None:
        self.owner = owner
        self.name = name
        super().__init__(f"Attribute '{name}' is already declared on {owner}")


class UnknownAttributeError(SchemaError, AttributeError):
    """Raised when an attribute or alias references an undeclared name."""

    def __init__(self, owner: str, name: str) -> None:
        self.owner = owner
        self.name = name
        super().__init__(f"{owner} has no attribute '{name}'")


# --- Mapping ---


class MappingError(NestMapError):
    """Base for value casting and serialization errors."""


class TypeMismatchError(MappingError):
    """Raised when a value cannot be cast to an attribute's declared type."""

    def __init__(self, attribute: str, expected: str, value: Any) -> None:
        self.attribute = attribute
        self.expected = expected
        self.value = value
        super().__init__(
            f"Cannot assign {type(value).__name__} value {value!r} "
            f"to '{attribute}' (expected {expected})"
        )


class DeserializationError(MappingError):
    """Raised when dict, JSON or XML input cannot be read."""

    def __init__(self, target_class: str, detail: str) -> None:
        self.target_class = target_class
        super().__init__(f"Cannot deserialize {target_class}: {detail}")
