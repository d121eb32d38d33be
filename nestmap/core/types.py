"""Primitive attribute types.

Each primitive wraps a pydantic ``TypeAdapter`` that performs lax coercion
on assignment (``"45"`` -> ``45.0`` for ``Float``) and dumps values back to
Python or JSON-compatible form.
"""

from __future__ import annotations

import datetime
import decimal
from collections.abc import Callable
from typing import Annotated, Any

from pydantic import BeforeValidator, TypeAdapter, ValidationError


class PrimitiveType:
    """A scalar attribute type backed by a pydantic adapter.

    Args:
        name: Short type name used in messages and reflection.
        python_type: The Python type values are coerced to.
        before: Optional conversion run before pydantic validates.
    """

    def __init__(
        self,
        name: str,
        python_type: Any,
        before: Callable[[Any], Any] | None = None,
    ) -> None:
        self.name = name
        self.python_type = python_type
        target = Annotated[python_type, BeforeValidator(before)] if before else python_type
        self._adapter: TypeAdapter[Any] = TypeAdapter(target)

    def cast(self, value: Any) -> Any:
        """Coerce ``value`` to this type. ``None`` passes through.

        Raises:
            ValueError: If pydantic rejects the value.
        """
        if value is None:
            return None
        try:
            return self._adapter.validate_python(value)
        except ValidationError as e:
            raise ValueError(e.errors()[0]["msg"]) from e

    def dump(self, value: Any, mode: str = "python") -> Any:
        """Dump a cast value; ``mode="json"`` yields JSON-compatible output."""
        if value is None:
            return None
        return self._adapter.dump_python(value, mode=mode)

    def __repr__(self) -> str:
        return f"<PrimitiveType {self.name}>"


def _scalar_to_str(value: Any) -> Any:
    # Scalars are rendered as text; anything else is left for pydantic to reject.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, decimal.Decimal)):
        return str(value)
    return value


String = PrimitiveType("string", str, before=_scalar_to_str)
Integer = PrimitiveType("integer", int)
Float = PrimitiveType("float", float)
Boolean = PrimitiveType("boolean", bool)
Date = PrimitiveType("date", datetime.date)
Time = PrimitiveType("time", datetime.datetime)
Decimal = PrimitiveType("decimal", decimal.Decimal)
# Opaque values are stored as-is.
Value = PrimitiveType("value", Any)

PRIMITIVE_TYPES: tuple[PrimitiveType, ...] = (
    String,
    Integer,
    Float,
    Boolean,
    Date,
    Time,
    Decimal,
    Value,
)
