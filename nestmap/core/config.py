"""Per-schema configuration.

SchemaConfig is a Pydantic model holding the options a mapper class
accepts as class keywords::

    class Payment(Mapper, nested_attr_name_separator="/", render_none=True):
        ...

Unset options (``None``) are inherited from the parent class's schema.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from nestmap.core.exceptions import SchemaError

DEFAULT_SEPARATOR = "."


class SchemaConfig(BaseModel):
    """Options attached to a single schema level."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    nested_attr_name_separator: str | None = None
    render_none: bool | None = None
    xml_root: str | None = None


def load_config(owner: str, options: dict[str, Any]) -> SchemaConfig:
    """Validate class keyword options into a SchemaConfig.

    Raises:
        SchemaError: If an option is unknown or has the wrong type.
    """
    try:
        return SchemaConfig(**options)
    except ValidationError as e:
        raise SchemaError(f"Invalid options for {owner}: {e}") from e
