"""Validation capability protocol.

Nested validation cascades into every mapper-typed attribute whose type
implements this interface.
"""

from __future__ import annotations

from typing import Any, Protocol


class Validatable(Protocol):
    """Objects that validate themselves into an error collection."""

    @property
    def errors(self) -> Any:
        """Error collection supporting ``import_error(error, attribute=...)``."""
        ...

    def validate(self) -> bool:
        """Run validations, populate ``errors`` and return True if valid."""
        ...


def supports_validation(tp: Any) -> bool:
    """Return True if instances of class ``tp`` satisfy Validatable."""
    return (
        isinstance(tp, type)
        and callable(getattr(tp, "validate", None))
        and hasattr(tp, "errors")
    )
