"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def transaction_payload() -> dict[str, Any]:
    """A nested transaction as produced by ``to_dict``."""
    return {
        "cvv_code": "321",
        "amount": {"value": 45.0, "currency": "USD"},
    }


@pytest.fixture
def order_payload() -> dict[str, Any]:
    """An order with a collection of nested lines."""
    return {
        "id": 7,
        "note": "gift wrap",
        "lines": [
            {"sku": "A-1", "quantity": 2},
            {"sku": "B-2", "quantity": 1},
        ],
    }
