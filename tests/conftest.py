"""Shared fixtures for warehouse_reporting tests."""

from datetime import datetime
from typing import Any, Dict, List

import pytest

from warehouse_reporting import app as app_module


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 1, 9, 30, 0)


@pytest.fixture
def raw_inputs() -> Dict[str, List[Dict[str, Any]]]:
    """Backend-shaped records with nested references, as the API returns them."""
    return {
        "warehouses": [
            {"id": 5, "name": "W1", "location": "Delft"},
            {"id": 6, "name": "W2", "location": "Leiden"},
        ],
        "products": [
            {"id": 1, "name": "Bolt", "sku": "B-1", "minStockLevel": 10, "price": 2.5,
             "warehouse": {"id": 5}, "supplier": {"id": 30}},
            {"id": 2, "name": "Nut", "sku": "N-1", "minStockLevel": 0, "price": 1.0,
             "warehouse": {"id": 5}},
            {"id": 3, "name": "Washer", "sku": "W-1", "minStockLevel": 4,
             "warehouse": {"id": 5}, "supplier": {"id": 30}},
            {"id": 4, "name": "Elsewhere", "sku": "E-1", "warehouse": {"id": 6}},
        ],
        "inventory": [
            {"id": 1, "product": {"id": 1}, "warehouse": {"id": 5}, "stockLevel": 3},
            {"id": 2, "product": {"id": 2}, "warehouse": {"id": 5}, "stock_level": 40},
            {"id": 3, "product": {"id": 3}, "warehouse": {"id": 5}, "quantity": 12},
            {"id": 4, "product": {"id": 1}, "warehouse": {"id": 6}, "stockLevel": 99},
        ],
        "suppliers": [
            {"id": 30, "name": "Acme, Inc.", "contactPerson": "Jo", "email": "jo@acme.example"},
        ],
    }


@pytest.fixture
def reset_app_state():
    app_module._reset_state()
    yield
    app_module._reset_state()
