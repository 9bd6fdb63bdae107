"""Tolerant reading of backend payloads.

The inventory API has shipped several list envelopes over time (bare
arrays, ``{"content": [...]}`` pages, ``{"data": [...]}`` wrappers and
ad hoc keys such as ``{"products": [...]}``) and several spellings of the
same attribute. Everything that reads backend data goes through
``normalize`` for the envelope and ``resolve`` for the attributes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, NamedTuple, Tuple

logger = logging.getLogger(__name__)

_MISSING = object()


class Field(NamedTuple):
    candidates: Tuple[str, ...]  # dotted keys descend into nested objects
    default: Any = None


FIELDS: Dict[str, Dict[str, Field]] = {
    "warehouse": {
        "id": Field(("id", "warehouseId", "warehouse_id")),
        "name": Field(("name", "warehouseName", "Name"), "Unknown Warehouse"),
        "location": Field(("location", "address"), ""),
    },
    "supplier": {
        "id": Field(("id", "supplierId", "supplier_id")),
        "name": Field(("name", "supplierName", "Name"), "Unknown Supplier"),
        "contact_person": Field(("contactPerson", "contact_person")),
        "email": Field(("email",)),
        "phone": Field(("phone",)),
    },
    "product": {
        "id": Field(("id", "productId", "product_id")),
        "name": Field(("name", "productName"), "Unnamed Product"),
        "sku": Field(("sku", "SKU"), ""),
        "description": Field(("description",)),
        "min_stock_level": Field(("minStockLevel", "min_stock_level"), 0),
        "price": Field(("price", "unitPrice", "unit_price")),
        "warehouse_id": Field(("warehouse.id", "warehouseId", "warehouse_id")),
        "supplier_id": Field(("supplier.id", "supplierId", "supplier_id")),
    },
    "inventory": {
        "id": Field(("id",)),
        "product_id": Field(("product.id", "productId", "product_id")),
        "warehouse_id": Field(("warehouse.id", "warehouseId", "warehouse_id")),
        "stock_level": Field(("stockLevel", "stock_level", "quantity"), 0),
        "warehouse_name": Field(("warehouse.name", "warehouseName", "Warehouse.Name")),
    },
    "movement": {
        "id": Field(("id",)),
        "timestamp": Field(("timestamp", "createdAt", "created_at")),
        "warehouse_id": Field(("warehouse.id", "warehouseId", "warehouse_id")),
        "warehouse_name": Field(("warehouse.name", "warehouseName", "Warehouse.Name")),
        "adjustment_type": Field(("adjustmentType", "adjustment_type"), "UNKNOWN"),
        "quantity": Field(("adjustmentQuantity", "adjustment_quantity", "quantity"), 0),
    },
}


def normalize(raw: Any) -> List[Any]:
    """Return the record list carried by ``raw``, or ``[]``.

    Checked in order: a bare list, ``content``, ``data``, then the first
    list-valued field in declaration order.
    """
    if isinstance(raw, list):
        return raw
    if isinstance(raw, Mapping):
        for key in ("content", "data"):
            if isinstance(raw.get(key), list):
                return raw[key]
        for value in raw.values():
            if isinstance(value, list):
                return value
    logger.debug("no record list in payload of type %s", type(raw).__name__)
    return []


def as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _lookup(record: Any, path: str) -> Any:
    current = record
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def resolve(record: Any, entity: str, name: str) -> Any:
    entry = FIELDS[entity][name]
    for candidate in entry.candidates:
        value = _lookup(record, candidate)
        if value is not _MISSING and value is not None:
            return value
    return entry.default


def as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return default


def as_float(value: Any, default: float | None = None) -> float | None:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


def ids_match(left: Any, right: Any) -> bool:
    """Compare identifiers that may arrive as numbers or numeric strings."""
    if left is None or right is None:
        return False
    if left == right:
        return True
    a, b = str(left).strip(), str(right).strip()
    try:
        return float(a) == float(b)
    except ValueError:
        return a == b
