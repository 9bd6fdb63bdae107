from __future__ import annotations

import csv
import io
import json
from collections.abc import Mapping
from typing import Any, Callable, Dict, List

from .models import InventoryRecord, Product, StockMovement, Supplier, Warehouse
from .normalizer import as_float, as_int, as_list, normalize, resolve


def _warehouse_label(item: Mapping, entity: str) -> str:
    name = resolve(item, entity, "warehouse_name")
    if name:
        return str(name)
    warehouse_id = resolve(item, entity, "warehouse_id")
    if warehouse_id is not None:
        return f"Warehouse {warehouse_id}"
    return "Unknown Warehouse"


def to_warehouse(item: Mapping) -> Warehouse:
    return Warehouse(
        id=resolve(item, "warehouse", "id"),
        name=str(resolve(item, "warehouse", "name")),
        location=str(resolve(item, "warehouse", "location")),
    )


def to_supplier(item: Mapping) -> Supplier:
    return Supplier(
        id=resolve(item, "supplier", "id"),
        name=str(resolve(item, "supplier", "name")),
        contact_person=resolve(item, "supplier", "contact_person"),
        email=resolve(item, "supplier", "email"),
        phone=resolve(item, "supplier", "phone"),
    )


def to_product(item: Mapping) -> Product:
    return Product(
        id=resolve(item, "product", "id"),
        name=str(resolve(item, "product", "name")),
        sku=str(resolve(item, "product", "sku")),
        description=resolve(item, "product", "description"),
        min_stock_level=as_int(resolve(item, "product", "min_stock_level")),
        price=as_float(resolve(item, "product", "price")),
        warehouse_id=resolve(item, "product", "warehouse_id"),
        supplier_id=resolve(item, "product", "supplier_id"),
    )


def to_inventory_record(item: Mapping) -> InventoryRecord:
    return InventoryRecord(
        id=resolve(item, "inventory", "id"),
        product_id=resolve(item, "inventory", "product_id"),
        warehouse_id=resolve(item, "inventory", "warehouse_id"),
        stock_level=as_int(resolve(item, "inventory", "stock_level")),
        warehouse_name=_warehouse_label(item, "inventory"),
    )


def to_movement(item: Mapping) -> StockMovement:
    return StockMovement(
        id=resolve(item, "movement", "id"),
        timestamp=resolve(item, "movement", "timestamp"),
        warehouse_name=_warehouse_label(item, "movement"),
        adjustment_type=str(resolve(item, "movement", "adjustment_type")),
        quantity=as_int(resolve(item, "movement", "quantity")),
    )


CONVERTERS: Dict[str, tuple[type, Callable[[Mapping], Any]]] = {
    "warehouse": (Warehouse, to_warehouse),
    "supplier": (Supplier, to_supplier),
    "product": (Product, to_product),
    "inventory": (InventoryRecord, to_inventory_record),
    "movement": (StockMovement, to_movement),
}


def coerce(records: Any, entity: str) -> List[Any]:
    """Typed entities for ``records``; typed items pass through, other
    non-mapping items are dropped."""
    kind, convert = CONVERTERS[entity]
    out = []
    for item in as_list(records):
        if isinstance(item, kind):
            out.append(item)
        elif isinstance(item, Mapping):
            out.append(convert(item))
    return out


def extract(raw: Any, entity: str) -> List[Any]:
    """Unwrap an API response body and convert its records."""
    return coerce(normalize(raw), entity)


def _parse(data: bytes | None) -> Any:
    if not data:
        return None
    return json.loads(data.decode("utf-8"))


def load_warehouses(data: bytes | None) -> List[Warehouse]:
    return extract(_parse(data), "warehouse")


def load_suppliers(data: bytes | None) -> List[Supplier]:
    return extract(_parse(data), "supplier")


def load_products(data: bytes | None) -> List[Product]:
    return extract(_parse(data), "product")


def load_inventory(data: bytes | None) -> List[InventoryRecord]:
    if not data:
        return []
    text = data.decode("utf-8")
    if text.strip()[:1] in ("[", "{"):
        return extract(json.loads(text), "inventory")
    reader = csv.DictReader(io.StringIO(text))
    return [to_inventory_record(row) for row in reader]
