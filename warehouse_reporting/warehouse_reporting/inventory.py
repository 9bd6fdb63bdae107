from __future__ import annotations

from collections import OrderedDict
from typing import Any, Dict, List

from . import config
from .loader import coerce
from .models import InventoryRecord, StockAdjustment
from .normalizer import as_list, ids_match

ADJUSTMENT_TYPES = ("STOCK_IN", "STOCK_OUT")
STATUS_FILTERS = ("all", "ok", "low", "critical")
SORT_FIELDS = ("warehouse", "stock", "status")


def stock_status(level: int) -> str:
    if level < config.CRITICAL_STOCK_THRESHOLD:
        return "Critical"
    if level < config.LOW_STOCK_THRESHOLD:
        return "Low Stock"
    return "OK"


def _status_rank(level: int) -> int:
    if level < config.CRITICAL_STOCK_THRESHOLD:
        return 0
    if level < config.LOW_STOCK_THRESHOLD:
        return 1
    return 2


def dashboard_summary(inventory: Any) -> Dict[str, int]:
    records: List[InventoryRecord] = coerce(inventory, "inventory")
    low = sum(1 for r in records if r.stock_level < config.LOW_STOCK_THRESHOLD)
    critical = sum(1 for r in records if r.stock_level < config.CRITICAL_STOCK_THRESHOLD)
    return {
        "total_items": len(records),
        "total_stock": sum(r.stock_level for r in records),
        "low_stock": low,
        "critical_stock": critical,
        # low includes critical; the bands below do not overlap
        "ok": len(records) - low,
        "low_only": low - critical,
    }


def filter_inventory(inventory: Any, search: str = "", status: str = "all") -> List[InventoryRecord]:
    if status not in STATUS_FILTERS:
        raise ValueError(f"unknown stock filter {status!r}")
    needle = search.strip().lower()
    out = []
    for rec in coerce(inventory, "inventory"):
        if needle and needle not in rec.warehouse_name.lower():
            continue
        level = rec.stock_level
        if status == "low" and not (config.CRITICAL_STOCK_THRESHOLD <= level < config.LOW_STOCK_THRESHOLD):
            continue
        if status == "critical" and level >= config.CRITICAL_STOCK_THRESHOLD:
            continue
        if status == "ok" and level < config.LOW_STOCK_THRESHOLD:
            continue
        out.append(rec)
    return out


def sort_inventory(records: List[InventoryRecord], field: str = "warehouse", direction: str = "asc") -> List[InventoryRecord]:
    if field not in SORT_FIELDS:
        raise ValueError(f"unknown sort field {field!r}")
    if field == "warehouse":
        key = lambda r: r.warehouse_name
    elif field == "stock":
        key = lambda r: r.stock_level
    else:
        key = lambda r: _status_rank(r.stock_level)
    return sorted(records, key=key, reverse=direction == "desc")


def product_counts(warehouses: Any, products: Any) -> Dict[Any, int]:
    """Number of products referencing each warehouse, keyed by warehouse id."""
    counts: Dict[Any, int] = OrderedDict()
    product_list = coerce(products, "product")
    for wh in coerce(warehouses, "warehouse"):
        counts[wh.id] = sum(1 for p in product_list if ids_match(p.warehouse_id, wh.id))
    return counts


def build_adjustment(product_id: Any, warehouse_id: Any, quantity: Any, adjustment_type: str = "STOCK_IN") -> StockAdjustment:
    if adjustment_type not in ADJUSTMENT_TYPES:
        raise ValueError(f"adjustment_type must be one of {', '.join(ADJUSTMENT_TYPES)}")
    try:
        adjustment = StockAdjustment(
            product_id=int(product_id),
            warehouse_id=int(warehouse_id),
            adjustment_quantity=int(quantity),
            adjustment_type=adjustment_type,
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid stock adjustment: {exc}") from exc
    if adjustment.adjustment_quantity <= 0:
        raise ValueError("adjustment quantity must be positive")
    return adjustment


def page(records: List[Any], number: int = 1, per_page: int = 10) -> List[Any]:
    start = (max(1, number) - 1) * per_page
    return as_list(records)[start:start + per_page]
