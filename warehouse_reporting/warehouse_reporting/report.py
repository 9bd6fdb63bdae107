from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Dict, Hashable, List, Optional

from .loader import coerce
from .models import (
    EnrichedProduct,
    InventoryRecord,
    NO_SUPPLIER_KEY,
    NO_SUPPLIER_NAME,
    Product,
    Report,
    Supplier,
    SupplierGroup,
    Warehouse,
)
from .normalizer import ids_match

logger = logging.getLogger(__name__)


def _find(items: List[Any], ident: Any) -> Optional[Any]:
    for item in items:
        if ids_match(item.id, ident):
            return item
    return None


def _stock_for(product: Product, inventory: List[InventoryRecord]) -> int:
    # first match wins when the backend holds duplicates
    for rec in inventory:
        if ids_match(rec.product_id, product.id):
            return rec.stock_level
    return 0


def _group_key(supplier: Optional[Supplier]) -> Hashable:
    if supplier is None or supplier.id is None:
        return NO_SUPPLIER_KEY
    return supplier.id


def aggregate(
    warehouses: Any,
    products: Any,
    inventory: Any,
    suppliers: Any,
    selected_warehouse_id: Any,
    now: Optional[datetime] = None,
) -> Optional[Report]:
    """Build the stock report for one warehouse.

    Inputs may be typed entities or raw API records; anything that is not a
    list is treated as an empty collection. Returns ``None`` when the
    selected warehouse is not among ``warehouses``.
    """
    warehouse_list: List[Warehouse] = coerce(warehouses, "warehouse")
    warehouse = _find(warehouse_list, selected_warehouse_id)
    if warehouse is None:
        logger.debug("warehouse %r not found among %d", selected_warehouse_id, len(warehouse_list))
        return None

    product_list: List[Product] = coerce(products, "product")
    supplier_list: List[Supplier] = coerce(suppliers, "supplier")
    stocked = [
        rec
        for rec in coerce(inventory, "inventory")
        if ids_match(rec.warehouse_id, selected_warehouse_id)
    ]

    enriched: List[EnrichedProduct] = []
    for product in product_list:
        if not ids_match(product.warehouse_id, selected_warehouse_id):
            continue
        supplier = _find(supplier_list, product.supplier_id) if product.supplier_id is not None else None
        enriched.append(
            EnrichedProduct(
                product=product,
                current_stock=_stock_for(product, stocked),
                supplier=supplier,
            )
        )

    groups: Dict[Hashable, SupplierGroup] = {}
    for item in enriched:
        key = _group_key(item.supplier)
        group = groups.get(key)
        if group is None:
            label = item.supplier if key != NO_SUPPLIER_KEY else Supplier(id=None, name=NO_SUPPLIER_NAME)
            group = groups[key] = SupplierGroup(supplier=label)
        group.products.append(item)

    return Report(
        warehouse=warehouse,
        groups=groups,
        total_products=len(enriched),
        total_stock_value=sum(item.stock_value for item in enriched),
        low_stock_count=sum(1 for item in enriched if item.is_low_stock),
        generated_at=now or datetime.now(),
    )


class ReportTracker:
    """Keeps the report of the most recently requested selection.

    ``begin`` hands out a ticket per selection change; ``commit`` stores a
    finished report only if no newer selection was begun since, so slow
    runs that finish late cannot overwrite a newer result.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ticket = 0
        self.selection: Any = None
        self.report: Optional[Report] = None

    def begin(self, selection: Any) -> int:
        with self._lock:
            self._ticket += 1
            self.selection = selection
            return self._ticket

    def commit(self, ticket: int, report: Optional[Report]) -> bool:
        with self._lock:
            if ticket != self._ticket:
                logger.debug("discarding stale report for ticket %d (latest %d)", ticket, self._ticket)
                return False
            self.report = report
            return True
