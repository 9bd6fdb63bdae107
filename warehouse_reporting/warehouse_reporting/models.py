from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

NO_SUPPLIER_KEY = "no-supplier"
NO_SUPPLIER_NAME = "No Supplier"

LOW_STOCK_LABEL = "LOW STOCK"
OK_LABEL = "OK"


@dataclass
class Warehouse:
    id: Any
    name: str
    location: str = ""


@dataclass
class Supplier:
    id: Any
    name: str
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass
class Product:
    id: Any
    name: str
    sku: str = ""
    description: Optional[str] = None
    min_stock_level: int = 0
    price: Optional[float] = None
    warehouse_id: Any = None  # reference to Warehouse.id
    supplier_id: Any = None  # reference to Supplier.id


@dataclass
class InventoryRecord:
    id: Any
    product_id: Any
    warehouse_id: Any
    stock_level: int = 0
    warehouse_name: str = "Unknown Warehouse"


@dataclass
class StockMovement:
    id: Any
    timestamp: Optional[str]
    warehouse_name: str
    adjustment_type: str
    quantity: int


@dataclass
class StockAdjustment:
    product_id: int
    warehouse_id: int
    adjustment_quantity: int
    adjustment_type: str = "STOCK_IN"


@dataclass
class EnrichedProduct:
    product: Product
    current_stock: int = 0
    supplier: Optional[Supplier] = None

    @property
    def is_low_stock(self) -> bool:
        minimum = self.product.min_stock_level or 0
        return minimum > 0 and self.current_stock <= minimum

    @property
    def status(self) -> str:
        return LOW_STOCK_LABEL if self.is_low_stock else OK_LABEL

    @property
    def stock_value(self) -> float:
        return float(self.product.price or 0) * (self.current_stock or 0)


@dataclass
class SupplierGroup:
    supplier: Supplier
    products: List[EnrichedProduct] = field(default_factory=list)


@dataclass
class Report:
    warehouse: Warehouse
    groups: Dict[Any, SupplierGroup]
    total_products: int
    total_stock_value: float
    low_stock_count: int
    generated_at: datetime

    def rows(self) -> List[EnrichedProduct]:
        return [p for group in self.groups.values() for p in group.products]
