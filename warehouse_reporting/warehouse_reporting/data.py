from __future__ import annotations

from .models import InventoryRecord, Product, Supplier, Warehouse


def sample_warehouses() -> list[Warehouse]:
    return [
        Warehouse(id=1, name="Central DC", location="Rotterdam"),
        Warehouse(id=2, name="North Hub", location="Groningen"),
    ]


def sample_suppliers() -> list[Supplier]:
    return [
        Supplier(
            id=10,
            name="Acme Fasteners",
            contact_person="Dana Smit",
            email="orders@acme-fasteners.example",
            phone="+31 10 555 0100",
        ),
        Supplier(id=11, name="Polder Packaging", email="sales@polderpack.example"),
    ]


def sample_products() -> list[Product]:
    return [
        Product(id=100, name="Hex bolt M8", sku="HB-M8", description="Zinc plated, box of 100",
                min_stock_level=20, price=4.5, warehouse_id=1, supplier_id=10),
        Product(id=101, name="Washer M8", sku="WA-M8", min_stock_level=50, price=1.2,
                warehouse_id=1, supplier_id=10),
        Product(id=102, name="Carton 40x30x20", sku="CT-403020", description="Double wall, bundle of 25",
                min_stock_level=10, price=18.0, warehouse_id=1, supplier_id=11),
        Product(id=103, name="Pallet wrap", sku="PW-500", min_stock_level=0, warehouse_id=1),
        Product(id=104, name="Hex nut M8", sku="HN-M8", min_stock_level=30, price=2.1,
                warehouse_id=2, supplier_id=10),
    ]


def sample_inventory() -> list[InventoryRecord]:
    return [
        InventoryRecord(1, product_id=100, warehouse_id=1, stock_level=120, warehouse_name="Central DC"),
        InventoryRecord(2, product_id=101, warehouse_id=1, stock_level=35, warehouse_name="Central DC"),
        InventoryRecord(3, product_id=102, warehouse_id=1, stock_level=4, warehouse_name="Central DC"),
        InventoryRecord(4, product_id=104, warehouse_id=2, stock_level=8, warehouse_name="North Hub"),
    ]
