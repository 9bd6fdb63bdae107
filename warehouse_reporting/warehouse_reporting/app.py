from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response

from . import data, inventory, loader
from .client import ApiError, InventoryApiClient, Session, SessionExpired
from .exporters import content_disposition, report_to_dict, to_csv, to_pdf
from .models import Report
from .report import ReportTracker, aggregate

logger = logging.getLogger(__name__)

app = FastAPI(title="Warehouse Reporting", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Snapshot of the four report inputs; replaced wholesale on every run/refresh
current_data: Dict[str, List] = {}
tracker = ReportTracker()


def _reset_state() -> None:
    _set_state(
        warehouses=data.sample_warehouses(),
        products=data.sample_products(),
        inventory=data.sample_inventory(),
        suppliers=data.sample_suppliers(),
    )


def _set_state(warehouses: List, products: List, inventory: List, suppliers: List) -> None:
    global current_data
    current_data = {
        "warehouses": warehouses,
        "products": products,
        "inventory": inventory,
        "suppliers": suppliers,
    }


_reset_state()


def _read_bytes(file: Optional[UploadFile]) -> Optional[bytes]:
    if file is None:
        return None
    return file.file.read()


def _client(request: Request) -> InventoryApiClient:
    auth = request.headers.get("Authorization", "")
    token = auth[7:].strip() if auth.lower().startswith("bearer ") else None
    return InventoryApiClient(session=Session(token=token))


def _api_error(exc: ApiError) -> JSONResponse:
    if isinstance(exc, SessionExpired):
        return JSONResponse({"error": "Session expired, please log in again"}, status_code=401)
    status = exc.status_code if exc.status_code and exc.status_code >= 400 else 502
    return JSONResponse({"error": str(exc)}, status_code=status)


class StaleReport(Exception):
    pass


@app.exception_handler(StaleReport)
async def stale_report(request: Request, exc: StaleReport):
    return JSONResponse(
        {"error": f"Report for warehouse {exc} was superseded by a newer selection"}, status_code=409
    )


def _build_report(warehouse_id: str) -> Optional[Report]:
    ticket = tracker.begin(warehouse_id)
    report = aggregate(
        current_data["warehouses"],
        current_data["products"],
        current_data["inventory"],
        current_data["suppliers"],
        warehouse_id,
    )
    if not tracker.commit(ticket, report):
        raise StaleReport(warehouse_id)
    return report


def _json_body(body: Any) -> Optional[JSONResponse]:
    if not isinstance(body, dict):
        return JSONResponse({"error": "Request body must be a JSON object"}, status_code=400)
    return None


def _not_found(warehouse_id: str) -> JSONResponse:
    return JSONResponse({"error": f"Warehouse {warehouse_id} not found"}, status_code=404)


HTML_PAGE = """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Warehouse Reports</title>
  <style>
    body { margin: 0; font-family: 'Segoe UI', sans-serif; background: #0f172a; color: #e5e7eb; }
    .container { max-width: 1100px; margin: 32px auto; padding: 0 24px; }
    .panel { background: #0b1224; border: 1px solid #1f2937; border-radius: 14px; padding: 18px; margin-top: 16px; }
    select, button { padding: 8px 12px; border-radius: 10px; border: 1px solid #1f2937; }
    button { background: #f97316; color: #0f172a; font-weight: 700; cursor: pointer; border: none; }
    table { width: 100%; border-collapse: collapse; margin-top: 8px; }
    th, td { border-bottom: 1px solid #1f2937; padding: 6px; text-align: left; font-size: 13px; }
    .low { color: #facc15; }
  </style>
</head>
<body>
  <div class="container">
    <h1>Warehouse Reports</h1>
    <div class="panel">
      <select id="warehouse-select"><option value="">Choose a warehouse</option></select>
      <button type="button" onclick="download('csv')">Export to CSV</button>
      <button type="button" onclick="download('pdf')">Export to PDF</button>
    </div>
    <div id="report" class="panel">Select a warehouse to generate a report.</div>
  </div>
  <script>
    let latest = 0;

    async function loadWarehouses() {
      const res = await fetch('/api/state');
      const json = await res.json();
      const sel = document.getElementById('warehouse-select');
      json.warehouses.forEach(w => {
        const opt = document.createElement('option');
        opt.value = w.id;
        opt.textContent = `${w.name} - ${w.location}`;
        sel.appendChild(opt);
      });
    }

    async function loadReport(id) {
      const panel = document.getElementById('report');
      if (!id) { panel.textContent = 'Select a warehouse to generate a report.'; return; }
      const mine = ++latest;
      const res = await fetch(`/api/warehouses/${encodeURIComponent(id)}/report`);
      if (mine !== latest) return;
      if (!res.ok) { panel.textContent = 'No report for this warehouse.'; return; }
      const r = await res.json();
      const groups = r.groups.map(g => `
        <h4>${g.supplier.name}</h4>
        <table><tr><th>Product</th><th>SKU</th><th>Stock</th><th>Min</th><th>Status</th></tr>
        ${g.products.map(p => `<tr class="${p.status === 'OK' ? '' : 'low'}"><td>${p.name}</td><td>${p.sku}</td>
          <td>${p.current_stock}</td><td>${p.min_stock_level}</td><td>${p.status}</td></tr>`).join('')}
        </table>`).join('');
      panel.innerHTML = `
        <h3>${r.warehouse.name} (${r.warehouse.location})</h3>
        <p>Products ${r.total_products} | Low stock ${r.low_stock_count} | Value ${r.total_stock_value.toFixed(2)}</p>
        ${groups}`;
    }

    function download(ext) {
      const id = document.getElementById('warehouse-select').value;
      if (id) window.open(`/api/warehouses/${encodeURIComponent(id)}/report.${ext}`, '_blank');
    }

    document.addEventListener('change', (ev) => {
      if (ev.target && ev.target.id === 'warehouse-select') loadReport(ev.target.value);
    });
    window.addEventListener('DOMContentLoaded', loadWarehouses);
  </script>
</body>
</html>
"""


@app.get("/", response_class=HTMLResponse)
async def index():
    return HTML_PAGE


# Handlers that call the backend are plain functions; FastAPI runs them in
# its threadpool.
@app.post("/api/login")
def api_login(body: Any = Body(default=None)):
    error = _json_body(body)
    if error is not None:
        return error
    client = InventoryApiClient(session=Session())
    try:
        session = client.login(body.get("email", ""), body.get("password", ""))
    except ApiError as exc:
        return _api_error(exc)
    return {"token": session.token, "user": session.user}


@app.post("/api/run")
async def run_report_inputs(
    warehouses: UploadFile | None = File(default=None),
    products: UploadFile | None = File(default=None),
    inventory: UploadFile | None = File(default=None),
    suppliers: UploadFile | None = File(default=None),
):
    # Load user-provided or sample data
    _set_state(
        warehouses=loader.load_warehouses(_read_bytes(warehouses)) or data.sample_warehouses(),
        products=loader.load_products(_read_bytes(products)) or data.sample_products(),
        inventory=loader.load_inventory(_read_bytes(inventory)) or data.sample_inventory(),
        suppliers=loader.load_suppliers(_read_bytes(suppliers)) or data.sample_suppliers(),
    )
    return _state()


@app.post("/api/refresh")
def refresh(request: Request):
    try:
        fetched = _client(request).fetch_report_inputs()
    except ApiError as exc:
        return _api_error(exc)
    _set_state(
        warehouses=fetched["warehouse"],
        products=fetched["product"],
        inventory=fetched["inventory"],
        suppliers=fetched["supplier"],
    )
    logger.info("refreshed report inputs: %s", {k: len(v) for k, v in current_data.items()})
    return _state()


def _state() -> dict:
    return {
        "warehouses": [
            {"id": w.id, "name": w.name, "location": w.location}
            for w in loader.coerce(current_data["warehouses"], "warehouse")
        ],
        "counts": {key: len(value) for key, value in current_data.items()},
    }


@app.get("/api/state")
async def api_state():
    return _state()


@app.get("/api/warehouses/product-counts")
async def warehouse_product_counts():
    counts = inventory.product_counts(current_data["warehouses"], current_data["products"])
    return [{"warehouse_id": key, "products": value} for key, value in counts.items()]


@app.get("/api/warehouses/{warehouse_id}/report")
def warehouse_report(warehouse_id: str):
    report = _build_report(warehouse_id)
    if report is None:
        return _not_found(warehouse_id)
    return report_to_dict(report)


@app.get("/api/warehouses/{warehouse_id}/report.csv")
def warehouse_report_csv(warehouse_id: str):
    report = _build_report(warehouse_id)
    if report is None:
        return _not_found(warehouse_id)
    return Response(
        content=to_csv(report),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": content_disposition(report, "csv")},
    )


@app.get("/api/warehouses/{warehouse_id}/report.pdf")
def warehouse_report_pdf(warehouse_id: str):
    report = _build_report(warehouse_id)
    if report is None:
        return _not_found(warehouse_id)
    return Response(
        content=to_pdf(report),
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(report, "pdf")},
    )


@app.get("/api/reports/latest")
async def latest_report():
    if tracker.report is None:
        return JSONResponse({"error": "No report for the current selection"}, status_code=404)
    return {"selection": tracker.selection, "report": report_to_dict(tracker.report)}


@app.get("/api/dashboard")
async def dashboard():
    summary = inventory.dashboard_summary(current_data["inventory"])
    summary["total_products"] = len(current_data["products"])
    summary["total_warehouses"] = len(current_data["warehouses"])
    return summary


@app.get("/api/inventory")
async def inventory_rows(
    search: str = "",
    status: str = "all",
    sort: str = "warehouse",
    direction: str = "asc",
    page: int = 1,
    per_page: int = 10,
):
    try:
        rows = inventory.filter_inventory(current_data["inventory"], search=search, status=status)
        rows = inventory.sort_inventory(rows, field=sort, direction=direction)
    except ValueError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    return {
        "total": len(rows),
        "page": page,
        "items": [
            {
                "id": rec.id,
                "product_id": rec.product_id,
                "warehouse": rec.warehouse_name,
                "stock_level": rec.stock_level,
                "status": inventory.stock_status(rec.stock_level),
            }
            for rec in inventory.page(rows, page, per_page)
        ],
    }


@app.get("/api/inventory/history")
def inventory_history(request: Request):
    try:
        movements = _client(request).stock_history()
    except ApiError as exc:
        return _api_error(exc)
    return [vars(m) for m in movements]


@app.post("/api/inventory/adjust")
def adjust_stock(request: Request, body: Any = Body(default=None)):
    error = _json_body(body)
    if error is not None:
        return error
    try:
        adjustment = inventory.build_adjustment(
            body.get("product_id"),
            body.get("warehouse_id"),
            body.get("adjustment_quantity"),
            body.get("adjustment_type", "STOCK_IN"),
        )
    except ValueError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    try:
        result = _client(request).adjust_stock(adjustment)
    except ApiError as exc:
        return _api_error(exc)
    return {"adjustment": vars(adjustment), "result": result}
