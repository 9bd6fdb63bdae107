from __future__ import annotations

import os
from pathlib import Path

API_BASE_URL = os.getenv("INVENTORY_API_URL", "http://localhost:8080/api").strip()
API_FALLBACK_URLS = [
    s.strip() for s in os.getenv("INVENTORY_API_FALLBACK_URLS", "http://localhost:8080").split(",") if s.strip()
]
API_TIMEOUT = float(os.getenv("INVENTORY_API_TIMEOUT", "5"))

LOW_STOCK_THRESHOLD = int(os.getenv("LOW_STOCK_THRESHOLD", "10"))
CRITICAL_STOCK_THRESHOLD = int(os.getenv("CRITICAL_STOCK_THRESHOLD", "5"))

OUTPUT_DIR = Path(
    os.getenv("REPORT_OUTPUT_DIR", str(Path(__file__).resolve().parent.parent / "output"))
)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
