from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from . import config, data
from .client import ApiError, InventoryApiClient
from .exporters import report_filename, report_to_dict, to_csv, to_pdf
from .report import aggregate

logger = logging.getLogger(__name__)


def _inputs(args) -> dict:
    if args.source == "sample":
        return {
            "warehouse": data.sample_warehouses(),
            "product": data.sample_products(),
            "inventory": data.sample_inventory(),
            "supplier": data.sample_suppliers(),
        }
    client = InventoryApiClient()
    if args.email:
        client.login(args.email, args.password or "")
    return client.fetch_report_inputs()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Per-warehouse stock report")
    parser.add_argument("--warehouse", required=True, help="Warehouse id to report on")
    parser.add_argument("--source", choices=("sample", "api"), default="sample")
    parser.add_argument("--format", dest="formats", action="append", choices=("csv", "pdf", "json"),
                        help="Output format, may be repeated (default csv)")
    parser.add_argument("--output", type=Path, default=config.OUTPUT_DIR, help="Output directory")
    parser.add_argument("--email", default=None, help="Backend login (api source)")
    parser.add_argument("--password", default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        inputs = _inputs(args)
    except ApiError as exc:
        logger.error("could not load report inputs: %s", exc)
        return 2

    report = aggregate(
        inputs["warehouse"], inputs["product"], inputs["inventory"], inputs["supplier"], args.warehouse
    )
    if report is None:
        logger.error("warehouse %s not found", args.warehouse)
        return 1

    out_dir = args.output
    out_dir.mkdir(parents=True, exist_ok=True)
    for fmt in args.formats or ["csv"]:
        out_file = out_dir / report_filename(report, fmt)
        if fmt == "csv":
            out_file.write_text(to_csv(report), encoding="utf-8")
        elif fmt == "pdf":
            out_file.write_bytes(to_pdf(report))
        else:
            out_file.write_text(json.dumps(report_to_dict(report), indent=2), encoding="utf-8")
        print(f"report written to {out_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
