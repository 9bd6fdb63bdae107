from __future__ import annotations

import csv
import io
import re
from dataclasses import asdict
from typing import List
from urllib.parse import quote

from fpdf import FPDF

from .models import Report, Supplier

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
PRODUCT_COLUMNS = ["Product Name", "SKU", "Description", "Current Stock", "Min Stock", "Status"]


def _supplier_lines(supplier: Supplier) -> List[str]:
    lines = [f"Supplier: {supplier.name}"]
    if supplier.contact_person:
        lines.append(f"Contact Person: {supplier.contact_person}")
    if supplier.email:
        lines.append(f"Email: {supplier.email}")
    if supplier.phone:
        lines.append(f"Phone: {supplier.phone}")
    return lines


def report_filename(report: Report, ext: str) -> str:
    # restricted to characters that are safe in paths and HTTP headers
    slug = re.sub(r"[^A-Za-z0-9._-]+", "-", report.warehouse.name).strip("-.") or "warehouse"
    return f"warehouse-report-{slug}-{report.generated_at.strftime('%Y-%m-%d')}.{ext}"


def content_disposition(report: Report, ext: str) -> str:
    """Attachment header with an ASCII name plus the full UTF-8 name."""
    full = re.sub(r"[^\w.-]+", "-", report.warehouse.name).strip("-.") or "warehouse"
    utf8_name = f"warehouse-report-{full}-{report.generated_at.strftime('%Y-%m-%d')}.{ext}"
    return f"attachment; filename=\"{report_filename(report, ext)}\"; filename*=UTF-8''{quote(utf8_name, safe='')}"


def to_csv(report: Report) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    wh = report.warehouse
    writer.writerow([f"Warehouse Report: {wh.name} ({wh.location})"])
    writer.writerow([f"Generated on: {report.generated_at.strftime(TIMESTAMP_FORMAT)}"])
    writer.writerow([])

    writer.writerow(["SUMMARY"])
    writer.writerow(["Total Products", report.total_products])
    writer.writerow(["Low Stock Items", report.low_stock_count])
    writer.writerow(["Estimated Total Value", f"{report.total_stock_value:.2f}"])
    writer.writerow([])

    writer.writerow(["PRODUCTS BY SUPPLIER"])
    for group in report.groups.values():
        writer.writerow([])
        for line in _supplier_lines(group.supplier):
            writer.writerow([line])
        writer.writerow(PRODUCT_COLUMNS)
        for item in group.products:
            p = item.product
            writer.writerow(
                [p.name, p.sku, p.description or "", item.current_stock, p.min_stock_level or 0, item.status]
            )
    return buf.getvalue()


def _latin1(text: object) -> str:
    # core PDF fonts only cover latin-1
    return str(text).encode("latin-1", "replace").decode("latin-1")


def to_pdf(report: Report) -> bytes:
    wh = report.warehouse
    pdf = FPDF(orientation="P", unit="mm", format="A4")
    pdf.add_page()
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, _latin1(f"Warehouse Report: {wh.name}"), ln=1)
    pdf.set_font("Helvetica", "", 12)
    pdf.cell(0, 8, _latin1(f"Location: {wh.location}"), ln=1)
    pdf.cell(0, 8, f"Generated on: {report.generated_at.strftime(TIMESTAMP_FORMAT)}", ln=1)
    pdf.ln(4)

    pdf.set_font("Helvetica", "B", 12)
    pdf.cell(0, 8, "Summary", ln=1)
    pdf.set_font("Helvetica", "", 12)
    pdf.cell(80, 8, "Total Products", border=1)
    pdf.cell(40, 8, str(report.total_products), border=1, ln=1)
    pdf.cell(80, 8, "Low Stock Items", border=1)
    pdf.cell(40, 8, str(report.low_stock_count), border=1, ln=1)
    pdf.cell(80, 8, "Estimated Total Value", border=1)
    pdf.cell(40, 8, f"{report.total_stock_value:.2f}", border=1, ln=1)

    widths = [45, 25, 50, 22, 20, 28]
    for group in report.groups.values():
        pdf.ln(6)
        pdf.set_font("Helvetica", "B", 12)
        for line in _supplier_lines(group.supplier):
            pdf.cell(0, 7, _latin1(line), ln=1)
            pdf.set_font("Helvetica", "", 10)
        pdf.set_font("Helvetica", "B", 9)
        for width, title in zip(widths, PRODUCT_COLUMNS):
            pdf.cell(width, 7, title, border=1)
        pdf.ln()
        pdf.set_font("Helvetica", "", 9)
        for item in group.products:
            p = item.product
            values = [p.name, p.sku, p.description or "-", item.current_stock, p.min_stock_level or 0, item.status]
            for width, value in zip(widths, values):
                pdf.cell(width, 7, _latin1(value)[:40], border=1)
            pdf.ln()

    out = pdf.output(dest="S")
    if isinstance(out, (bytes, bytearray)):
        return bytes(out)
    return str(out).encode("latin1")


def report_to_dict(report: Report) -> dict:
    return {
        "warehouse": asdict(report.warehouse),
        "generated_at": report.generated_at.isoformat(),
        "total_products": report.total_products,
        "total_stock_value": round(report.total_stock_value, 2),
        "low_stock_count": report.low_stock_count,
        "groups": [
            {
                "key": key,
                "supplier": asdict(group.supplier),
                "products": [
                    {
                        **asdict(item.product),
                        "current_stock": item.current_stock,
                        "status": item.status,
                    }
                    for item in group.products
                ],
            }
            for key, group in report.groups.items()
        ],
    }
