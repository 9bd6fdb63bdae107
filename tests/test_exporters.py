"""Tests for CSV, PDF and JSON report exports."""

import csv
import io
import json

from warehouse_reporting.exporters import content_disposition, report_filename, report_to_dict, to_csv, to_pdf
from warehouse_reporting.models import LOW_STOCK_LABEL, OK_LABEL
from warehouse_reporting.report import aggregate

# header (3) + summary (5) + section title (1)
FIXED_ROWS = 9


def _report(raw_inputs, now):
    return aggregate(
        raw_inputs["warehouses"], raw_inputs["products"], raw_inputs["inventory"], raw_inputs["suppliers"], 5, now=now
    )


def _rows(text):
    return list(csv.reader(io.StringIO(text)))


class TestToCsv:
    """Tests for to_csv()."""

    def test_header_and_summary(self, raw_inputs, fixed_now) -> None:
        rows = _rows(to_csv(_report(raw_inputs, fixed_now)))
        assert rows[0] == ["Warehouse Report: W1 (Delft)"]
        assert rows[1] == ["Generated on: 2024-03-01 09:30:00"]
        assert rows[2] == []
        assert rows[3] == ["SUMMARY"]
        assert rows[4] == ["Total Products", "3"]
        assert rows[5] == ["Low Stock Items", "1"]
        assert rows[6] == ["Estimated Total Value", "47.50"]
        assert rows[8] == ["PRODUCTS BY SUPPLIER"]

    def test_supplier_blocks(self, raw_inputs, fixed_now) -> None:
        """Test supplier details are listed only when present."""
        rows = _rows(to_csv(_report(raw_inputs, fixed_now)))
        block = rows[FIXED_ROWS:]
        assert block[0] == []
        assert block[1] == ["Supplier: Acme, Inc."]
        assert block[2] == ["Contact Person: Jo"]
        assert block[3] == ["Email: jo@acme.example"]
        assert block[4] == ["Product Name", "SKU", "Description", "Current Stock", "Min Stock", "Status"]
        assert block[5] == ["Bolt", "B-1", "", "3", "10", LOW_STOCK_LABEL]
        assert block[6] == ["Washer", "W-1", "", "12", "4", OK_LABEL]
        assert ["Supplier: No Supplier"] in block
        assert not any(row and row[0].startswith("Phone:") for row in block)

    def test_fields_with_separator_are_quoted(self, raw_inputs, fixed_now) -> None:
        raw_inputs["products"][0]["description"] = "M8, zinc"
        text = to_csv(_report(raw_inputs, fixed_now))
        assert '"Supplier: Acme, Inc."' in text
        assert 'Bolt,B-1,"M8, zinc",3,10,LOW STOCK' in text

    def test_product_rows_match_report(self, raw_inputs, fixed_now) -> None:
        """Test one status row per product and statuses agree with the low-stock count."""
        report = _report(raw_inputs, fixed_now)
        rows = _rows(to_csv(report))
        product_rows = [r for r in rows if len(r) == 6 and r[0] != "Product Name"]
        assert len(product_rows) == report.total_products
        assert sum(1 for r in product_rows if r[5] == LOW_STOCK_LABEL) == report.low_stock_count
        for r in product_rows:
            current, minimum = int(r[3]), int(r[4])
            expected = LOW_STOCK_LABEL if minimum > 0 and current <= minimum else OK_LABEL
            assert r[5] == expected

    def test_row_count(self, raw_inputs, fixed_now) -> None:
        """Test total lines for single-line fields: fixed rows, per-group headers, one per product."""
        report = _report(raw_inputs, fixed_now)
        lines = to_csv(report).splitlines()
        group_rows = 0
        for group in report.groups.values():
            s = group.supplier
            group_rows += 3 + sum(1 for v in (s.contact_person, s.email, s.phone) if v)
        assert len(lines) == FIXED_ROWS + group_rows + report.total_products

    def test_multiline_description_stays_one_record(self, raw_inputs, fixed_now) -> None:
        """Test an embedded newline is quoted, so parsed record counts are unchanged."""
        raw_inputs["products"][0]["description"] = "line1\nline2"
        report = _report(raw_inputs, fixed_now)
        text = to_csv(report)
        assert '"line1\nline2"' in text
        rows = _rows(text)
        group_rows = sum(
            3 + sum(1 for v in (g.supplier.contact_person, g.supplier.email, g.supplier.phone) if v)
            for g in report.groups.values()
        )
        assert len(rows) == FIXED_ROWS + group_rows + report.total_products
        assert ["Bolt", "B-1", "line1\nline2", "3", "10", LOW_STOCK_LABEL] in rows

    def test_deterministic(self, raw_inputs, fixed_now) -> None:
        assert to_csv(_report(raw_inputs, fixed_now)) == to_csv(_report(raw_inputs, fixed_now))


class TestOtherFormats:
    """Tests for PDF, JSON and file naming."""

    def test_pdf_bytes(self, raw_inputs, fixed_now) -> None:
        out = to_pdf(_report(raw_inputs, fixed_now))
        assert out.startswith(b"%PDF")

    def test_pdf_tolerates_non_latin_text(self, raw_inputs, fixed_now) -> None:
        raw_inputs["warehouses"][0]["name"] = "Склад №1"
        assert to_pdf(_report(raw_inputs, fixed_now)).startswith(b"%PDF")

    def test_report_to_dict_is_json_serialisable(self, raw_inputs, fixed_now) -> None:
        payload = report_to_dict(_report(raw_inputs, fixed_now))
        json.dumps(payload)
        assert payload["total_stock_value"] == 47.5
        assert [g["key"] for g in payload["groups"]] == [30, "no-supplier"]
        assert payload["groups"][0]["products"][0]["status"] == LOW_STOCK_LABEL

    def test_filename(self, raw_inputs, fixed_now) -> None:
        raw_inputs["warehouses"][0]["name"] = "Main  Store"
        assert report_filename(_report(raw_inputs, fixed_now), "csv") == "warehouse-report-Main-Store-2024-03-01.csv"

    def test_filename_has_no_path_separators(self, raw_inputs, fixed_now) -> None:
        report = _report(raw_inputs, fixed_now)
        report.warehouse.name = "Aisle 3/4"
        assert report_filename(report, "csv") == "warehouse-report-Aisle-3-4-2024-03-01.csv"
        report.warehouse.name = "../etc\\passwd"
        name = report_filename(report, "pdf")
        assert "/" not in name and "\\" not in name and ".." not in name
        report.warehouse.name = "Склад"
        assert report_filename(report, "csv") == "warehouse-report-warehouse-2024-03-01.csv"

    def test_content_disposition_is_latin1_safe(self, raw_inputs, fixed_now) -> None:
        report = _report(raw_inputs, fixed_now)
        report.warehouse.name = 'Склад "№1"'
        header = content_disposition(report, "csv")
        header.encode("latin-1")
        assert header.startswith('attachment; filename="warehouse-report-1-2024-03-01.csv"; ')
        assert "filename*=UTF-8''warehouse-report-%D0%A1%D0%BA%D0%BB%D0%B0%D0%B4-" in header
        assert '"' not in header.split("filename*=", 1)[1]
