"""Tests for envelope unwrapping and field resolution."""

import pytest

from warehouse_reporting.normalizer import as_float, as_int, ids_match, normalize, resolve

RECORDS = [{"id": 1}, {"id": 2}]


class TestNormalize:
    """Tests for normalize()."""

    @pytest.mark.parametrize(
        "payload",
        [
            RECORDS,
            {"content": RECORDS},
            {"data": RECORDS},
            {"products": RECORDS},
        ],
    )
    def test_known_envelopes_return_inner_list(self, payload) -> None:
        """Test each supported envelope yields the same inner list object."""
        assert normalize(payload) is RECORDS

    @pytest.mark.parametrize("payload", [None, 42, "text", {"content": "x", "total": 3}, {}])
    def test_other_shapes_return_empty(self, payload) -> None:
        """Test unsupported shapes degrade to an empty list."""
        assert normalize(payload) == []

    def test_priority_content_over_data(self) -> None:
        """Test content wins over data, and data over other keys."""
        assert normalize({"items": [3], "data": [2], "content": [1]}) == [1]
        assert normalize({"items": [3], "data": [2]}) == [2]

    def test_first_list_field_in_declaration_order(self) -> None:
        """Test the generic scan picks the first list-valued field."""
        assert normalize({"page": 1, "rows": ["a"], "more": ["b"]}) == ["a"]


class TestResolve:
    """Tests for resolve() over the field table."""

    def test_stock_level_candidates_in_order(self) -> None:
        """Test stockLevel, stock_level and quantity are tried in order."""
        assert resolve({"stockLevel": 4, "quantity": 9}, "inventory", "stock_level") == 4
        assert resolve({"stock_level": 6, "quantity": 9}, "inventory", "stock_level") == 6
        assert resolve({"quantity": 9}, "inventory", "stock_level") == 9

    def test_defaults_when_absent(self) -> None:
        """Test missing fields fall back to the table default."""
        assert resolve({}, "inventory", "stock_level") == 0
        assert resolve({}, "warehouse", "name") == "Unknown Warehouse"
        assert resolve({"id": 1}, "product", "supplier_id") is None

    def test_dotted_candidates_descend(self) -> None:
        """Test nested references and flat id fields both resolve."""
        assert resolve({"warehouse": {"id": 7}}, "product", "warehouse_id") == 7
        assert resolve({"warehouseId": 8}, "product", "warehouse_id") == 8
        assert resolve({"warehouse": None, "warehouse_id": 9}, "product", "warehouse_id") == 9

    def test_non_mapping_record(self) -> None:
        """Test a non-mapping record resolves to defaults."""
        assert resolve("junk", "inventory", "stock_level") == 0


class TestCoercion:
    """Tests for numeric coercion and identifier comparison."""

    def test_as_int(self) -> None:
        assert as_int("12") == 12
        assert as_int(3.0) == 3
        assert as_int("n/a") == 0
        assert as_int(None, default=5) == 5

    def test_as_float(self) -> None:
        assert as_float("2.50") == 2.5
        assert as_float(None) is None
        assert as_float("free") is None

    def test_ids_match_is_loose(self) -> None:
        """Test numeric and string identifiers compare equal."""
        assert ids_match(5, "5")
        assert ids_match("5", 5.0)
        assert ids_match("abc", "abc")
        assert not ids_match(5, "6")
        assert not ids_match(None, None)
        assert not ids_match("abc", 5)
