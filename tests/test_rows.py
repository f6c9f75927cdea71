"""Tests des lignes d'import typées."""

import pytest

from concilia.config import ConfigError
from concilia.rows import AdvanceImportRow, ServiceCallImportRow, build_rows


def test_build_advance_rows() -> None:
    mapped = {
        "_line": 2,
        "employee_name": "Ana Costa",
        "contract_ref": "CT-001",
        "date": "2024-01-02",
        "value": 10.5,
        "reason": None,
        "status": "pending",
    }
    rows = build_rows("advance", [mapped])
    assert len(rows) == 1
    row = rows[0]
    assert isinstance(row, AdvanceImportRow)
    assert row.kind == "advance"
    assert row.employee_name_raw == "Ana Costa"
    assert row.contract_ref == "CT-001"
    assert row.equipment_serial_raw is None
    assert row.line == 2
    assert row.fields == {"date": "2024-01-02", "value": 10.5, "reason": None, "status": "pending"}


def test_build_service_call_rows() -> None:
    mapped = {"_line": 4, "employee_name": "Ana Costa", "equipment_serial": "SN-1", "type": "corretiva"}
    row = build_rows("service_call", [mapped])[0]
    assert isinstance(row, ServiceCallImportRow)
    assert row.equipment_serial_raw == "SN-1"
    assert "equipment_serial" not in row.fields
    assert row.fields == {"type": "corretiva"}


def test_undeclared_fields_dropped() -> None:
    mapped = {"_line": 3, "employee_name": "Ana Costa", "value": 5.0, "type": "corretiva", "extra": "x"}
    row = build_rows("advance", [mapped])[0]
    assert row.fields == {"value": 5.0}


def test_missing_employee_name_is_empty() -> None:
    row = build_rows("advance", [{"employee_name": None}])[0]
    assert row.employee_name_raw == ""


def test_build_rows_unknown_kind() -> None:
    with pytest.raises(ConfigError):
        build_rows("fuel", [])
