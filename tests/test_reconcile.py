"""Tests du rapprochement des lignes d'import."""

import pytest

from concilia.matching.resolver import NameResolver
from concilia.matching.schema import Candidate, ContractRecord, EquipmentRecord
from concilia.reconcile import ImportReconciler, reconcile
from concilia.rows import AdvanceImportRow, ServiceCallImportRow


@pytest.fixture
def employees() -> list[Candidate]:
    return [
        Candidate("e1", "Luís Carlos Andrade Souza"),
        Candidate("e2", "Maria Aparecida Silva"),
        Candidate("e3", "João Batista Lima"),
    ]


@pytest.fixture
def contracts() -> list[ContractRecord]:
    return [
        ContractRecord("c1", "CT-001", "Prefeitura de Campinas"),
        ContractRecord("c2", "CT-002", "DER São Paulo"),
    ]


@pytest.fixture
def equipment() -> list[EquipmentRecord]:
    return [EquipmentRecord("eq1", "SN-100"), EquipmentRecord("eq2", "SN-200")]


def _advance(name: str, contract: str | None = None, line: int | None = None) -> AdvanceImportRow:
    return AdvanceImportRow(name, contract, line=line, fields={"value": 100.0})


def test_drop_on_unresolved(employees: list[Candidate], contracts: list[ContractRecord]) -> None:
    rows = [
        _advance("Luiz C Souza"),
        _advance("Pedro Alvares"),
        _advance("Maria Silva"),
        _advance("Carla Dias"),
        _advance("João Lima"),
    ]
    outcome = reconcile(rows, employees, contracts)
    assert len(outcome.resolved_rows) == 3
    assert outcome.unresolved_count == 2
    assert outcome.total_rows == 5


def test_order_preserved(employees: list[Candidate], contracts: list[ContractRecord]) -> None:
    rows = [
        _advance("João Lima"),
        _advance("Pedro Alvares"),
        _advance("Luiz Souza"),
        _advance("Carla Dias"),
        _advance("Maria Silva"),
    ]
    outcome = reconcile(rows, employees, contracts)
    assert [r.employee_id for r in outcome.resolved_rows] == ["e3", "e1", "e2"]
    assert [r.position for r in outcome.resolved_rows] == [0, 2, 4]
    assert [u.position for u in outcome.unresolved_rows] == [1, 3]
    assert [r.row for r in outcome.resolved_rows] == [rows[0], rows[2], rows[4]]


def test_contract_by_number_and_client_name(employees: list[Candidate], contracts: list[ContractRecord]) -> None:
    rows = [_advance("Maria Silva", "ct-001"), _advance("Maria Silva", " der sao paulo ")]
    outcome = reconcile(rows, employees, contracts)
    assert [r.contract_id for r in outcome.resolved_rows] == ["c1", "c2"]
    assert outcome.fallback_count == 0


def test_fallback_routing(employees: list[Candidate], contracts: list[ContractRecord]) -> None:
    rows = [_advance("Maria Silva", "Obra avulsa"), _advance("João Lima", "CT-002")]
    outcome = reconcile(rows, employees, contracts, fallback_contract_id="c99")
    first, second = outcome.resolved_rows
    assert first.contract_id == "c99"
    assert first.third_party_contract == "Obra avulsa"
    assert second.contract_id == "c2"
    assert second.third_party_contract is None
    assert outcome.fallback_count == 1


def test_no_fallback_contract_is_none(employees: list[Candidate], contracts: list[ContractRecord]) -> None:
    outcome = reconcile([_advance("Maria Silva", "Obra avulsa")], employees, contracts)
    assert len(outcome.resolved_rows) == 1
    assert outcome.resolved_rows[0].contract_id is None
    assert outcome.resolved_rows[0].third_party_contract is None
    assert outcome.fallback_count == 0


def test_empty_contract_ref_not_routed_to_fallback(
    employees: list[Candidate], contracts: list[ContractRecord]
) -> None:
    rows = [_advance("Maria Silva", None), _advance("Maria Silva", "  ")]
    outcome = reconcile(rows, employees, contracts, fallback_contract_id="c99")
    assert [r.contract_id for r in outcome.resolved_rows] == [None, None]
    assert outcome.fallback_count == 0


def test_unresolved_employee_does_not_count_fallback(
    employees: list[Candidate], contracts: list[ContractRecord]
) -> None:
    outcome = reconcile([_advance("Carla Dias", "Obra avulsa")], employees, contracts, fallback_contract_id="c99")
    assert outcome.unresolved_count == 1
    assert outcome.fallback_count == 0


def test_equipment_resolution(
    employees: list[Candidate], contracts: list[ContractRecord], equipment: list[EquipmentRecord]
) -> None:
    rows = [
        ServiceCallImportRow("Maria Silva", "CT-001", "sn-200"),
        ServiceCallImportRow("Maria Silva", "CT-001", "SN-999"),
        ServiceCallImportRow("Maria Silva", "CT-001", None),
    ]
    outcome = reconcile(rows, employees, contracts, equipment)
    assert [r.equipment_id for r in outcome.resolved_rows] == ["eq2", None, None]


def test_equipment_without_roster(employees: list[Candidate], contracts: list[ContractRecord]) -> None:
    outcome = reconcile([ServiceCallImportRow("Maria Silva", None, "SN-100")], employees, contracts)
    assert outcome.resolved_rows[0].equipment_id is None


def test_unresolved_suggestions(employees: list[Candidate], contracts: list[ContractRecord]) -> None:
    outcome = reconcile([_advance("Maria Aparecida Silvaa")], employees, contracts)
    assert outcome.unresolved_count == 1
    suggestions = outcome.unresolved_rows[0].suggestions
    assert suggestions and suggestions[0].candidate_id == "e2"


def test_suggestions_disabled(employees: list[Candidate], contracts: list[ContractRecord]) -> None:
    reconciler = ImportReconciler(suggest_limit=0)
    outcome = reconciler.reconcile([_advance("Maria Aparecida Silvaa")], employees, contracts)
    assert outcome.unresolved_rows[0].suggestions == []


def test_custom_resolver_folds(employees: list[Candidate], contracts: list[ContractRecord]) -> None:
    rows = [_advance("Zé Lima")]
    assert reconcile(rows, employees, contracts).unresolved_count == 1
    reconciler = ImportReconciler(NameResolver({"Zé": "João"}))
    outcome = reconciler.reconcile(rows, employees, contracts)
    assert outcome.resolved_rows[0].employee_id == "e3"


def test_to_record(employees: list[Candidate], contracts: list[ContractRecord]) -> None:
    rows = [_advance("Maria Silva", "Obra avulsa", line=7)]
    record = reconcile(rows, employees, contracts, fallback_contract_id="c99").resolved_rows[0].to_record()
    assert record == {
        "line": 7,
        "employee_id": "e2",
        "contract_id": "c99",
        "equipment_id": None,
        "third_party_contract": "Obra avulsa",
        "value": 100.0,
    }


def test_inputs_not_mutated(employees: list[Candidate], contracts: list[ContractRecord]) -> None:
    rows = [_advance("Maria Silva", "Obra avulsa"), _advance("Carla Dias")]
    snapshot = [(r.employee_name_raw, r.contract_ref, dict(r.fields)) for r in rows]
    reconcile(rows, employees, contracts, fallback_contract_id="c99")
    assert [(r.employee_name_raw, r.contract_ref, dict(r.fields)) for r in rows] == snapshot
    assert len(employees) == 3


def test_empty_batch(employees: list[Candidate], contracts: list[ContractRecord]) -> None:
    outcome = reconcile([], employees, contracts)
    assert outcome.resolved_rows == []
    assert outcome.unresolved_count == 0
    assert outcome.fallback_count == 0
