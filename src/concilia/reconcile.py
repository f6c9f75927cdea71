"""Rapprochement d'un lot de lignes d'import avec les référentiels."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from concilia.matching.lookup import ContractIndex, EquipmentIndex
from concilia.matching.resolver import NameResolver
from concilia.matching.schema import Candidate, ContractRecord, EquipmentRecord
from concilia.matching.suggest import Suggestion, suggest_candidates
from concilia.normalize import safe_str
from concilia.rows import ImportRow

logger = logging.getLogger(__name__)


@dataclass
class ResolvedRow:
    """Ligne dont les références texte ont été remplacées par des identifiants."""

    row: ImportRow
    employee_id: str
    position: int = 0  # index dans le lot d'origine
    contract_id: str | None = None
    equipment_id: str | None = None
    third_party_contract: str | None = None  # référence d'origine si contrat de repli
    employee_score: int = 0

    def to_record(self) -> dict[str, Any]:
        """Dictionnaire à plat, prêt pour l'insertion ou l'export."""
        record: dict[str, Any] = {
            "line": self.row.line,
            "employee_id": self.employee_id,
            "contract_id": self.contract_id,
            "equipment_id": self.equipment_id,
            "third_party_contract": self.third_party_contract,
        }
        record.update(self.row.fields)
        return record


@dataclass
class UnresolvedRow:
    """Ligne écartée faute de collaborateur reconnu."""

    row: ImportRow
    position: int  # index dans le lot d'origine
    suggestions: list[Suggestion] = field(default_factory=list)


@dataclass
class ReconciliationOutcome:
    """Résultat du rapprochement d'un lot."""

    resolved_rows: list[ResolvedRow] = field(default_factory=list)
    unresolved_rows: list[UnresolvedRow] = field(default_factory=list)
    fallback_count: int = 0

    @property
    def unresolved_count(self) -> int:
        return len(self.unresolved_rows)

    @property
    def total_rows(self) -> int:
        return len(self.resolved_rows) + len(self.unresolved_rows)


class ImportReconciler:
    """Résout collaborateur (obligatoire), contrat et équipement (facultatifs) de chaque ligne."""

    def __init__(self, resolver: NameResolver | None = None, *, suggest_limit: int = 3) -> None:
        self.resolver = resolver or NameResolver()
        self.suggest_limit = suggest_limit

    def reconcile(
        self,
        rows: Sequence[ImportRow],
        employee_roster: Sequence[Candidate],
        contract_roster: Sequence[ContractRecord],
        equipment_roster: Sequence[EquipmentRecord] | None = None,
        fallback_contract_id: str | None = None,
    ) -> ReconciliationOutcome:
        """
        Rapproche chaque ligne indépendamment, dans l'ordre d'entrée.

        - Collaborateur : via NameResolver ; sans correspondance la ligne est écartée.
        - Contrat : numéro OU nom du client, exact (casse et accents ignorés). Sinon,
          contrat de repli si fourni (référence d'origine conservée dans
          third_party_contract), sinon None.
        - Équipement : numéro de série exact si un référentiel est fourni, sinon None.

        Aucune exception pour des données incomplètes : les échecs sont comptés.
        """
        contracts = ContractIndex(contract_roster)
        equipment = EquipmentIndex(equipment_roster) if equipment_roster is not None else None
        outcome = ReconciliationOutcome()

        for position, row in enumerate(rows):
            match = self.resolver.resolve(row.employee_name_raw, employee_roster)
            if match.candidate_id is None:
                suggestions = (
                    suggest_candidates(
                        row.employee_name_raw,
                        employee_roster,
                        limit=self.suggest_limit,
                        folds=self.resolver.folds,
                    )
                    if self.suggest_limit > 0
                    else []
                )
                outcome.unresolved_rows.append(UnresolvedRow(row, position, suggestions))
                continue

            resolved = ResolvedRow(
                row=row,
                employee_id=match.candidate_id,
                position=position,
                employee_score=match.score,
            )

            ref = safe_str(row.contract_ref).strip()
            contract = contracts.find(ref)
            if contract is not None:
                resolved.contract_id = contract.id
            elif ref and fallback_contract_id is not None:
                resolved.contract_id = fallback_contract_id
                resolved.third_party_contract = ref
                outcome.fallback_count += 1
                logger.debug("Contrat %r introuvable: rattaché au contrat de repli %s", ref, fallback_contract_id)

            if equipment is not None and row.equipment_serial_raw:
                found = equipment.find(row.equipment_serial_raw)
                resolved.equipment_id = found.id if found is not None else None

            outcome.resolved_rows.append(resolved)

        logger.info(
            "Rapprochement: %d résolues, %d écartées, %d contrat(s) de repli",
            len(outcome.resolved_rows),
            outcome.unresolved_count,
            outcome.fallback_count,
        )
        return outcome


def reconcile(
    rows: Sequence[ImportRow],
    employee_roster: Sequence[Candidate],
    contract_roster: Sequence[ContractRecord],
    equipment_roster: Sequence[EquipmentRecord] | None = None,
    fallback_contract_id: str | None = None,
) -> ReconciliationOutcome:
    """Raccourci : ImportReconciler().reconcile(...)."""
    return ImportReconciler().reconcile(
        rows,
        employee_roster,
        contract_roster,
        equipment_roster,
        fallback_contract_id,
    )
