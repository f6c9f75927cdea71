"""Lignes d'import typées (une classe par type d'import)."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, ClassVar

from concilia.columns import LINE_KEY
from concilia.config import ConfigError


@dataclass
class ImportRow:
    """
    Ligne d'import référençant un collaborateur (et éventuellement un contrat et un
    équipement) par du texte libre.

    Seuls les champs métier déclarés (`business_fields`) sont conservés dans
    `fields`, sans modification ; les autres clés de la ligne sont ignorées.
    """

    kind: ClassVar[str] = ""
    business_fields: ClassVar[tuple[str, ...]] = ()

    employee_name_raw: str
    contract_ref: str | None = None
    equipment_serial_raw: str | None = None
    line: int | None = None
    fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapped(cls, d: dict[str, Any]) -> ImportRow:
        return cls(
            employee_name_raw=d.get("employee_name") or "",
            contract_ref=d.get("contract_ref"),
            equipment_serial_raw=d.get("equipment_serial"),
            line=d.get(LINE_KEY),
            fields={k: d[k] for k in cls.business_fields if k in d},
        )


@dataclass
class AdvanceImportRow(ImportRow):
    """Adiantamento (avance sur salaire)."""

    kind: ClassVar[str] = "advance"
    business_fields: ClassVar[tuple[str, ...]] = ("date", "value", "reason", "status")


@dataclass
class ServiceCallImportRow(ImportRow):
    """Chamado (appel de service) sur un équipement."""

    kind: ClassVar[str] = "service_call"
    business_fields: ClassVar[tuple[str, ...]] = ("date", "type", "description", "resolution", "status")


ROW_TYPES: dict[str, type[ImportRow]] = {
    AdvanceImportRow.kind: AdvanceImportRow,
    ServiceCallImportRow.kind: ServiceCallImportRow,
}


def build_rows(kind: str, records: Iterable[dict[str, Any]]) -> list[ImportRow]:
    """
    Construit les lignes typées à partir des lignes issues de map_records.

    Raises:
        ConfigError: Si le type d'import est inconnu.
    """
    row_type = ROW_TYPES.get(kind)
    if row_type is None:
        raise ConfigError(f"kind invalide: {kind!r}. Valides: {sorted(ROW_TYPES)}")
    return [row_type.from_mapped(d) for d in records]
