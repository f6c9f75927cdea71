"""Index de recherche exacte des contrats et équipements."""

from __future__ import annotations

from collections.abc import Iterable

from concilia.matching.schema import ContractRecord, EquipmentRecord
from concilia.normalize import norm_ref


class ContractIndex:
    """
    Recherche d'un contrat par numéro OU par nom de client.

    La comparaison ignore la casse, les accents et les espaces superflus. En cas de
    collision, le premier contrat du référentiel l'emporte.
    """

    def __init__(self, contracts: Iterable[ContractRecord]) -> None:
        self._by_key: dict[str, ContractRecord] = {}
        for c in contracts:
            for key in (norm_ref(c.number), norm_ref(c.client_name)):
                if key and key not in self._by_key:
                    self._by_key[key] = c

    def find(self, ref: str | None) -> ContractRecord | None:
        key = norm_ref(ref)
        if not key:
            return None
        return self._by_key.get(key)


class EquipmentIndex:
    """Recherche d'un équipement par numéro de série (insensible à la casse)."""

    def __init__(self, equipment: Iterable[EquipmentRecord]) -> None:
        self._by_serial: dict[str, EquipmentRecord] = {}
        for e in equipment:
            key = norm_ref(e.serial_number)
            if key and key not in self._by_serial:
                self._by_serial[key] = e

    def find(self, serial: str | None) -> EquipmentRecord | None:
        key = norm_ref(serial)
        if not key:
            return None
        return self._by_serial.get(key)
