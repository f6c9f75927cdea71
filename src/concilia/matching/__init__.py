"""Module de résolution des noms et des références."""

from concilia.matching.lookup import ContractIndex, EquipmentIndex
from concilia.matching.resolver import NameResolver, resolve
from concilia.matching.schema import Candidate, ContractRecord, EquipmentRecord, MatchResult

__all__ = [
    "Candidate",
    "ContractIndex",
    "ContractRecord",
    "EquipmentIndex",
    "EquipmentRecord",
    "MatchResult",
    "NameResolver",
    "resolve",
]
