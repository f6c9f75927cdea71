"""Schémas et types pour la résolution."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Candidate:
    """Un membre du référentiel de collaborateurs."""

    id: str
    display_name: str


@dataclass(frozen=True)
class ContractRecord:
    """Un contrat du référentiel (numéro et nom du client)."""

    id: str
    number: str
    client_name: str = ""


@dataclass(frozen=True)
class EquipmentRecord:
    """Un équipement du référentiel."""

    id: str
    serial_number: str


@dataclass
class MatchResult:
    """Résultat de résolution d'un nom."""

    candidate_id: str | None
    score: int = 0
    explanation: str = ""

    @property
    def matched(self) -> bool:
        return self.candidate_id is not None

    def __repr__(self) -> str:
        return f"MatchResult(candidate={self.candidate_id!r}, score={self.score})"
