"""Suggestions de noms proches pour les lignes non résolues (diagnostic uniquement)."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from rapidfuzz import fuzz, process

from concilia.matching.schema import Candidate
from concilia.normalize import build_fold_table, tokenize_name


@dataclass(frozen=True)
class Suggestion:
    """Un nom du référentiel proche d'une recherche non résolue."""

    candidate_id: str
    display_name: str
    score: float

    def __str__(self) -> str:
        return f"{self.display_name} ({self.score:.0f})"


def suggest_candidates(
    search_name: str | None,
    roster: Sequence[Candidate],
    *,
    limit: int = 3,
    min_score: float = 60.0,
    folds: Mapping[str, str] | None = None,
) -> list[Suggestion]:
    """
    Retourne les candidats les plus proches selon fuzz.token_set_ratio.

    Ne sert qu'à l'affichage : une suggestion n'est jamais utilisée comme résolution.

    Args:
        search_name: Nom recherché.
        roster: Référentiel de collaborateurs.
        limit: Nombre maximal de suggestions.
        min_score: Score minimal (0-100).
        folds: Extension de la table de variantes.

    Returns:
        Suggestions triées par score décroissant.
    """
    table = build_fold_table(folds)
    query = " ".join(tokenize_name(search_name, table))
    if not query or limit < 1:
        return []

    choices = [" ".join(tokenize_name(c.display_name, table)) for c in roster]
    matches = process.extract(
        query,
        choices,
        scorer=fuzz.token_set_ratio,
        limit=limit,
        score_cutoff=min_score,
    )
    return [
        Suggestion(roster[idx].id, roster[idx].display_name, float(score))
        for _, score, idx in matches
    ]
