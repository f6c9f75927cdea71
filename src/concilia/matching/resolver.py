"""Résolution d'un nom saisi librement vers un collaborateur du référentiel."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from concilia.matching.schema import Candidate, MatchResult
from concilia.normalize import build_fold_table, tokenize_name

logger = logging.getLogger(__name__)

FIRST_NAME_SCORE = 3
LAST_NAME_SCORE = 2
MIDDLE_TOKEN_SCORE = 1
# Prénom + nom de famille : les noms intermédiaires ne font qu'ajouter de la confiance
ACCEPTANCE_THRESHOLD = FIRST_NAME_SCORE + LAST_NAME_SCORE
EXACT_MATCH_SCORE = 100

NO_MATCH_EMPTY = "Nom vide"
NO_MATCH_SINGLE_TOKEN = "Nom à un seul mot (pas de correspondance exacte)"


def _score_middle_tokens(middle: Sequence[str], emp_rest: Sequence[str]) -> int:
    """Bonus pour chaque nom intermédiaire (ou initiale) retrouvé chez le candidat."""
    bonus = 0
    for m in middle:
        if len(m) == 1:
            hit = any(t.startswith(m) for t in emp_rest)
        else:
            hit = any(t == m or t.startswith(m) for t in emp_rest)
        if hit:
            bonus += MIDDLE_TOKEN_SCORE
    return bonus


def score_candidate(search: Sequence[str], emp: Sequence[str]) -> int | None:
    """
    Calcule le score d'un candidat pour une recherche déjà normalisée.

    Le prénom est un filtre strict : un prénom différent exclut le candidat, de même
    qu'un nom de famille introuvable (égalité ou préfixe d'un token du candidat).

    Args:
        search: Tokens de la recherche (au moins deux).
        emp: Tokens du nom du candidat.

    Returns:
        Score entier, ou None si le candidat est exclu.
    """
    if len(search) < 2 or len(emp) < 2:
        return None
    if emp[0] != search[0]:
        return None

    score = FIRST_NAME_SCORE
    search_last = search[-1]
    if not any(t == search_last or t.startswith(search_last) for t in emp):
        return None
    score += LAST_NAME_SCORE

    if len(search) > 2:
        score += _score_middle_tokens(search[1:-1], emp[1:])
    return score


class NameResolver:
    """Résout un nom saisi librement vers un unique candidat, ou aucun."""

    def __init__(self, folds: Mapping[str, str] | None = None) -> None:
        self.folds = build_fold_table(folds)

    def normalize(self, name: str | None) -> tuple[str, ...]:
        return tokenize_name(name, self.folds)

    def resolve(self, search_name: str | None, roster: Sequence[Candidate]) -> MatchResult:
        """
        Détermine le meilleur candidat pour search_name.

        1. Correspondance exacte (tokens normalisés identiques) : gagne sans score,
           le premier candidat du référentiel l'emporte en cas de doublon.
        2. Sinon, une recherche d'un seul mot est rejetée.
        3. Sinon, score = prénom (3) + nom de famille (2) + noms intermédiaires (1 chacun) ;
           à score égal, le premier candidat rencontré garde la priorité.
        4. Le meilleur score doit atteindre ACCEPTANCE_THRESHOLD.

        Ne lève jamais d'exception : l'absence de correspondance est un résultat normal.
        """
        search = self.normalize(search_name)
        if not search:
            return MatchResult(None, 0, NO_MATCH_EMPTY)

        normalized: list[tuple[Candidate, tuple[str, ...]]] = []
        joined = " ".join(search)
        for cand in roster:
            tokens = self.normalize(cand.display_name)
            if not tokens:
                continue
            if " ".join(tokens) == joined:
                logger.debug("Correspondance exacte %r -> %s", search_name, cand.id)
                return MatchResult(cand.id, EXACT_MATCH_SCORE, "Correspondance exacte")
            normalized.append((cand, tokens))

        if len(search) < 2:
            return MatchResult(None, 0, NO_MATCH_SINGLE_TOKEN)

        best: Candidate | None = None
        best_score = 0
        for cand, tokens in normalized:
            score = score_candidate(search, tokens)
            if score is not None and score > best_score:
                best = cand
                best_score = score

        if best is not None and best_score >= ACCEPTANCE_THRESHOLD:
            logger.debug("Correspondance %r -> %s (score=%d)", search_name, best.id, best_score)
            return MatchResult(best.id, best_score, f"Score={best_score}")

        logger.debug("Aucune correspondance pour %r (meilleur score=%d)", search_name, best_score)
        return MatchResult(None, best_score, f"Sous le seuil (score={best_score})")


def resolve(
    search_name: str | None,
    roster: Sequence[Candidate],
    folds: Mapping[str, str] | None = None,
) -> MatchResult:
    """Raccourci : NameResolver(folds).resolve(search_name, roster)."""
    return NameResolver(folds).resolve(search_name, roster)
