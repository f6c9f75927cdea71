"""Normalisation de texte, de noms de personnes et de références."""

from __future__ import annotations

import math
import re
import unicodedata
from collections.abc import Mapping

# Variantes orthographiques connues → forme canonique (remplacement par token entier)
DEFAULT_NAME_FOLDS: dict[str, str] = {
    "luís": "luis",
    "luiz": "luis",
    "sérgio": "sergio",
    "sergio": "sergio",
}


def _is_missing(s: object) -> bool:
    return s is None or (isinstance(s, float) and (math.isnan(s) or math.isinf(s)))


def _remove_diacritics(s: str) -> str:
    """Retire les diacritiques (accents) d'une chaîne."""
    nfd = unicodedata.normalize("NFD", s)
    return "".join(c for c in nfd if unicodedata.category(c) != "Mn")


def norm_text(
    s: str | float | int | None,
    *,
    lower: bool = True,
    strip: bool = True,
    remove_diacritics: bool = False,
) -> str:
    """
    Normalise un texte : NFKC, espaces multiples → espace simple, lower, strip.

    Args:
        s: Valeur à normaliser (convertie en str si numérique).
        lower: Mettre en minuscules.
        strip: Supprimer espaces en début/fin.
        remove_diacritics: Supprimer les accents.

    Returns:
        Chaîne normalisée.
    """
    if _is_missing(s):
        return ""
    text = str(s).strip() if strip else str(s)
    text = unicodedata.normalize("NFKC", text)
    text = re.sub(r"\s+", " ", text)
    if strip:
        text = text.strip()
    if lower:
        text = text.lower()
    if remove_diacritics:
        text = _remove_diacritics(text)
    return text


def _fold_key(token: str) -> str:
    return _remove_diacritics(token.lower()).replace(".", "")


def build_fold_table(extra: Mapping[str, str] | None = None) -> dict[str, str]:
    """
    Construit la table de variantes : table par défaut ∪ extension de l'appelant.

    Les clés et valeurs sont normalisées comme les tokens (minuscules, sans accents,
    sans points), afin que "Luís" et "luis" désignent la même entrée.
    """
    table: dict[str, str] = {}
    for source in (DEFAULT_NAME_FOLDS, extra or {}):
        for variant, canonical in source.items():
            key = _fold_key(str(variant))
            if key:
                table[key] = _fold_key(str(canonical))
    return table


_DEFAULT_FOLD_TABLE = build_fold_table()


def normalize_name(
    name: str | float | None,
    folds: Mapping[str, str] | None = None,
) -> tuple[str, ...]:
    """
    Découpe un nom de personne en tokens normalisés.

    Étapes : minuscules + NFKC, suppression des accents, suppression des points
    d'abréviation ("J." → "j"), découpage sur les espaces, puis remplacement des
    variantes orthographiques connues ("luiz"/"luís" → "luis").

    Args:
        name: Nom saisi (vide ou None accepté).
        folds: Variantes supplémentaires {variante: forme canonique}, ajoutées à
            la table par défaut et normalisées comme les tokens. None = table par défaut.

    Returns:
        Tuple de tokens, vide si l'entrée est vide.
    """
    table = _DEFAULT_FOLD_TABLE if folds is None else build_fold_table(folds)
    return tokenize_name(name, table)


def tokenize_name(name: str | float | None, table: Mapping[str, str]) -> tuple[str, ...]:
    """Comme normalize_name, avec une table déjà construite par build_fold_table."""
    text = norm_text(name, remove_diacritics=True).replace(".", "")
    return tuple(table.get(tok, tok) for tok in text.split() if tok)


def norm_ref(s: str | float | int | None) -> str:
    """Clé de comparaison d'une référence (numéro de contrat, client, n° de série)."""
    return norm_text(s, remove_diacritics=True)


def norm_header(s: str | float | int | None) -> str:
    """Clé de comparaison d'un en-tête de colonne ("Contrato:" == "contrato")."""
    return norm_ref(s).rstrip(":").strip()


def safe_str(val: object) -> str:
    """Convertit une valeur en chaîne pour affichage/stockage."""
    if _is_missing(val):
        return ""
    return str(val)
