"""Conversion des référentiels chargés (DataFrame) en listes d'enregistrements."""

from __future__ import annotations

import pandas as pd

from concilia.config import ConciliaError
from concilia.matching.schema import Candidate, ContractRecord, EquipmentRecord
from concilia.normalize import safe_str


class RosterError(ConciliaError):
    """Référentiel inutilisable (colonne attendue absente)."""


def _check_columns(df: pd.DataFrame, cols: list[str], roster: str) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise RosterError(
            f"Référentiel {roster}: colonne(s) absente(s): {', '.join(missing)}. "
            f"Colonnes: {', '.join(str(c) for c in df.columns)}"
        )


def _cell(row: pd.Series, col: str) -> str:
    val = row[col]
    return "" if pd.isna(val) else safe_str(val).strip()


def employees_from_df(
    df: pd.DataFrame,
    id_col: str = "id",
    name_col: str = "full_name",
) -> list[Candidate]:
    """Collaborateurs {id, nom complet}. Les lignes sans id ou sans nom sont ignorées."""
    _check_columns(df, [id_col, name_col], "collaborateurs")
    roster: list[Candidate] = []
    for _, row in df.iterrows():
        cid = _cell(row, id_col)
        name = _cell(row, name_col)
        if cid and name:
            roster.append(Candidate(cid, name))
    return roster


def contracts_from_df(
    df: pd.DataFrame,
    id_col: str = "id",
    number_col: str = "number",
    name_col: str = "client_name",
) -> list[ContractRecord]:
    """Contrats {id, numéro, client}. La colonne client est facultative."""
    _check_columns(df, [id_col, number_col], "contrats")
    has_name = name_col in df.columns
    roster: list[ContractRecord] = []
    for _, row in df.iterrows():
        cid = _cell(row, id_col)
        if not cid:
            continue
        roster.append(
            ContractRecord(
                cid,
                _cell(row, number_col),
                _cell(row, name_col) if has_name else "",
            )
        )
    return roster


def equipment_from_df(
    df: pd.DataFrame,
    id_col: str = "id",
    serial_col: str = "serial_number",
) -> list[EquipmentRecord]:
    """Équipements {id, numéro de série}."""
    _check_columns(df, [id_col, serial_col], "équipements")
    roster: list[EquipmentRecord] = []
    for _, row in df.iterrows():
        eid = _cell(row, id_col)
        if eid:
            roster.append(EquipmentRecord(eid, _cell(row, serial_col)))
    return roster
