"""Correspondance des colonnes du tableur vers les champs d'import."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

import pandas as pd

from concilia.config import ConfigError
from concilia.normalize import norm_header

logger = logging.getLogger(__name__)

LINE_KEY = "_line"
# Ligne 1 = en-têtes : la première ligne de données est la ligne 2 du tableur
FIRST_DATA_LINE = 2

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%d/%m/%Y",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%y",
)


def to_string(v: Any) -> str:
    return str(v).strip()


def to_number(v: Any) -> float:
    """Nombre décimal, virgule acceptée ("1.234,56" → 1234.56). Invalide → 0.0."""
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return float(v) if v == v else 0.0
    text = str(v).strip().replace(" ", "")
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    try:
        return float(text)
    except ValueError:
        return 0.0


def to_date(v: Any) -> str | None:
    """Date ISO (YYYY-MM-DD). Accepte ISO, JJ/MM/AAAA et objets date. Invalide → None."""
    if isinstance(v, (datetime, pd.Timestamp)):
        return v.date().isoformat()
    if isinstance(v, date):
        return v.isoformat()
    text = str(v).strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    return None


def to_status(v: Any) -> str:
    return str(v).strip().lower()


@dataclass(frozen=True)
class ColumnMapping:
    """Association colonne du tableur → champ d'import."""

    excel_column: str
    field: str
    required: bool = False
    transform: Callable[[Any], Any] | None = None
    default: Any = None  # valeur si la cellule est vide (champ facultatif)


@dataclass
class MappingResult:
    """Résultat de la correspondance des colonnes pour un lot de lignes."""

    data: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    total_rows: int = 0

    @property
    def valid_rows(self) -> int:
        return len(self.data)

    @property
    def success(self) -> bool:
        return not self.errors


ADVANCE_COLUMNS: list[ColumnMapping] = [
    ColumnMapping("Colaborador", "employee_name", required=True, transform=to_string),
    ColumnMapping("Contrato", "contract_ref", transform=to_string),
    ColumnMapping("Data", "date", required=True, transform=to_date),
    ColumnMapping("Valor", "value", required=True, transform=to_number),
    ColumnMapping("Motivo", "reason", transform=to_string),
    ColumnMapping("Status", "status", transform=to_status, default="pending"),
]

SERVICE_CALL_COLUMNS: list[ColumnMapping] = [
    ColumnMapping("Colaborador", "employee_name", required=True, transform=to_string),
    ColumnMapping("Contrato", "contract_ref", transform=to_string),
    ColumnMapping("Número de Série", "equipment_serial", transform=to_string),
    ColumnMapping("Data", "date", required=True, transform=to_date),
    ColumnMapping("Tipo", "type", transform=to_string),
    ColumnMapping("Descrição", "description", transform=to_string),
    ColumnMapping("Resolução", "resolution", transform=to_string),
    ColumnMapping("Status", "status", transform=to_status, default="open"),
]

COLUMNS_BY_KIND: dict[str, list[ColumnMapping]] = {
    "advance": ADVANCE_COLUMNS,
    "service_call": SERVICE_CALL_COLUMNS,
}


def get_columns(kind: str) -> list[ColumnMapping]:
    try:
        return COLUMNS_BY_KIND[kind]
    except KeyError:
        raise ConfigError(f"kind invalide: {kind!r}. Valides: {sorted(COLUMNS_BY_KIND)}") from None


def _is_empty(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, float) and v != v:
        return True
    return isinstance(v, str) and v.strip() == ""


def _get_cell(row: dict[str, Any], excel_column: str, headers: dict[str, str]) -> Any:
    if excel_column in row:
        return row[excel_column]
    key = headers.get(norm_header(excel_column))
    return row.get(key) if key is not None else None


def _row_headers(row: dict[str, Any]) -> dict[str, str]:
    """En-tête normalisé → en-tête d'origine, pour une ligne (le premier l'emporte)."""
    headers: dict[str, str] = {}
    for k in row:
        headers.setdefault(norm_header(k), k)
    return headers


def map_records(
    records: Iterable[dict[str, Any]],
    mappings: list[ColumnMapping],
    *,
    first_line: int = FIRST_DATA_LINE,
) -> MappingResult:
    """
    Applique les correspondances de colonnes à des lignes déjà décodées.

    Les en-têtes sont comparés tels quels, puis normalisés ("Contrato:" et
    "contrato" désignent la même colonne), ligne par ligne : une cellule absente
    d'une ligne est traitée comme vide. Une ligne dont un champ obligatoire est
    vide, ou dont une conversion échoue, est écartée avec un message d'erreur.

    Args:
        records: Lignes {en-tête: valeur}.
        mappings: Correspondances à appliquer.
        first_line: Numéro de ligne tableur de la première ligne de données.

    Returns:
        MappingResult avec les lignes valides (clé LINE_KEY = numéro de ligne).
    """
    result = MappingResult()

    for offset, row in enumerate(records):
        result.total_rows += 1
        line = first_line + offset
        # Les lignes creuses n'ont pas toutes les mêmes en-têtes
        headers = _row_headers(row)

        mapped: dict[str, Any] = {LINE_KEY: line}
        is_valid = True
        for m in mappings:
            value = _get_cell(row, m.excel_column, headers)
            if _is_empty(value):
                if m.required:
                    result.errors.append(f'Ligne {line}: champ "{m.excel_column}" obligatoire')
                    is_valid = False
                else:
                    mapped[m.field] = m.default
                continue
            try:
                converted = m.transform(value) if m.transform else value
            except (TypeError, ValueError) as e:
                result.errors.append(f'Ligne {line}: erreur de conversion du champ "{m.excel_column}" ({e})')
                is_valid = False
                continue
            if m.required and converted is None:
                result.errors.append(f'Ligne {line}: valeur invalide pour le champ "{m.excel_column}": {value!r}')
                is_valid = False
                continue
            mapped[m.field] = converted

        if is_valid:
            result.data.append(mapped)

    logger.info("Colonnes: %d/%d lignes valides", result.valid_rows, result.total_rows)
    return result


def build_template_df(kind: str) -> pd.DataFrame:
    """Tableur vide avec les en-têtes attendus pour un type d'import."""
    return pd.DataFrame(columns=[m.excel_column for m in get_columns(kind)])
