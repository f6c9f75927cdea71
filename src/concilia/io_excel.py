"""I/O tableurs : chargement et sauvegarde (Excel, ODS, CSV)."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from concilia.config import ConciliaError

logger = logging.getLogger(__name__)

_CSV_DELIMITERS = [",", ";", "\t", "|"]


class ExcelFileError(ConciliaError):
    """Erreur de chargement d'un fichier (fichier absent, feuille inexistante)."""


def _get_engine(path: Path) -> str | None:
    """Retourne le moteur pandas selon l'extension, ou None pour auto."""
    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        return "openpyxl"
    if suffix == ".xls":
        return "xlrd"
    if suffix in (".ods", ".odt"):
        return "odf"
    return None


def _is_csv(path: Path) -> bool:
    return path.suffix.lower() == ".csv"


def _detect_csv_delimiter(path: Path, encoding: str, *, skip_rows: int = 0) -> str | None:
    with path.open("r", encoding=encoding) as f:
        for _ in range(skip_rows):
            if f.readline() == "":
                return None
        sample_lines: list[str] = []
        for line in f:
            if line.strip() == "":
                continue
            sample_lines.append(line)
            if len(sample_lines) >= 5:
                break
    if not sample_lines:
        return None
    try:
        dialect = csv.Sniffer().sniff("".join(sample_lines), delimiters=_CSV_DELIMITERS)
        return dialect.delimiter
    except csv.Error:
        first = sample_lines[0]
        counts = {d: first.count(d) for d in _CSV_DELIMITERS}
        best = max(counts, key=lambda d: counts[d])
        return best if counts[best] > 0 else None


def _open_excel(path: Path) -> pd.ExcelFile:
    engine = _get_engine(path)
    try:
        return pd.ExcelFile(path, engine=engine) if engine else pd.ExcelFile(path)
    except ImportError as e:
        ext = path.suffix.lower()
        if ext == ".xls":
            raise ExcelFileError("Format .xls requis: pip install xlrd") from e
        if ext in (".ods", ".odt"):
            raise ExcelFileError("Format ODS requis: pip install odfpy") from e
        raise ExcelFileError(f"Impossible de lire {path}: {e}") from e
    except Exception as e:
        raise ExcelFileError(f"Impossible de lire le fichier {path}: {e}") from e


def list_sheets(filepath: str | Path) -> list[str]:
    """
    Liste les noms des feuilles d'un fichier tableur.

    Formats supportés : .xlsx, .xls, .ods, .csv (une seule "feuille" pour CSV).

    Raises:
        ExcelFileError: Si le fichier est absent ou illisible.
    """
    path = Path(filepath)
    if not path.exists():
        raise ExcelFileError(f"Fichier introuvable: {path}")
    if _is_csv(path):
        return ["(données)"]
    with _open_excel(path) as xl:
        return [str(s) for s in xl.sheet_names]


def _load_csv(path: Path, header_idx: int) -> pd.DataFrame:
    skiprows = range(header_idx) if header_idx > 0 else None
    last_error: Exception | None = None
    for encoding in ("utf-8", "latin-1"):
        try:
            delimiter = _detect_csv_delimiter(path, encoding, skip_rows=header_idx) or ","
            return pd.read_csv(
                path,
                dtype=str,
                encoding=encoding,
                header=0,
                skiprows=skiprows,
                sep=delimiter,
            )
        except UnicodeDecodeError as e:
            last_error = e
            continue
        except pd.errors.EmptyDataError:
            return pd.DataFrame()
        except (pd.errors.ParserError, OSError) as e:
            raise ExcelFileError(
                f"Erreur CSV {path}: {e}. Vérifiez la ligne d'en-tête et le séparateur."
            ) from e
    raise ExcelFileError(f"Erreur CSV {path}: {last_error}")


def load_sheet(
    filepath: str | Path,
    sheet_name: str | None = None,
    *,
    header_row: int = 1,
) -> pd.DataFrame:
    """
    Charge une feuille dans un DataFrame en préservant le texte (dtype=str).

    Formats supportés : .xlsx, .xls, .ods, .csv.

    Args:
        filepath: Chemin vers le fichier.
        sheet_name: Nom de la feuille (None = première). Ignoré pour CSV.
        header_row: Numéro de ligne (1-based) contenant les en-têtes.

    Returns:
        DataFrame chargé.

    Raises:
        ExcelFileError: Si le fichier est absent, illisible ou si la feuille n'existe pas.
    """
    path = Path(filepath)
    if not path.exists():
        raise ExcelFileError(f"Fichier introuvable: {path}")

    header_idx = max(header_row - 1, 0)
    if _is_csv(path):
        df = _load_csv(path, header_idx)
        logger.info("Chargé %s: %d lignes", path.name, len(df))
        return df

    with _open_excel(path) as xl:
        if sheet_name is None:
            sheet_name = str(xl.sheet_names[0])
        elif sheet_name not in xl.sheet_names:
            sheets = [str(s) for s in xl.sheet_names]
            raise ExcelFileError(
                f"Feuille '{sheet_name}' introuvable dans {path}. Feuilles: {', '.join(sheets)}"
            )
        try:
            df = pd.read_excel(xl, sheet_name=sheet_name, dtype=str, header=header_idx)
        except Exception as e:
            raise ExcelFileError(f"Erreur feuille '{sheet_name}' dans {path}: {e}") from e

    logger.info("Chargé %s [%s]: %d lignes", path.name, sheet_name, len(df))
    return df  # type: ignore[return-value]


def records_from_df(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Lignes d'un DataFrame en dictionnaires {en-tête: valeur}, cellules vides → None."""
    records: list[dict[str, Any]] = []
    for row in df.to_dict(orient="records"):
        records.append({str(k): (None if pd.isna(v) else v) for k, v in row.items()})
    return records


def save_xlsx(
    filepath: str | Path,
    dataframes: dict[str, pd.DataFrame],
    *,
    index: bool = False,
) -> None:
    """
    Sauvegarde plusieurs DataFrames dans un fichier xlsx (une feuille par DataFrame).

    Args:
        filepath: Chemin de sortie.
        dataframes: Dict {nom_feuille: DataFrame}, dans l'ordre des feuilles.
    """
    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        for sheet_name, df in dataframes.items():
            # Nettoyer le nom de feuille (Excel limite à 31 caractères)
            safe_name = str(sheet_name)[:31]
            df.to_excel(writer, sheet_name=safe_name, index=index)
