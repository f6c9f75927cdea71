"""Tests des cas d'erreur."""

from pathlib import Path

import pandas as pd
import pytest

from concilia.cli import main
from concilia.config import Config, ConfigFileError
from concilia.io_excel import ExcelFileError, list_sheets, load_sheet


def test_config_load_file_not_found(tmp_path: Path) -> None:
    """Config.load() lève ConfigFileError si le fichier n'existe pas."""
    missing = tmp_path / "inexistant.json"
    with pytest.raises(ConfigFileError, match="introuvable"):
        Config.load(missing)


def test_config_load_invalid_json(tmp_path: Path) -> None:
    """Config.load() lève ConfigFileError si le JSON est invalide."""
    bad_json = tmp_path / "config.json"
    bad_json.write_text("{ invalid json }", encoding="utf-8")
    with pytest.raises(ConfigFileError, match="JSON invalide"):
        Config.load(bad_json)


def test_config_load_not_dict(tmp_path: Path) -> None:
    """Config.load() lève ConfigFileError si le JSON n'est pas un objet."""
    bad_config = tmp_path / "config.json"
    bad_config.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ConfigFileError, match="objet JSON"):
        Config.load(bad_config)


def test_load_sheet_file_not_found(tmp_path: Path) -> None:
    """load_sheet() lève ExcelFileError si le fichier n'existe pas."""
    missing = tmp_path / "inexistant.xlsx"
    with pytest.raises(ExcelFileError, match="introuvable"):
        load_sheet(missing)
    with pytest.raises(ExcelFileError, match="introuvable"):
        list_sheets(missing)


def test_load_sheet_missing_sheet(tmp_path: Path) -> None:
    """load_sheet() lève ExcelFileError si la feuille n'existe pas."""
    xlsx = tmp_path / "test.xlsx"
    pd.DataFrame({"a": [1]}).to_excel(xlsx, sheet_name="Planilha1", index=False, engine="openpyxl")
    with pytest.raises(ExcelFileError, match="Feuille 'Inexistante' introuvable"):
        load_sheet(xlsx, sheet_name="Inexistante")


def test_cli_config_error_exit_code(capsys: pytest.CaptureFixture) -> None:
    """La CLI retourne 1 et affiche un message en cas d'erreur."""
    exit_code = main(["run", "--config", "/chemin/inexistant.json", "--dry-run"])
    assert exit_code == 1
    assert "Erreur" in capsys.readouterr().out


def test_cli_roster_error_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    """Un référentiel sans la colonne attendue fait échouer la CLI proprement."""
    rows = tmp_path / "rows.xlsx"
    employees = tmp_path / "employees.xlsx"
    pd.DataFrame({"Colaborador": ["Ana Costa"], "Data": ["2024-01-02"], "Valor": ["1"]}).to_excel(
        rows, index=False, engine="openpyxl"
    )
    pd.DataFrame({"id": ["e1"], "nome": ["Ana Costa"]}).to_excel(employees, index=False, engine="openpyxl")
    config_path = tmp_path / "config.json"
    config_path.write_text(
        '{"rows_file": "rows.xlsx", "employees_file": "employees.xlsx"}',
        encoding="utf-8",
    )
    exit_code = main(["run", "--config", str(config_path), "--dry-run"])
    assert exit_code == 1
    assert "full_name" in capsys.readouterr().out
