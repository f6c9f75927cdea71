"""Tests du module I/O Excel."""

from pathlib import Path

import pandas as pd

from concilia.io_excel import list_sheets, load_sheet, records_from_df, save_xlsx


def test_list_sheets(tmp_path: Path) -> None:
    path = tmp_path / "test.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as w:
        pd.DataFrame({"a": [1]}).to_excel(w, sheet_name="Planilha1", index=False)
        pd.DataFrame({"x": [1]}).to_excel(w, sheet_name="Planilha2", index=False)
    sheets = list_sheets(path)
    assert sheets == ["Planilha1", "Planilha2"]


def test_list_sheets_csv(tmp_path: Path) -> None:
    path = tmp_path / "rows.csv"
    path.write_text("a,b\n1,2\n", encoding="utf-8")
    assert len(list_sheets(path)) == 1


def test_load_sheet_default_first_preserves_text(tmp_path: Path) -> None:
    path = tmp_path / "test.xlsx"
    pd.DataFrame({"Colaborador": ["Ana Costa", "Maria Silva"], "Valor": [10, 20]}).to_excel(
        path, index=False, engine="openpyxl"
    )
    df = load_sheet(path)
    assert len(df) == 2
    assert list(df.columns) == ["Colaborador", "Valor"]
    assert df.iloc[0]["Valor"] == "10"


def test_load_sheet_header_row(tmp_path: Path) -> None:
    path = tmp_path / "test.xlsx"
    raw = pd.DataFrame([["Relatório de adiantamentos", None], ["Colaborador", "Valor"], ["Ana Costa", "10"]])
    raw.to_excel(path, index=False, header=False, engine="openpyxl")
    df = load_sheet(path, header_row=2)
    assert list(df.columns) == ["Colaborador", "Valor"]
    assert df.iloc[0]["Colaborador"] == "Ana Costa"


def test_load_csv_semicolon(tmp_path: Path) -> None:
    path = tmp_path / "rows.csv"
    path.write_text("Colaborador;Valor\nAna Costa;10,5\nMaria Silva;3\n", encoding="utf-8")
    df = load_sheet(path)
    assert list(df.columns) == ["Colaborador", "Valor"]
    assert df.iloc[0]["Valor"] == "10,5"


def test_load_csv_latin1(tmp_path: Path) -> None:
    path = tmp_path / "rows.csv"
    path.write_bytes("Colaborador;Descrição\nJoão Lima;ok\n".encode("latin-1"))
    df = load_sheet(path)
    assert list(df.columns) == ["Colaborador", "Descrição"]
    assert df.iloc[0]["Colaborador"] == "João Lima"


def test_records_from_df_empty_cells() -> None:
    df = pd.DataFrame({"a": ["x", None], "b": [float("nan"), "y"]})
    assert records_from_df(df) == [{"a": "x", "b": None}, {"a": None, "b": "y"}]


def test_save_xlsx(tmp_path: Path) -> None:
    path = tmp_path / "out.xlsx"
    save_xlsx(path, {"Resolved": pd.DataFrame({"a": [1]}), "REPORT": pd.DataFrame({"b": [2]})})
    xl = pd.ExcelFile(path, engine="openpyxl")
    assert xl.sheet_names == ["Resolved", "REPORT"]
    xl.close()
