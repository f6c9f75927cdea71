"""Crée des fichiers Excel de démonstration pour Concilia (import d'adiantamentos)."""

import json
from pathlib import Path

import pandas as pd

DATA_DIR = Path(__file__).parent / "data"
DATA_DIR.mkdir(exist_ok=True)

employees = pd.DataFrame({
    "id": ["e1", "e2", "e3", "e4"],
    "full_name": [
        "Luís Carlos Andrade Souza",
        "Maria Aparecida Silva",
        "Sérgio Ramos Pereira",
        "João Batista Lima",
    ],
})

contracts = pd.DataFrame({
    "id": ["c1", "c2", "c99"],
    "number": ["CT-001/2024", "CT-002/2024", "CT-999"],
    "client_name": ["Prefeitura de Campinas", "DER São Paulo", "Terceiros / Infraestrutura"],
})

advances = pd.DataFrame({
    "Colaborador": ["Luiz C. Souza", "Maria Silva", "Sergio Pereira", "Zé Lima", "Pedro"],
    "Contrato:": ["CT-001/2024", "der sao paulo", "Obra avulsa", "CT-002/2024", ""],
    "Data": ["2024-03-05", "06/03/2024", "2024-03-07", "2024-03-08", "2024-03-09"],
    "Valor": ["500,00", "250", "1.200,50", "300", "100"],
    "Motivo": ["Viagem", "Saúde", "Ferramentas", "Viagem", "Outros"],
})

employees.to_excel(DATA_DIR / "employees.xlsx", index=False, engine="openpyxl")
contracts.to_excel(DATA_DIR / "contracts.xlsx", index=False, engine="openpyxl")
advances.to_excel(DATA_DIR / "advances.xlsx", index=False, engine="openpyxl")

config = {
    "kind": "advance",
    "rows_file": "advances.xlsx",
    "employees_file": "employees.xlsx",
    "contracts_file": "contracts.xlsx",
    "fallback_contract_id": "c99",
}
(DATA_DIR / "config.json").write_text(json.dumps(config, indent=2), encoding="utf-8")
print(f"Fichiers créés dans {DATA_DIR}")
