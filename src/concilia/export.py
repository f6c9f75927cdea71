"""Export des lignes rapprochées et du fichier mapping.csv."""

from __future__ import annotations

import pandas as pd

from concilia.reconcile import ReconciliationOutcome

MAPPING_COLUMNS = ["line", "employee_name", "employee_id", "score", "contract_id", "status"]


def resolved_rows_df(outcome: ReconciliationOutcome) -> pd.DataFrame:
    """Lignes résolues, prêtes pour l'insertion (une colonne par champ)."""
    return pd.DataFrame([r.to_record() for r in outcome.resolved_rows])


def unresolved_rows_df(outcome: ReconciliationOutcome) -> pd.DataFrame:
    """Lignes écartées avec le nom saisi et les noms proches du référentiel."""
    rows = []
    for u in outcome.unresolved_rows:
        rows.append(
            {
                "line": u.row.line,
                "employee_name": u.row.employee_name_raw,
                "contract_ref": u.row.contract_ref,
                "suggestions": "; ".join(s.display_name for s in u.suggestions),
            }
        )
    return pd.DataFrame(rows, columns=["line", "employee_name", "contract_ref", "suggestions"])


def build_mapping_csv(
    outcome: ReconciliationOutcome,
    output_path: str,
) -> None:
    """
    Génère mapping.csv avec line, employee_name, employee_id, score, contract_id, status.

    Une ligne par ligne d'entrée, dans l'ordre d'origine.
    """
    rows: list[tuple[int, dict[str, object]]] = []
    for r in outcome.resolved_rows:
        rows.append(
            (
                r.position,
                {
                    "line": r.row.line,
                    "employee_name": r.row.employee_name_raw,
                    "employee_id": r.employee_id,
                    "score": r.employee_score,
                    "contract_id": r.contract_id or "",
                    "status": "fallback" if r.third_party_contract is not None else "resolved",
                },
            )
        )
    for u in outcome.unresolved_rows:
        rows.append(
            (
                u.position,
                {
                    "line": u.row.line,
                    "employee_name": u.row.employee_name_raw,
                    "employee_id": "",
                    "score": "",
                    "contract_id": "",
                    "status": "unresolved",
                },
            )
        )
    rows.sort(key=lambda item: item[0])
    df = pd.DataFrame([info for _, info in rows], columns=MAPPING_COLUMNS)
    df.to_csv(output_path, index=False, encoding="utf-8")
