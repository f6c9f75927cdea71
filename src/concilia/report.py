"""Génération du rapport et onglet REPORT."""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from concilia import __version__
from concilia.columns import MappingResult
from concilia.config import Config
from concilia.reconcile import ReconciliationOutcome


def summary_message(outcome: ReconciliationOutcome) -> str:
    """Message court pour l'utilisateur, ex. "37 lignes importées, 4 ignorées (collaborateur introuvable)"."""
    n_ok = len(outcome.resolved_rows)
    parts = [f"{n_ok} ligne{'s' if n_ok != 1 else ''} importée{'s' if n_ok != 1 else ''}"]
    if outcome.unresolved_count:
        n = outcome.unresolved_count
        parts.append(f"{n} ignorée{'s' if n != 1 else ''} (collaborateur introuvable)")
    if outcome.fallback_count:
        n = outcome.fallback_count
        parts.append(f"{n} rattachée{'s' if n != 1 else ''} au contrat de repli")
    return ", ".join(parts)


def _counts(outcome: ReconciliationOutcome) -> dict[str, int]:
    return {
        "nb_rows": outcome.total_rows,
        "nb_resolved": len(outcome.resolved_rows),
        "nb_unresolved_employee": outcome.unresolved_count,
        "nb_fallback_contract": outcome.fallback_count,
        "nb_without_contract": sum(1 for r in outcome.resolved_rows if r.contract_id is None),
        "nb_with_equipment": sum(1 for r in outcome.resolved_rows if r.equipment_id is not None),
    }


def build_report_df(
    outcome: ReconciliationOutcome,
    config: Config,
    mapping_result: MappingResult | None = None,
) -> pd.DataFrame:
    """
    Construit le DataFrame pour l'onglet REPORT.

    Contient : nb lignes, nb résolues, nb écartées, nb contrat de repli, erreurs de
    colonnes, paramètres, horodatage, version.
    """
    rows: list[tuple[str, object]] = [("Metric", "Value")]
    if mapping_result is not None:
        rows.extend(
            [
                ("nb_sheet_rows", mapping_result.total_rows),
                ("nb_column_errors", len(mapping_result.errors)),
            ]
        )
    rows.extend(_counts(outcome).items())
    rows.extend(
        [
            ("", ""),
            ("Parameters", ""),
            ("kind", config.kind),
            ("rows_file", config.rows_file),
            ("employees_file", config.employees_file),
            ("contracts_file", config.contracts_file or ""),
            ("equipment_file", config.equipment_file or ""),
            ("fallback_contract_id", config.fallback_contract_id or ""),
        ]
    )
    for variant, canonical in config.name_folds.items():
        rows.append((f"fold_{variant}", canonical))
    rows.extend(
        [
            ("", ""),
            ("summary", summary_message(outcome)),
            ("timestamp", datetime.now().isoformat()),
            ("version", __version__),
        ]
    )
    return pd.DataFrame(rows, columns=["Key", "Value"])


def print_report_console(
    outcome: ReconciliationOutcome,
    mapping_result: MappingResult | None = None,
) -> None:
    """Affiche un résumé du rapport en console."""
    counts = _counts(outcome)

    print("\n=== Concilia Report ===")
    if mapping_result is not None:
        print(f"  Lignes tableur:       {mapping_result.total_rows}")
        print(f"  Erreurs colonnes:     {len(mapping_result.errors)}")
    print(f"  Lignes rapprochées:   {counts['nb_rows']}")
    print(f"  Résolues:             {counts['nb_resolved']}")
    print(f"  Collab. introuvable:  {counts['nb_unresolved_employee']}")
    print(f"  Contrat de repli:     {counts['nb_fallback_contract']}")
    print(f"  Sans contrat:         {counts['nb_without_contract']}")
    print(f"  Version:              {__version__}")
    print(f"  Timestamp:            {datetime.now().isoformat()}")
    for u in outcome.unresolved_rows:
        where = f"ligne {u.row.line}" if u.row.line is not None else f"#{u.position}"
        hint = ", ".join(str(s) for s in u.suggestions) or "-"
        print(f"  ! {where}: {u.row.employee_name_raw!r} introuvable (proches: {hint})")
    print("=======================\n")
