"""Interface en ligne de commande Concilia."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from concilia import __version__
from concilia.columns import COLUMNS_BY_KIND, build_template_df, get_columns, map_records
from concilia.config import ConciliaError, Config
from concilia.export import build_mapping_csv, resolved_rows_df, unresolved_rows_df
from concilia.io_excel import list_sheets, load_sheet, records_from_df, save_xlsx
from concilia.logging_config import configure_logging
from concilia.matching.resolver import NameResolver
from concilia.matching.schema import ContractRecord, EquipmentRecord
from concilia.reconcile import ImportReconciler
from concilia.report import build_report_df, print_report_console, summary_message
from concilia.rosters import contracts_from_df, employees_from_df, equipment_from_df
from concilia.rows import build_rows

logger = logging.getLogger(__name__)


def cmd_list_sheets(filepath: str) -> int:
    """Liste les feuilles d'un fichier tableur."""
    sheets = list_sheets(filepath)
    print(f"Feuilles dans {filepath}:")
    for s in sheets:
        print(f"  - {s}")
    return 0


def cmd_template(kind: str, output_path: str) -> int:
    """Écrit un tableur modèle vide avec les en-têtes attendus."""
    save_xlsx(output_path, {"Template": build_template_df(kind)})
    print(f"Modèle écrit: {output_path}")
    return 0


def _load_contracts(config: Config) -> list[ContractRecord]:
    if not config.contracts_file:
        return []
    df = load_sheet(config.contracts_file, config.contracts_sheet)
    return contracts_from_df(df, config.contract_id_col, config.contract_number_col, config.contract_name_col)


def _load_equipment(config: Config) -> list[EquipmentRecord] | None:
    if not config.equipment_file:
        return None
    df = load_sheet(config.equipment_file, config.equipment_sheet)
    return equipment_from_df(df, config.equipment_id_col, config.equipment_serial_col)


def cmd_run(
    config_path: str,
    output_path: str | None,
    *,
    dry_run: bool = False,
    mapping_path: str | None = None,
) -> int:
    """Exécute le pipeline Concilia."""
    config = Config.load(config_path)

    df_rows = load_sheet(config.rows_file, config.rows_sheet, header_row=config.header_row)
    mapping_result = map_records(
        records_from_df(df_rows),
        get_columns(config.kind),
        first_line=config.header_row + 1,
    )
    for err in mapping_result.errors:
        print(f"Avertissement: {err}")
    rows = build_rows(config.kind, mapping_result.data)

    employees = employees_from_df(
        load_sheet(config.employees_file, config.employees_sheet),
        config.employee_id_col,
        config.employee_name_col,
    )
    contracts = _load_contracts(config)
    equipment = _load_equipment(config)
    logger.info(
        "Référentiels: %d collaborateurs, %d contrats, %s équipements",
        len(employees),
        len(contracts),
        len(equipment) if equipment is not None else "-",
    )

    reconciler = ImportReconciler(NameResolver(config.name_folds), suggest_limit=config.suggest_limit)
    outcome = reconciler.reconcile(rows, employees, contracts, equipment, config.fallback_contract_id)

    # mapping.csv (--mapping prime s'il est fourni)
    map_path = (
        Path(mapping_path)
        if mapping_path
        else (Path(output_path).parent / "mapping.csv" if output_path else Path(config_path).parent / "mapping.csv")
    )
    build_mapping_csv(outcome, str(map_path))
    print(f"Mapping écrit: {map_path}")

    print_report_console(outcome, mapping_result)

    if not rows:
        print("Erreur: aucune ligne valide dans le fichier à importer.")
        return 1
    if not outcome.resolved_rows:
        print("Erreur: aucun collaborateur reconnu, import annulé.")
        return 1
    print(summary_message(outcome))

    if dry_run:
        print("Mode dry-run: pas d'écriture du fichier de sortie.")
        return 0

    if not output_path:
        print("Erreur: --output requis en mode non dry-run.")
        return 1

    sheets = {
        "Resolved": resolved_rows_df(outcome),
        "Unresolved": unresolved_rows_df(outcome),
        "REPORT": build_report_df(outcome, config, mapping_result),
    }
    save_xlsx(output_path, sheets)
    print(f"Fichier de sortie: {output_path}")

    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="concilia",
        description="Rapprochement des imports tableur avec les référentiels (collaborateurs, contrats, équipements)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Logs détaillés (INFO)")

    subparsers = parser.add_subparsers(dest="command", help="Commandes")

    # list-sheets
    p_list = subparsers.add_parser("list-sheets", help="Lister les feuilles d'un tableur")
    p_list.add_argument("file", help="Fichier xlsx, xls, ods ou csv")

    # template
    p_tpl = subparsers.add_parser("template", help="Écrire un tableur modèle")
    p_tpl.add_argument("--kind", "-k", required=True, choices=sorted(COLUMNS_BY_KIND), help="Type d'import")
    p_tpl.add_argument("--output", "-o", required=True, help="Fichier xlsx de sortie")

    # run
    p_run = subparsers.add_parser("run", help="Exécuter le rapprochement")
    p_run.add_argument("--config", "-c", required=True, help="Fichier config JSON")
    p_run.add_argument("--output", "-o", help="Fichier xlsx de sortie")
    p_run.add_argument("--dry-run", action="store_true", help="Ne pas écrire le fichier de sortie")
    p_run.add_argument("--mapping", "-m", help="Chemin pour mapping.csv")

    args = parser.parse_args(argv)
    configure_logging(logging.INFO if args.verbose else None)

    try:
        if args.command == "list-sheets":
            return cmd_list_sheets(args.file)

        if args.command == "template":
            return cmd_template(args.kind, args.output)

        if args.command == "run":
            if not args.dry_run and not args.output:
                parser.error("--output requis sauf en --dry-run")
            return cmd_run(
                args.config,
                args.output,
                dry_run=args.dry_run,
                mapping_path=args.mapping,
            )
    except ConciliaError as e:
        print(f"Erreur: {e}")
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
