"""Configuration et chargement du fichier config JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

VALID_KINDS = frozenset({"advance", "service_call"})


class ConciliaError(Exception):
    """Exception de base pour Concilia."""


class ConfigError(ConciliaError, ValueError):
    """Erreur de validation de la configuration."""


class ConfigFileError(ConciliaError):
    """Erreur de chargement du fichier de configuration (fichier absent, JSON invalide)."""


@dataclass
class Config:
    """Configuration d'un import : fichier de lignes, référentiels et options de résolution."""

    kind: str = "advance"  # advance, service_call
    rows_file: str = ""
    rows_sheet: str | None = None  # None = première feuille
    header_row: int = 1

    employees_file: str = ""
    employees_sheet: str | None = None
    employee_id_col: str = "id"
    employee_name_col: str = "full_name"

    contracts_file: str | None = None
    contracts_sheet: str | None = None
    contract_id_col: str = "id"
    contract_number_col: str = "number"
    contract_name_col: str = "client_name"

    equipment_file: str | None = None
    equipment_sheet: str | None = None
    equipment_id_col: str = "id"
    equipment_serial_col: str = "serial_number"

    fallback_contract_id: str | None = None
    name_folds: dict[str, str] = field(default_factory=dict)  # variante -> forme canonique
    suggest_limit: int = 3

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Config:
        kind = d.get("kind", "advance")
        rows_file = d.get("rows_file", "")
        employees_file = d.get("employees_file", "")
        header_row = int(d.get("header_row", 1))
        suggest_limit = int(d.get("suggest_limit", 3))
        name_folds = d.get("name_folds", {})
        fallback = d.get("fallback_contract_id")

        if kind not in VALID_KINDS:
            raise ConfigError(f"kind invalide: {kind!r}. Valides: {sorted(VALID_KINDS)}")
        if not rows_file:
            raise ConfigError("rows_file requis")
        if not employees_file:
            raise ConfigError("employees_file requis (référentiel des collaborateurs)")
        if header_row < 1:
            raise ConfigError(f"header_row doit être >= 1 (got {header_row})")
        if suggest_limit < 0:
            raise ConfigError(f"suggest_limit doit être >= 0 (got {suggest_limit})")
        if not isinstance(name_folds, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in name_folds.items()
        ):
            raise ConfigError("name_folds doit être un objet {variante: forme canonique}")
        if fallback is not None and not str(fallback).strip():
            raise ConfigError("fallback_contract_id ne peut pas être vide")

        return cls(
            kind=kind,
            rows_file=rows_file,
            rows_sheet=d.get("rows_sheet"),
            header_row=header_row,
            employees_file=employees_file,
            employees_sheet=d.get("employees_sheet"),
            employee_id_col=d.get("employee_id_col", "id"),
            employee_name_col=d.get("employee_name_col", "full_name"),
            contracts_file=d.get("contracts_file"),
            contracts_sheet=d.get("contracts_sheet"),
            contract_id_col=d.get("contract_id_col", "id"),
            contract_number_col=d.get("contract_number_col", "number"),
            contract_name_col=d.get("contract_name_col", "client_name"),
            equipment_file=d.get("equipment_file"),
            equipment_sheet=d.get("equipment_sheet"),
            equipment_id_col=d.get("equipment_id_col", "id"),
            equipment_serial_col=d.get("equipment_serial_col", "serial_number"),
            fallback_contract_id=str(fallback).strip() if fallback is not None else None,
            name_folds=dict(name_folds),
            suggest_limit=suggest_limit,
        )

    @classmethod
    def load(cls, path: str | Path) -> Config:
        """
        Charge la configuration depuis un fichier JSON.

        Raises:
            ConfigFileError: Si le fichier est absent ou le JSON invalide.
            ConfigError: Si la configuration est invalide.
        """
        path = Path(path).resolve()
        if not path.exists():
            raise ConfigFileError(f"Fichier de configuration introuvable: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                d = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFileError(f"JSON invalide dans {path}: {e}") from e
        except OSError as e:
            raise ConfigFileError(f"Impossible de lire {path}: {e}") from e

        if not isinstance(d, dict):
            raise ConfigFileError(f"Fichier de configuration invalide: {path} doit contenir un objet JSON")

        config = cls.from_dict(d)
        config.resolve_paths(path.parent)
        return config

    def resolve_paths(self, base_dir: Path) -> None:
        """
        Résout les chemins relatifs par rapport au répertoire de base (ex. dossier du fichier config).

        Modifie rows_file, employees_file, contracts_file et equipment_file en place.
        """
        base = Path(base_dir)

        def _resolve(p: str | None) -> str | None:
            if p and not Path(p).is_absolute():
                return str((base / p).resolve())
            return p

        self.rows_file = _resolve(self.rows_file) or ""
        self.employees_file = _resolve(self.employees_file) or ""
        self.contracts_file = _resolve(self.contracts_file)
        self.equipment_file = _resolve(self.equipment_file)
