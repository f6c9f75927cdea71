"""Concilia - Rapprochement des imports tableur avec les référentiels (collaborateurs, contrats, équipements)."""

from concilia.config import ConciliaError, ConfigError, ConfigFileError
from concilia.io_excel import ExcelFileError
from concilia.rosters import RosterError

__all__ = [
    "__version__",
    "ConciliaError",
    "ConfigError",
    "ConfigFileError",
    "ExcelFileError",
    "RosterError",
]

__version__ = "0.1.0"
