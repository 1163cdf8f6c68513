"""I/O fichiers : lecture des données à importer et écriture des enregistrements."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import pandas as pd

from smartimport.config import InputFileError

SPREADSHEET_EXTENSIONS = (".xlsx", ".xls", ".ods")
SUPPORTED_OUTPUT_EXTENSIONS = (".json", ".csv", ".xlsx")


def _get_engine(path: Path) -> str | None:
    """Retourne le moteur pandas selon l'extension, ou None pour auto."""
    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        return "openpyxl"
    if suffix == ".xls":
        return "xlrd"
    if suffix == ".ods":
        return "odf"
    return None


def is_spreadsheet(path: str | Path) -> bool:
    return Path(path).suffix.lower() in SPREADSHEET_EXTENSIONS


def load_sheet(filepath: str | Path, sheet_name: str | None = None) -> pd.DataFrame:
    """
    Charge une feuille de tableur en préservant le texte (toutes cellules en str).

    Raises:
        InputFileError: Si le fichier est absent, illisible ou si la feuille n'existe pas.
    """
    path = Path(filepath)
    if not path.exists():
        raise InputFileError(f"Fichier introuvable: {path}")

    engine = _get_engine(path)
    try:
        xl = pd.ExcelFile(path, engine=engine) if engine else pd.ExcelFile(path)
    except ImportError as e:
        ext = path.suffix.lower()
        if ext == ".xls":
            raise InputFileError("Format .xls requis: pip install xlrd") from e
        if ext == ".ods":
            raise InputFileError("Format ODS requis: pip install odfpy") from e
        raise InputFileError(f"Impossible de lire {path}: {e}") from e
    except Exception as e:
        raise InputFileError(f"Impossible de lire le fichier {path}: {e}") from e

    with xl:
        if sheet_name is None:
            sheet_name = str(xl.sheet_names[0])
        elif sheet_name not in xl.sheet_names:
            sheets = [str(s) for s in xl.sheet_names]
            raise InputFileError(
                f"Feuille '{sheet_name}' introuvable dans {path}. Feuilles: {', '.join(sheets)}"
            )
        try:
            df = pd.read_excel(xl, sheet_name=sheet_name, dtype=str)
        except Exception as e:
            raise InputFileError(f"Erreur feuille '{sheet_name}' dans {path}: {e}") from e
    return df.fillna("")  # type: ignore[return-value]


def read_input_text(
    filepath: str | Path,
    *,
    encoding: str = "utf-8",
    sheet_name: str | None = None,
) -> str:
    """
    Lit le contenu à importer sous forme de texte.

    Les tableurs sont convertis en CSV ; les autres fichiers sont lus tels
    quels (repli latin-1 si l'encodage demandé échoue). ``-`` lit l'entrée
    standard.

    Raises:
        InputFileError: Si le fichier est absent ou illisible.
    """
    if str(filepath) == "-":
        return sys.stdin.read()

    path = Path(filepath)
    if not path.exists():
        raise InputFileError(f"Fichier introuvable: {path}")
    if is_spreadsheet(path):
        return load_sheet(path, sheet_name).to_csv(index=False)

    try:
        return path.read_text(encoding=encoding)
    except UnicodeDecodeError:
        try:
            return path.read_text(encoding="latin-1")
        except OSError as e:
            raise InputFileError(f"Impossible de lire {path}: {e}") from e
    except (OSError, LookupError) as e:
        raise InputFileError(f"Impossible de lire {path}: {e}") from e


def items_to_df(items: list[dict[str, Any]]) -> pd.DataFrame:
    """DataFrame des enregistrements ; les listes deviennent « a, b »."""
    flat = [
        {k: ", ".join(v) if isinstance(v, list) else v for k, v in item.items()}
        for item in items
    ]
    return pd.DataFrame(flat)


def save_xlsx(filepath: str | Path, dataframes: dict[str, pd.DataFrame]) -> None:
    """
    Sauvegarde plusieurs DataFrames dans un fichier xlsx (une feuille par DataFrame).

    Args:
        filepath: Chemin de sortie.
        dataframes: Dict {nom_feuille: DataFrame}.
    """
    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        for sheet_name, df in dataframes.items():
            # Excel limite les noms de feuille à 31 caractères
            safe_name = str(sheet_name)[:31]
            df.to_excel(writer, sheet_name=safe_name, index=False)


def save_items(
    filepath: str | Path,
    items: list[dict[str, Any]],
    *,
    report_df: pd.DataFrame | None = None,
) -> None:
    """
    Écrit les enregistrements acceptés (.json, .csv ou .xlsx).

    Pour .xlsx, le rapport éventuel est ajouté dans l'onglet REPORT.

    Raises:
        InputFileError: Si le format de sortie n'est pas supporté ou l'écriture échoue.
    """
    path = Path(filepath)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_OUTPUT_EXTENSIONS:
        raise InputFileError(
            f"Format de sortie non supporté: {suffix or path.name}. "
            f"Valides: {', '.join(SUPPORTED_OUTPUT_EXTENSIONS)}"
        )
    try:
        if suffix == ".json":
            with open(path, "w", encoding="utf-8") as f:
                json.dump(items, f, ensure_ascii=False, indent=2)
                f.write("\n")
        elif suffix == ".csv":
            items_to_df(items).to_csv(path, index=False, encoding="utf-8")
        else:
            sheets = {"ITEMS": items_to_df(items)}
            if report_df is not None:
                sheets["REPORT"] = report_df
            save_xlsx(path, sheets)
    except OSError as e:
        raise InputFileError(f"Impossible d'écrire {path}: {e}") from e
