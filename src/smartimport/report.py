"""Génération du rapport d'import et onglet REPORT."""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from smartimport import __version__
from smartimport.config import Config
from smartimport.pipeline import ImportResult


def build_report_df(result: ImportResult, config: Config) -> pd.DataFrame:
    """
    Construit le DataFrame pour l'onglet REPORT.

    Contient : format détecté, nb lignes, nb acceptées, nb rejetées, cible,
    confiance, classement des cibles, mapping, paramètres, horodatage, version.
    """
    rows: list[tuple[str, object]] = [
        ("Metric", "Value"),
        ("format", result.table.format),
        ("nb_raw_rows", result.raw_row_count),
        ("nb_accepted", result.accepted_count),
        ("nb_rejected", result.rejected_count),
        ("target", result.target or ""),
        ("confidence", result.confidence),
        ("override", result.is_override),
        ("", ""),
        ("Scores", ""),
    ]
    for s in result.scores:
        rows.append((f"score_{s.target}", s.score))

    rows.append(("", ""))
    rows.append(("Field map", ""))
    for tf, sf in result.field_map.items():
        rows.append((f"map_{tf}", sf))

    rows.extend(
        [
            ("", ""),
            ("Parameters", ""),
            ("forced_target", config.target or ""),
            ("high_confidence_gap", config.high_confidence_gap),
            ("medium_confidence_gap", config.medium_confidence_gap),
            ("", ""),
            ("timestamp", datetime.now().isoformat()),
            ("version", __version__),
        ]
    )

    return pd.DataFrame(rows, columns=["Key", "Value"])


def print_report_console(result: ImportResult) -> None:
    """Affiche un résumé du rapport en console."""
    print("\n=== SmartImport Report ===")
    print(f"  Format:           {result.table.format}")
    print(f"  Lignes lues:      {result.raw_row_count}")
    if not result.has_data:
        print("  Rien d'importable trouvé.")
    else:
        print(f"  Cible:            {result.target}{' (imposée)' if result.is_override else ''}")
        print(f"  Score:            {result.score}")
        print(f"  Confiance:        {result.confidence}")
        print(f"  Acceptées:        {result.accepted_count}")
        print(f"  Rejetées:         {result.rejected_count}")
        mapped = ", ".join(f"{tf}<-{sf}" for tf, sf in result.field_map.items()) or "(aucun)"
        print(f"  Mapping:          {mapped}")
    print(f"  Version:          {__version__}")
    print(f"  Timestamp:        {datetime.now().isoformat()}")
    print("==========================\n")
