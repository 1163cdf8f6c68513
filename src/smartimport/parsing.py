"""Analyse du texte brut en table générique : lignes, champs source et format détecté."""

from __future__ import annotations

import csv
import io
import json
import logging
import re
import warnings
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

import pandas as pd

from smartimport.normalize import safe_str

logger = logging.getLogger(__name__)

FORMAT_JSON = "structured-json"
FORMAT_JSON_LINES = "json-lines"
FORMAT_CSV = "csv"
FORMAT_TSV = "tsv"
FORMAT_TEXT = "plain-text"
VALID_FORMATS = frozenset({FORMAT_JSON, FORMAT_JSON_LINES, FORMAT_CSV, FORMAT_TSV, FORMAT_TEXT})

# Champ unique produit par le repli texte brut
PLAIN_TEXT_FIELD = "item"

CANDIDATE_DELIMITERS = [",", ";", "\t", "|"]

_HEADER_QUOTES = re.compile(r"^[\"']|[\"']$")


@dataclass(frozen=True)
class ParsedTable:
    """Résultat de l'analyse : toutes les valeurs sont encore des chaînes."""

    rows: tuple[Mapping[str, str], ...]
    source_fields: tuple[str, ...]
    format: str

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows


def _union_fields(rows: list[dict[str, str]]) -> tuple[str, ...]:
    """Union des clés de toutes les lignes, dans l'ordre de première apparition."""
    seen: dict[str, None] = {}
    for row in rows:
        for key in row:
            seen.setdefault(key, None)
    return tuple(seen)


def _flatten_record(item: Any) -> dict[str, str]:
    """Aplatit un élément JSON en ligne ; un scalaire devient une ligne ``item``."""
    if isinstance(item, dict):
        return {str(k): safe_str(v) for k, v in item.items()}
    return {PLAIN_TEXT_FIELD: safe_str(item)}


def _table(rows: list[dict[str, str]], fmt: str) -> ParsedTable:
    return ParsedTable(
        rows=tuple(MappingProxyType(r) for r in rows),
        source_fields=_union_fields(rows),
        format=fmt,
    )


def _parse_json(trimmed: str) -> ParsedTable | None:
    try:
        parsed = json.loads(trimmed)
        if not isinstance(parsed, list):
            parsed = [parsed]
        # null : aucun champ, donc aucune ligne
        rows = [_flatten_record(item) for item in parsed if item is not None]
    except (ValueError, RecursionError) as e:
        logger.debug("Pas du JSON structuré: %s", e)
        return None
    return _table(rows, FORMAT_JSON)


def _parse_json_lines(lines: list[str]) -> ParsedTable | None:
    rows: list[dict[str, str]] = []
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            item = json.loads(line.strip())
            if not isinstance(item, dict):
                logger.debug("JSON Lines abandonné (ligne %d): objet attendu", lineno)
                return None
            rows.append(_flatten_record(item))
        except (ValueError, RecursionError) as e:
            logger.debug("JSON Lines abandonné (ligne %d): %s", lineno, e)
            return None
    return _table(rows, FORMAT_JSON_LINES)


def _detect_delimiter(lines: list[str]) -> str:
    """Devine le séparateur à partir des premières lignes non vides (virgule par défaut)."""
    sample_lines = [line for line in lines if line.strip()][:5]
    if not sample_lines:
        return ","
    try:
        dialect = csv.Sniffer().sniff("\n".join(sample_lines), delimiters=CANDIDATE_DELIMITERS)
        return dialect.delimiter
    except csv.Error:
        first = sample_lines[0]
        counts = {d: first.count(d) for d in CANDIDATE_DELIMITERS}
        best = max(counts, key=counts.get)  # type: ignore[arg-type]
        return best if counts[best] > 0 else ","


def _clean_header(name: Any) -> str:
    return _HEADER_QUOTES.sub("", str(name).strip())


def _parse_delimited(trimmed: str, lines: list[str], filename: str | None) -> ParsedTable | None:
    first_line = next((line for line in lines if line.strip()), "")
    if "\t" in first_line or (filename or "").lower().endswith(".tsv"):
        delimiter = "\t"
    else:
        delimiter = _detect_delimiter(lines)

    try:
        # Cellules au-delà de l'en-tête ignorées ; pandas le signale par un ParserWarning
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            df = pd.read_csv(
                io.StringIO(trimmed),
                sep=delimiter,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                index_col=False,
            )
    except Exception as e:
        logger.debug("Table délimitée illisible (séparateur %r): %s", delimiter, e)
        return None
    for w in caught:
        logger.debug("Lecture délimitée: %s", w.message)

    df = df.fillna("")
    df.columns = [_clean_header(c) for c in df.columns]
    rows = [
        {str(k): str(v).strip() for k, v in record.items()}
        for record in df.to_dict(orient="records")
    ]
    table = _table(rows, FORMAT_TSV if delimiter == "\t" else FORMAT_CSV)
    # Une seule colonne : laissé au repli texte brut
    if not table.rows or len(table.source_fields) <= 1:
        logger.debug(
            "Table délimitée rejetée: %d ligne(s), %d champ(s)",
            table.row_count,
            len(table.source_fields),
        )
        return None
    return table


def _parse_plain_text(lines: list[str]) -> ParsedTable:
    rows = [{PLAIN_TEXT_FIELD: line.strip()} for line in lines if line.strip()]
    return ParsedTable(
        rows=tuple(rows),
        source_fields=(PLAIN_TEXT_FIELD,) if rows else (),
        format=FORMAT_TEXT,
    )


def parse_import_data(text: str | None, filename: str | None = None) -> ParsedTable:
    """
    Transforme un texte brut en table générique.

    Stratégies essayées dans l'ordre, la première qui réussit l'emporte :
    JSON structuré, JSON Lines, table délimitée (CSV/TSV), puis texte brut
    (une ligne non vide = une ligne ``item``). Ne lève jamais d'exception :
    une stratégie en échec passe simplement la main à la suivante.

    Args:
        text: Texte collé ou contenu d'un fichier.
        filename: Nom de fichier facultatif, utilisé comme indice (``.tsv``).

    Returns:
        ParsedTable (éventuellement vide).
    """
    trimmed = (text or "").strip()
    lines = trimmed.splitlines()

    table: ParsedTable | None = None
    if trimmed.startswith(("[", "{")):
        table = _parse_json(trimmed)

    if table is None:
        first = next((line.strip() for line in lines if line.strip()), "")
        if first.startswith("{"):
            table = _parse_json_lines(lines)

    if table is None and trimmed:
        table = _parse_delimited(trimmed, lines, filename)

    if table is None:
        table = _parse_plain_text(lines)

    logger.debug(
        "Format %s: %d ligne(s), champs %s",
        table.format,
        table.row_count,
        list(table.source_fields),
    )
    return table
