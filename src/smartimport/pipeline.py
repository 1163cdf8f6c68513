"""Pipeline d'import : analyse, classification, mapping et normalisation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from smartimport.config import Config
from smartimport.items import normalize_items
from smartimport.matching.mapper import map_fields
from smartimport.matching.schema import CategoryScore, FieldMap
from smartimport.matching.scorers import classify
from smartimport.parsing import ParsedTable, parse_import_data
from smartimport.targets import TARGETS, TargetSchema, get_target

logger = logging.getLogger(__name__)

CONFIDENCE_HIGH = "high"
CONFIDENCE_MEDIUM = "medium"
CONFIDENCE_LOW = "low"


@dataclass
class ImportResult:
    """Résultat d'un import pour la cible retenue."""

    table: ParsedTable
    scores: list[CategoryScore] = field(default_factory=list)
    target: str | None = None
    confidence: str = CONFIDENCE_LOW
    items: list[dict[str, Any]] = field(default_factory=list)
    field_map: FieldMap = field(default_factory=dict)
    is_override: bool = False

    @property
    def raw_row_count(self) -> int:
        return self.table.row_count

    @property
    def accepted_count(self) -> int:
        return len(self.items)

    @property
    def rejected_count(self) -> int:
        return self.raw_row_count - self.accepted_count

    @property
    def has_data(self) -> bool:
        """False = rien d'importable dans le texte (aucune ligne)."""
        return self.raw_row_count > 0

    @property
    def score(self) -> int | None:
        for s in self.scores:
            if s.target == self.target:
                return s.score
        return None


class Importer:
    """Moteur d'import : détecte la cible et produit les enregistrements typés."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        self.high_confidence_gap = self.config.high_confidence_gap
        self.medium_confidence_gap = self.config.medium_confidence_gap
        self.targets: tuple[TargetSchema, ...] = TARGETS

    def parse(self, text: str, filename: str | None = None) -> ParsedTable:
        return parse_import_data(text, filename)

    def classify(self, table: ParsedTable) -> list[CategoryScore]:
        return classify(table.source_fields, self.targets)

    def confidence(self, scores: list[CategoryScore], target: str, accepted_count: int) -> str:
        """
        Palier de confiance d'après l'écart de score avec la deuxième cible.

        Seule la cible classée première peut être « high » ou « medium », et
        seulement si au moins un enregistrement a été accepté.
        """
        if not scores or scores[0].target != target or accepted_count == 0:
            return CONFIDENCE_LOW
        second = scores[1].score if len(scores) > 1 else 0
        gap = scores[0].score - second
        if gap > self.high_confidence_gap:
            return CONFIDENCE_HIGH
        if gap > self.medium_confidence_gap:
            return CONFIDENCE_MEDIUM
        return CONFIDENCE_LOW

    def run(
        self,
        text: str,
        filename: str | None = None,
        *,
        target: str | None = None,
        today: date | None = None,
    ) -> ImportResult:
        """
        Exécute le pipeline complet sur un texte brut.

        Args:
            text: Texte à importer.
            filename: Indice de format facultatif.
            target: Cible imposée (sinon config.target, sinon la mieux classée).
            today: Date des champs date par défaut.

        Returns:
            ImportResult ; ``has_data`` est False si rien n'a été trouvé.

        Raises:
            UnknownTargetError: Si la cible imposée n'existe pas.
        """
        table = self.parse(text, filename)
        return self.build(table, target=target, today=today)

    def build(
        self,
        table: ParsedTable,
        *,
        target: str | None = None,
        today: date | None = None,
    ) -> ImportResult:
        """Classifie une table déjà analysée puis mappe et normalise vers la cible."""
        forced = target or self.config.target
        if forced is not None:
            get_target(forced)

        if table.is_empty:
            logger.warning("Rien d'importable trouvé (format %s)", table.format)
            return ImportResult(table=table)

        scores = self.classify(table)
        result = self._apply_target(table, scores, forced or scores[0].target, today=today)
        result.is_override = forced is not None and forced != scores[0].target
        return result

    def retarget(
        self,
        result: ImportResult,
        target: str,
        *,
        today: date | None = None,
    ) -> ImportResult:
        """
        Recalcule mapping et enregistrements pour une autre cible, sans
        ré-analyser le texte ni recalculer les scores.
        """
        get_target(target)
        if not result.has_data:
            return ImportResult(table=result.table)
        new = self._apply_target(result.table, result.scores, target, today=today)
        new.is_override = target != result.scores[0].target
        return new

    def _apply_target(
        self,
        table: ParsedTable,
        scores: list[CategoryScore],
        target: str,
        *,
        today: date | None,
    ) -> ImportResult:
        schema = get_target(target)
        field_map = map_fields(table.source_fields, schema)
        items = normalize_items(table.rows, schema, field_map, today=today)
        confidence = self.confidence(scores, schema.id, len(items))
        logger.info(
            "Cible %s (confiance %s): %d/%d ligne(s) acceptée(s)",
            schema.id,
            confidence,
            len(items),
            table.row_count,
        )
        return ImportResult(
            table=table,
            scores=scores,
            target=schema.id,
            confidence=confidence,
            items=items,
            field_map=field_map,
        )
