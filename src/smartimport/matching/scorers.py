"""Classification : score de chaque cible d'après les noms de champs source."""

from __future__ import annotations

from typing import Iterable, Sequence

from smartimport.matching.schema import (
    ALIAS_POINTS,
    EXACT_POINTS,
    MISSING_REQUIRED_PENALTY,
    PARTIAL_POINTS,
    CategoryScore,
    FieldScore,
)
from smartimport.normalize import norm_field_name
from smartimport.targets import TARGETS, TargetSchema


def is_partial_match(source_norm: str, target_norm: str) -> bool:
    """Inclusion dans un sens ou dans l'autre (noms vides exclus)."""
    if not source_norm or not target_norm:
        return False
    return source_norm in target_norm or target_norm in source_norm


def _normalized_sources(source_fields: Iterable[str]) -> list[tuple[str, str]]:
    pairs = [(sf, norm_field_name(sf)) for sf in source_fields]
    return [(sf, n) for sf, n in pairs if n]


def score_field(
    target_field: str,
    aliases: Sequence[str],
    sources: Sequence[tuple[str, str]],
    *,
    required: bool,
) -> FieldScore:
    """
    Cherche la meilleure règle (exacte, alias, partielle) pour un champ cible.

    Seule la meilleure règle compte, quel que soit le champ source qui la
    satisfait. Un champ requis sans aucune correspondance reçoit la pénalité.

    Args:
        target_field: Nom du champ cible.
        aliases: Alias déclarés pour ce champ.
        sources: Couples (nom source, nom source normalisé).
        required: Le champ est-il requis.

    Returns:
        FieldScore avec la règle retenue et ses points.
    """
    idx = 0 if required else 1
    normal_tf = norm_field_name(target_field)

    for sf, n in sources:
        if n == normal_tf:
            return FieldScore(target_field, "exact", sf, EXACT_POINTS[idx])

    alias_set = {norm_field_name(a) for a in aliases}
    for sf, n in sources:
        if n in alias_set:
            return FieldScore(target_field, "alias", sf, ALIAS_POINTS[idx])

    for sf, n in sources:
        if is_partial_match(n, normal_tf):
            return FieldScore(target_field, "partial", sf, PARTIAL_POINTS[idx])

    return FieldScore(target_field, "none", None, -MISSING_REQUIRED_PENALTY if required else 0)


def score_target(source_fields: Iterable[str], target: TargetSchema) -> CategoryScore:
    """Score global d'une cible : somme des meilleures règles moins les pénalités."""
    sources = _normalized_sources(source_fields)
    details = tuple(
        score_field(
            tf,
            target.aliases.get(tf, ()),
            sources,
            required=target.is_required(tf),
        )
        for tf in target.mappable_fields
    )
    return CategoryScore(target=target.id, score=sum(d.points for d in details), details=details)


def classify(
    source_fields: Iterable[str],
    targets: Sequence[TargetSchema] = TARGETS,
) -> list[CategoryScore]:
    """
    Classe toutes les cibles par score décroissant.

    Les égalités conservent l'ordre d'énumération du registre (tri stable).
    """
    fields = list(source_fields)
    scores = [score_target(fields, t) for t in targets]
    return sorted(scores, key=lambda s: s.score, reverse=True)
