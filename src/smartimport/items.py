"""Normalisation des lignes en enregistrements typés pour une cible."""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any, Iterable, Mapping

from smartimport.matching.schema import FieldMap
from smartimport.targets import FieldKind, FieldSpec, TargetSchema

logger = logging.getLogger(__name__)

TRUE_TOKENS = frozenset({"true", "1", "yes", "on"})

_LIST_SEPARATORS = re.compile(r"[,;|]")
_LEADING_INT = re.compile(r"^[-+]?\d+")
_LEADING_FLOAT = re.compile(r"^-?(?:\d+(?:\.\d*)?|\.\d+)")
_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def to_list(raw: str) -> list[str]:
    """Découpe sur virgule, point-virgule ou barre verticale ; segments vides retirés."""
    return [part.strip() for part in _LIST_SEPARATORS.split(raw) if part.strip()]


def to_bool(raw: str) -> bool:
    return raw.strip().lower() in TRUE_TOKENS


def to_int(raw: str) -> int:
    """Entier en tête de chaîne (``"12 stars"`` → 12), 0 sinon."""
    m = _LEADING_INT.match(raw.strip())
    return int(m.group(0)) if m else 0


def to_number(raw: str) -> float:
    """Montant : symboles et séparateurs retirés (``"$1,200.50"`` → 1200.5), 0 sinon."""
    m = _LEADING_FLOAT.match(_NON_NUMERIC.sub("", raw))
    return float(m.group(0)) if m else 0.0


def coerce_value(raw: str, kind: FieldKind) -> Any:
    """Convertit une valeur source (chaîne) selon la nature du champ."""
    if kind is FieldKind.TEXT or kind is FieldKind.DATE:
        return raw.strip()
    if kind is FieldKind.INTEGER:
        return to_int(raw)
    if kind is FieldKind.NUMBER:
        return to_number(raw)
    if kind is FieldKind.BOOLEAN:
        return to_bool(raw)
    if kind is FieldKind.LIST:
        return to_list(raw)
    raise ValueError(f"Nature de champ non gérée: {kind!r}")


def default_value(spec: FieldSpec, today: date) -> Any:
    """Valeur par défaut d'un champ absent ou vide dans la source."""
    if spec.kind is FieldKind.DATE:
        return spec.default if spec.default is not None else today.isoformat()
    if spec.kind is FieldKind.LIST:
        return list(spec.default or [])
    if spec.default is not None:
        return spec.default
    if spec.kind is FieldKind.INTEGER:
        return 0
    if spec.kind is FieldKind.NUMBER:
        return 0.0
    if spec.kind is FieldKind.BOOLEAN:
        return False
    return ""


def normalize_row(
    row: Mapping[str, str],
    target: TargetSchema,
    field_map: FieldMap,
    *,
    today: date | None = None,
) -> dict[str, Any]:
    """
    Construit l'enregistrement complet d'une ligne pour la cible.

    Chaque champ de sortie est lu via le mapping (chaîne vide si non mappé
    ou absent de la ligne), converti selon sa nature, puis remplacé par sa
    valeur par défaut si la source n'apportait rien.
    """
    today = today or date.today()
    item: dict[str, Any] = {}
    for spec in target.output_fields:
        source = field_map.get(spec.name) if spec.mappable else None
        raw = (row.get(source) or "") if source else ""
        if raw.strip():
            item[spec.name] = coerce_value(raw, spec.kind)
        else:
            item[spec.name] = default_value(spec, today)
    return item


def is_accepted(item: Mapping[str, Any], target: TargetSchema) -> bool:
    """Tous les champs requis ont une valeur non vide et non nulle."""
    return all(item.get(f) for f in target.required_fields)


def normalize_items(
    rows: Iterable[Mapping[str, str]],
    target: TargetSchema,
    field_map: FieldMap,
    *,
    today: date | None = None,
) -> list[dict[str, Any]]:
    """
    Normalise toutes les lignes et écarte silencieusement celles qui échouent.

    Les valeurs par défaut « Untitled », « Unnamed »... des champs requis
    suffisent à passer le contrôle : requis signifie ici « toujours présent
    après valeurs par défaut », pas « fourni par la source ».

    Args:
        rows: Lignes de la table analysée.
        target: Cible choisie.
        field_map: Mapping champ cible -> champ source.
        today: Date utilisée pour les champs date par défaut.

    Returns:
        Enregistrements acceptés, dans l'ordre des lignes.
    """
    today = today or date.today()
    items: list[dict[str, Any]] = []
    rejected = 0
    for row in rows:
        item = normalize_row(row, target, field_map, today=today)
        if is_accepted(item, target):
            items.append(item)
        else:
            rejected += 1
    if rejected:
        logger.debug("%s: %d ligne(s) rejetée(s) (champs requis vides)", target.id, rejected)
    return items
