"""Mapping glouton des champs source vers les champs d'une cible."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from smartimport.matching.schema import FieldMap
from smartimport.matching.scorers import is_partial_match
from smartimport.normalize import norm_field_name
from smartimport.targets import TargetSchema

logger = logging.getLogger(__name__)


def map_fields(source_fields: Iterable[str], target: TargetSchema) -> FieldMap:
    """
    Associe chaque champ cible à au plus un champ source, et inversement.

    Trois passes successives (égalité normalisée, alias, inclusion partielle) ;
    dans chaque passe, les champs cibles sont traités dans l'ordre du schéma
    et prennent le premier champ source encore libre. Pas de retour arrière.
    Un champ cible resté sans correspondance est simplement absent.
    """
    sources = [(sf, norm_field_name(sf)) for sf in source_fields]
    sources = [(sf, n) for sf, n in sources if n]
    field_map: FieldMap = {}
    used: set[str] = set()

    def _pass(name: str, matches: Callable[[str, str], bool]) -> None:
        for tf in target.mappable_fields:
            if tf in field_map:
                continue
            for sf, n in sources:
                if sf not in used and matches(tf, n):
                    field_map[tf] = sf
                    used.add(sf)
                    logger.debug("%s: %s <- %s (%s)", target.id, tf, sf, name)
                    break

    _pass("exact", lambda tf, n: n == norm_field_name(tf))
    _pass(
        "alias",
        lambda tf, n: n in {norm_field_name(a) for a in target.aliases.get(tf, ())},
    )
    _pass("partial", lambda tf, n: is_partial_match(n, norm_field_name(tf)))

    # Ordre de déclaration du schéma
    return {tf: field_map[tf] for tf in target.mappable_fields if tf in field_map}
