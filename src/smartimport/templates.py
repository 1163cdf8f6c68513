"""Génération de modèles CSV vides pour une cible."""

from __future__ import annotations

from smartimport.targets import TargetSchema, get_target


def generate_template(target: str | TargetSchema) -> str:
    """
    Ligne d'en-tête (champs requis puis optionnels) suivie d'une ligne vide
    comportant le même nombre de colonnes.
    """
    schema = get_target(target)
    headers = list(schema.mappable_fields)
    return ",".join(headers) + "\n" + ",".join("" for _ in headers)
