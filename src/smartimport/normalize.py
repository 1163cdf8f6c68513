"""Normalisation des noms de champs et des valeurs."""

from __future__ import annotations

import json
import re
import unicodedata
from typing import Any

_FIELD_NAME_NOISE = re.compile(r"[_\-./\s]+")


def _remove_diacritics(s: str) -> str:
    """Retire les diacritiques (accents) d'une chaîne."""
    nfd = unicodedata.normalize("NFD", s)
    return "".join(c for c in nfd if unicodedata.category(c) != "Mn")


def norm_field_name(s: str | None) -> str:
    """
    Forme normale d'un nom de champ pour la comparaison source/cible.

    Minuscules, accents retirés, puis suppression de ``_``, ``-``, ``.``, ``/``
    et des espaces : ``"Due Date"``, ``"due_date"`` et ``"dueDate"`` donnent
    tous ``"duedate"``.

    Args:
        s: Nom de champ (None accepté).

    Returns:
        Nom normalisé, éventuellement vide.
    """
    if s is None:
        return ""
    text = _remove_diacritics(str(s).lower())
    return _FIELD_NAME_NOISE.sub("", text)


def safe_str(val: Any) -> str:
    """
    Convertit une valeur JSON en chaîne de cellule.

    None → "", booléens en minuscules (comme dans le texte JSON), listes
    jointes par ", ", objets re-sérialisés en JSON compact.
    """
    if val is None:
        return ""
    if isinstance(val, bool):
        return "true" if val else "false"
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    if isinstance(val, list):
        return ", ".join(safe_str(v) for v in val)
    if isinstance(val, dict):
        return json.dumps(val, ensure_ascii=False, separators=(",", ":"))
    return str(val)
