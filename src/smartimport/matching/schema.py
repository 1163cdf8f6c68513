"""Types produits par la classification et le mapping."""

from __future__ import annotations

from dataclasses import dataclass

# Champ cible -> champ source (chaque champ source utilisé au plus une fois)
FieldMap = dict[str, str]

# Points par règle : (requis, optionnel)
EXACT_POINTS = (10, 3)
ALIAS_POINTS = (8, 2)
PARTIAL_POINTS = (5, 1)
MISSING_REQUIRED_PENALTY = 5


@dataclass(frozen=True)
class FieldScore:
    """Meilleure règle trouvée pour un champ cible."""

    field: str
    rule: str  # exact, alias, partial, none
    source_field: str | None
    points: int


@dataclass(frozen=True)
class CategoryScore:
    """Score d'une cible pour un ensemble de champs source."""

    target: str
    score: int
    details: tuple[FieldScore, ...] = ()

    def __repr__(self) -> str:
        return f"CategoryScore(target={self.target!r}, score={self.score})"

    @property
    def missing_required(self) -> tuple[str, ...]:
        return tuple(d.field for d in self.details if d.rule == "none" and d.points < 0)
