"""Configuration et chargement du fichier config JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any


class SmartImportError(Exception):
    """Exception de base pour SmartImport."""


class ConfigError(SmartImportError, ValueError):
    """Erreur de validation de la configuration."""


class ConfigFileError(SmartImportError):
    """Erreur de chargement du fichier de configuration (fichier absent, JSON invalide)."""


class InputFileError(SmartImportError):
    """Erreur de lecture ou d'écriture d'un fichier de données."""


class UnknownTargetError(SmartImportError, KeyError):
    """Cible d'import inconnue du registre."""

    def __init__(self, target: str, suggestion: str | None = None) -> None:
        self.target = target
        self.suggestion = suggestion
        message = f"Cible inconnue: {target!r}"
        if suggestion:
            message += f" (vouliez-vous dire {suggestion!r} ?)"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError.__str__ ajoute des guillemets autour du message
        return str(self.args[0])


@dataclass
class Config:
    """Configuration principale de SmartImport."""

    target: str | None = None  # None = détection automatique
    high_confidence_gap: float = 8.0
    medium_confidence_gap: float = 3.0
    encoding: str = "utf-8"
    sheet: str | None = None  # None = première feuille

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Config:
        from smartimport.targets import get_target

        target = d.get("target") or None
        encoding = d.get("encoding", "utf-8")
        try:
            high_gap = float(d.get("high_confidence_gap", 8.0))
            medium_gap = float(d.get("medium_confidence_gap", 3.0))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"écart de confiance invalide: {e}") from e

        if target is not None:
            try:
                get_target(target)
            except UnknownTargetError as e:
                raise ConfigError(f"target invalide: {e}") from e
        if high_gap < 0:
            raise ConfigError(f"high_confidence_gap doit être >= 0 (got {high_gap})")
        if medium_gap < 0:
            raise ConfigError(f"medium_confidence_gap doit être >= 0 (got {medium_gap})")
        if medium_gap > high_gap:
            raise ConfigError(
                f"medium_confidence_gap ({medium_gap}) doit être <= high_confidence_gap ({high_gap})"
            )
        if not isinstance(encoding, str) or not encoding:
            raise ConfigError(f"encoding invalide: {encoding!r}")

        return cls(
            target=target,
            high_confidence_gap=high_gap,
            medium_confidence_gap=medium_gap,
            encoding=encoding,
            sheet=d.get("sheet"),
        )

    @classmethod
    def load(cls, path: str | Path) -> Config:
        """
        Charge la configuration depuis un fichier JSON.

        Raises:
            ConfigFileError: Si le fichier est absent ou le JSON invalide.
            ConfigError: Si la configuration est invalide.
        """
        path = Path(path).resolve()
        if not path.exists():
            raise ConfigFileError(f"Fichier de configuration introuvable: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                d = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFileError(f"JSON invalide dans {path}: {e}") from e
        except OSError as e:
            raise ConfigFileError(f"Impossible de lire {path}: {e}") from e

        if not isinstance(d, dict):
            raise ConfigFileError(f"Fichier de configuration invalide: {path} doit contenir un objet JSON")

        return cls.from_dict(d)
