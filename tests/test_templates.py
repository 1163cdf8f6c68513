"""Tests des modèles CSV."""

from datetime import date

import pytest

from smartimport.pipeline import Importer
from smartimport.targets import get_target, target_ids
from smartimport.templates import generate_template


def test_habits_template() -> None:
    assert generate_template("habits") == "name,icon,frequency,color\n,,,"


def test_template_required_first() -> None:
    header = generate_template("credentials").splitlines()[0].split(",")
    assert header[:2] == ["label", "service"]
    assert "createdAt" not in header


def test_template_accepts_schema() -> None:
    schema = get_target("links")
    assert generate_template(schema) == generate_template("links")


@pytest.mark.parametrize("target", target_ids())
def test_template_round_trip(target: str) -> None:
    """Un modèle vide est reconnu comme sa propre cible, champ pour champ."""
    template = generate_template(target)
    header, blank = template.split("\n")
    assert len(header.split(",")) == len(blank.split(","))

    result = Importer().run(template, today=date(2024, 5, 1))
    assert result.target == target
    schema = get_target(target)
    assert result.field_map == {f: f for f in schema.mappable_fields}
