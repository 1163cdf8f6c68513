"""Tests de la classification des cibles."""

from smartimport.matching.scorers import classify, score_target
from smartimport.targets import get_target


def _details(source_fields: list[str], target: str) -> dict:
    score = score_target(source_fields, get_target(target))
    return {d.field: d for d in score.details}


def test_exact_required_match() -> None:
    score = score_target(["title"], get_target("tasks"))
    assert score.score == 10
    assert _details(["title"], "tasks")["title"].rule == "exact"


def test_alias_required_match() -> None:
    assert score_target(["Task"], get_target("tasks")).score == 8
    assert _details(["Task"], "tasks")["title"].rule == "alias"


def test_partial_required_match() -> None:
    assert score_target(["Task Title"], get_target("tasks")).score == 5
    assert _details(["Task Title"], "tasks")["title"].rule == "partial"


def test_optional_points() -> None:
    # title exact (10) + dueDate exact (3) + priority alias (2)
    assert score_target(["title", "Due Date", "prio"], get_target("tasks")).score == 15


def test_missing_required_penalty() -> None:
    # title exact (10), url introuvable (-5)
    score = score_target(["title"], get_target("links"))
    assert score.score == 5
    assert score.missing_required == ("url",)


def test_best_rule_wins_regardless_of_source_order() -> None:
    d = _details(["website_url", "URL"], "links")
    assert d["url"].rule == "exact"
    assert d["url"].source_field == "URL"
    assert d["url"].points == 10


def test_source_field_can_satisfy_several_partial_rules() -> None:
    # url exact (10), name absent (-5), wpAdminUrl et hostingLoginUrl partiels (1 + 1)
    score = score_target(["url"], get_target("websites"))
    assert score.score == 7


def test_empty_normalized_names_ignored() -> None:
    assert score_target(["", "__", " - "], get_target("tasks")).score == -5


def test_classify_ranks_every_target() -> None:
    scores = classify(["name", "url"])
    assert len(scores) == 10
    assert [s.score for s in scores] == sorted((s.score for s in scores), reverse=True)


def test_classify_name_url_prefers_websites() -> None:
    scores = classify(["name", "url"])
    assert scores[0].target == "websites"
    assert scores[1].target == "links"
    assert scores[0].score - scores[1].score == 6


def test_classify_ties_keep_registry_order() -> None:
    scores = classify([])
    assert [s.target for s in scores] == [
        "tasks",
        "repos",
        "build_projects",
        "notes",
        "ideas",
        "habits",
        "websites",
        "links",
        "credentials",
        "payments",
    ]


def test_classify_exact_required_fields_rank_first() -> None:
    assert classify(["label", "service"])[0].target == "credentials"
    assert classify(["title", "amount"])[0].target == "payments"
    assert classify(["Habit", "Frequency"])[0].target == "habits"


def test_classify_title_priority_tie_goes_to_tasks() -> None:
    """tasks et ideas font jeu égal : l'ordre du registre tranche."""
    scores = classify(["title", "priority"])
    assert scores[0].target == "tasks"
    assert scores[1].target == "ideas"
    assert scores[0].score == scores[1].score == 13


def test_classify_plain_text_item() -> None:
    scores = classify(["item"])
    assert scores[0].target == "tasks"
    assert scores[0].score == 8
