"""Tests de la normalisation des enregistrements."""

from datetime import date

import pytest

from smartimport.items import (
    coerce_value,
    default_value,
    is_accepted,
    normalize_items,
    normalize_row,
    to_bool,
    to_int,
    to_list,
    to_number,
)
from smartimport.targets import FieldKind, FieldSpec, get_target

TODAY = date(2024, 5, 1)


def test_to_list() -> None:
    assert to_list("a, b;c | |d") == ["a", "b", "c", "d"]
    assert to_list("") == []
    assert to_list(" , ; ") == []


@pytest.mark.parametrize("raw", ["true", "TRUE", "1", "yes", "On", " yes "])
def test_to_bool_true_tokens(raw: str) -> None:
    assert to_bool(raw) is True


@pytest.mark.parametrize("raw", ["false", "0", "no", "off", "y", ""])
def test_to_bool_other_tokens(raw: str) -> None:
    assert to_bool(raw) is False


def test_to_int() -> None:
    assert to_int("12") == 12
    assert to_int(" 12 stars") == 12
    assert to_int("-3") == -3
    assert to_int("3.7") == 3
    assert to_int("abc") == 0


def test_to_number() -> None:
    assert to_number("42") == 42.0
    assert to_number("$1,200.50") == 1200.5
    assert to_number("-19.99 EUR") == -19.99
    assert to_number("1.2.3") == 1.2
    assert to_number("abc") == 0.0
    assert to_number("-") == 0.0


def test_coerce_value_per_kind() -> None:
    assert coerce_value("  hello ", FieldKind.TEXT) == "hello"
    assert coerce_value(" 2024-12-31 ", FieldKind.DATE) == "2024-12-31"
    assert coerce_value("7", FieldKind.INTEGER) == 7
    assert coerce_value("7.5", FieldKind.NUMBER) == 7.5
    assert coerce_value("yes", FieldKind.BOOLEAN) is True
    assert coerce_value("a|b", FieldKind.LIST) == ["a", "b"]


def test_default_values() -> None:
    assert default_value(FieldSpec("d", FieldKind.DATE), TODAY) == "2024-05-01"
    assert default_value(FieldSpec("l", FieldKind.LIST), TODAY) == []
    assert default_value(FieldSpec("i", FieldKind.INTEGER), TODAY) == 0
    assert default_value(FieldSpec("n", FieldKind.NUMBER), TODAY) == 0.0
    assert default_value(FieldSpec("b", FieldKind.BOOLEAN), TODAY) is False
    assert default_value(FieldSpec("t"), TODAY) == ""
    assert default_value(FieldSpec("t", default="Untitled"), TODAY) == "Untitled"


def test_normalize_row_website() -> None:
    row = {"name": "Blog", "url": "https://blog.com"}
    item = normalize_row(row, get_target("websites"), {"name": "name", "url": "url"}, today=TODAY)
    assert item == {
        "name": "Blog",
        "url": "https://blog.com",
        "wpAdminUrl": "",
        "wpUsername": "",
        "wpPassword": "",
        "hostingProvider": "",
        "hostingLoginUrl": "",
        "hostingUsername": "",
        "hostingPassword": "",
        "category": "Personal",
        "status": "active",
        "notes": "",
        "plugins": [],
        "tags": [],
        "dateAdded": "2024-05-01",
        "lastUpdated": "2024-05-01",
    }


def test_normalize_row_mapped_field_missing_from_row() -> None:
    item = normalize_row({"t": "Read"}, get_target("tasks"), {"title": "t", "status": "s"}, today=TODAY)
    assert item["title"] == "Read"
    assert item["status"] == "todo"


def test_normalize_row_typed_values() -> None:
    row = {"Title": "Rent", "Price": "$950.00", "Auto": "yes", "Due": "2024-06-01"}
    fm = {"title": "Title", "amount": "Price", "recurring": "Auto", "dueDate": "Due"}
    item = normalize_row(row, get_target("payments"), fm, today=TODAY)
    assert item["amount"] == 950.0
    assert item["recurring"] is True
    assert item["dueDate"] == "2024-06-01"
    assert item["currency"] == "USD"
    assert item["paidDate"] == ""
    assert item["createdAt"] == "2024-05-01"


def test_placeholder_defaults_satisfy_required_fields() -> None:
    """Requis = présent après valeurs par défaut, pas forcément fourni par la source."""
    items = normalize_items([{"x": "whatever"}], get_target("tasks"), {}, today=TODAY)
    assert len(items) == 1
    assert items[0]["title"] == "Untitled"
    assert items[0]["dueDate"] == "2024-05-01"


def test_zero_amount_rejected() -> None:
    fm = {"title": "title", "amount": "amount"}
    rows = [{"title": "Rent", "amount": "abc"}, {"title": "Gym", "amount": "1,200"}]
    items = normalize_items(rows, get_target("payments"), fm, today=TODAY)
    assert [i["title"] for i in items] == ["Gym"]
    assert items[0]["amount"] == 1200.0


def test_missing_service_rejected() -> None:
    rows = [{"label": "GitHub"}, {"label": "Mail", "service": "Gmail"}]
    items = normalize_items(rows, get_target("credentials"), {"label": "label", "service": "service"}, today=TODAY)
    assert [i["label"] for i in items] == ["Mail"]


def test_missing_url_rejected() -> None:
    rows = [{"name": "Blog", "url": ""}, {"name": "", "url": "https://shop.io"}]
    items = normalize_items(rows, get_target("websites"), {"name": "name", "url": "url"}, today=TODAY)
    assert len(items) == 1
    assert items[0]["name"] == "Unnamed"


def test_is_accepted() -> None:
    links = get_target("links")
    assert is_accepted({"title": "A", "url": "u"}, links)
    assert not is_accepted({"title": "A", "url": ""}, links)
    assert not is_accepted({"title": "A"}, links)


def test_items_never_exceed_rows() -> None:
    rows = [{"a": str(i)} for i in range(5)]
    for target in ("websites", "tasks", "payments"):
        assert len(normalize_items(rows, get_target(target), {}, today=TODAY)) <= len(rows)


def test_normalize_items_idempotent() -> None:
    rows = [{"title": "A", "tags": "x, y"}, {"title": "B", "tags": ""}]
    fm = {"title": "title", "tags": "tags"}
    first = normalize_items(rows, get_target("notes"), fm, today=TODAY)
    second = normalize_items(rows, get_target("notes"), fm, today=TODAY)
    assert first == second
    assert first[0]["tags"] == ["x", "y"]


def test_list_defaults_not_shared() -> None:
    items = normalize_items([{}, {}], get_target("tasks"), {}, today=TODAY)
    items[0]["subtasks"].append("x")
    assert items[1]["subtasks"] == []


def test_boolean_field() -> None:
    rows = [{"t": "A", "u": "https://a.io", "fav": "Yes"}, {"t": "B", "u": "https://b.io", "fav": "no"}]
    fm = {"title": "t", "url": "u", "pinned": "fav"}
    items = normalize_items(rows, get_target("links"), fm, today=TODAY)
    assert [i["pinned"] for i in items] == [True, False]
