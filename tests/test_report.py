"""Tests du module report."""

from datetime import date

import pytest

from smartimport.config import Config
from smartimport.pipeline import ImportResult, Importer
from smartimport.report import build_report_df, print_report_console


@pytest.fixture
def sample_result() -> ImportResult:
    return Importer().run("name,url\nBlog,https://blog.com\nShop,", today=date(2024, 5, 1))


def _value(df, key):  # type: ignore[no-untyped-def]
    return df[df["Key"] == key]["Value"].values[0]


def test_build_report_df_counts(sample_result: ImportResult) -> None:
    df = build_report_df(sample_result, Config())
    assert _value(df, "format") == "csv"
    assert _value(df, "nb_raw_rows") == 2
    assert _value(df, "nb_accepted") == 1
    assert _value(df, "nb_rejected") == 1
    assert _value(df, "target") == "websites"
    assert _value(df, "confidence") == "medium"


def test_build_report_df_scores_and_map(sample_result: ImportResult) -> None:
    df = build_report_df(sample_result, Config())
    keys = df["Key"].tolist()
    assert sum(k.startswith("score_") for k in keys) == 10
    assert _value(df, "score_websites") == 24
    assert _value(df, "map_url") == "url"


def test_build_report_df_contains_params(sample_result: ImportResult) -> None:
    df = build_report_df(sample_result, Config(target="links", high_confidence_gap=12))
    keys = df["Key"].tolist()
    assert "version" in keys
    assert "timestamp" in keys
    assert _value(df, "forced_target") == "links"
    assert _value(df, "high_confidence_gap") == 12


def test_print_report_console(sample_result: ImportResult, capsys: pytest.CaptureFixture) -> None:
    print_report_console(sample_result)
    out = capsys.readouterr().out
    assert "SmartImport Report" in out
    assert "websites" in out
    assert "name<-name" in out
    assert "Rejetées:         1" in out


def test_print_report_console_empty(capsys: pytest.CaptureFixture) -> None:
    print_report_console(Importer().run(""))
    out = capsys.readouterr().out
    assert "Rien d'importable" in out
    assert "Cible" not in out
