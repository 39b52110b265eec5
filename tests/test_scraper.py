"""Tests for the command-line entry point."""

import argparse
import json
from unittest.mock import patch

import scraper
from enrichment.gemini import CredentialCheck, EnrichmentResult
from tests.conftest import COUPANG_HTML, COUPANG_URL


def _args(tmp_path, **overrides):
    html = tmp_path / "page.html"
    html.write_text(COUPANG_HTML, encoding="utf-8")
    values = {"url": COUPANG_URL, "html": str(html), "enrich": False, "save": False, "margin": 30}
    values.update(overrides)
    return argparse.Namespace(**values)


def test_extract_prints_record(tmp_path, store, capsys):
    assert scraper.run_extract(_args(tmp_path), store) == 0
    output = json.loads(capsys.readouterr().out)
    assert output["record"]["product_code"] == "111222"
    assert "save_id" not in output


def test_extract_and_save(tmp_path, store, capsys):
    assert scraper.run_extract(_args(tmp_path, save=True), store) == 0
    output = json.loads(capsys.readouterr().out)
    assert store.get(output["save_id"])["sale_price"] == "25,800원"


def test_unsupported_site(tmp_path, store):
    assert scraper.run_extract(_args(tmp_path, url="https://www.amazon.com/dp/B0"), store) == 1


def test_enrich_failure_stops(tmp_path, store):
    failed = EnrichmentResult(success=False, error="quota", status=429)
    with patch("scraper.analyze_product", return_value=failed):
        assert scraper.run_extract(_args(tmp_path, enrich=True, save=True), store) == 1
    assert store.list_records() == []


def test_set_key(store):
    with patch("scraper.test_credential", return_value=CredentialCheck(ok=True, status=200)):
        assert scraper.run_set_key("  new-key ", store) == 0
    assert store.get_setting("gemini_api_key") == "new-key"


def test_set_key_rejected_is_still_saved(store):
    with patch("scraper.test_credential", return_value=CredentialCheck(ok=False, status=401, error_message="bad")):
        assert scraper.run_set_key("bad-key", store) == 1
    assert store.get_setting("gemini_api_key") == "bad-key"
