"""Tests for the record store and CSV export."""

import re
import sqlite3
from datetime import date
from unittest.mock import patch

import pytest

from enrichment.gemini import parse_response
from store import RecordStore, export_filename, new_record_key, records_to_csv

BOM = "\ufeff"
HEADER = "소싱날짜,소싱처,상품코드,물품명,브랜드,무게,구입가,판매가,배송비"


def test_record_key_format():
    assert re.fullmatch(r"product_\d{13}_[0-9a-z]{9}", new_record_key())


def test_export_filename():
    assert export_filename(date(2025, 1, 15)) == "Shopee_Sourcing_2025-01-15.csv"


class TestRecordStore:
    def test_save_and_get(self, store, sample_record):
        key = store.save(sample_record)
        saved = store.get(key)
        assert saved["title"] == "국산 참기름 750ml"
        assert saved["save_id"] == key
        assert saved["saved_at"].endswith("+09:00")
        assert saved["sale_price"] == "25,800원"
        assert saved["options"][0]["items"][1]["sold_out"] is True
        assert "children_cert" not in saved

    def test_margin_rate(self, store, sample_record):
        key = store.save(sample_record, margin_rate=50)
        assert store.get(key)["sale_price"] == "29,700원"

    def test_edits_override_non_empty_values(self, store, sample_record):
        key = store.save(sample_record, edits={"title": "참기름 선물세트", "brand": "", "sale_price": "30,000원"})
        saved = store.get(key)
        assert saved["title"] == "참기름 선물세트"
        assert saved["brand"] == "고소한집"
        assert saved["sale_price"] == "30,000원"

    def test_enrichment_is_attached(self, store, sample_record):
        enrichment = parse_response('{"productNameEN": "Sesame Oil"}')
        key = store.save(sample_record, enrichment)
        assert store.get(key)["ai_analysis"]["productNameEN"] == "Sesame Oil"

    def test_list_newest_first(self, store, sample_record):
        stamps = ["2025-01-15T10:00:00.000+09:00", "2025-01-15T11:00:00.000+09:00"]
        with patch("store.now_kst", side_effect=stamps):
            first = store.save(sample_record)
            second = store.save(sample_record)
        records = store.list_records()
        assert [r["id"] for r in records] == [second, first]

    def test_settings_are_not_records(self, store, sample_record):
        store.set_setting("gemini_api_key", "secret")
        store.save(sample_record)
        assert len(store.list_records()) == 1
        assert store.clear_all() == 1
        assert store.list_records() == []
        assert store.get_setting("gemini_api_key") == "secret"

    def test_setting_name_cannot_use_record_prefix(self, store):
        with pytest.raises(ValueError):
            store.set_setting("product_1", "x")

    def test_delete(self, store, sample_record):
        key = store.save(sample_record)
        assert store.delete(key) is True
        assert store.delete(key) is False
        assert store.get(key) is None

    def test_context_manager_closes_connection(self, tmp_path):
        with RecordStore(str(tmp_path / "closed.db")) as s:
            s.set_setting("gemini_api_key", "k")
        with pytest.raises(sqlite3.ProgrammingError):
            s.get_setting("gemini_api_key")

    def test_persists_across_connections(self, tmp_path, sample_record):
        path = str(tmp_path / "persist.db")
        with RecordStore(path) as s:
            key = s.save(sample_record)
        with RecordStore(path) as s:
            assert s.get(key)["product_code"] == "111222"


class TestCsvExport:
    def _lines(self, data: bytes):
        text = data.decode("utf-8")
        assert text.startswith(BOM)
        return text[len(BOM):].split("\n")

    def test_header_and_quoting(self, store, sample_record):
        store.save(sample_record)
        lines = self._lines(store.export_csv())
        assert lines[0] == HEADER
        assert lines[1] == (
            '"2025-01-15","coupang","111222","국산 참기름 750ml","고소한집",'
            '"0.75","19,800원","25,800원","3000"'
        )

    def test_embedded_quotes_are_doubled(self):
        record = {"captured_on": "2025-01-15", "site": "gmarket", "title": 'He said "hi"'}
        lines = self._lines(records_to_csv([record]))
        assert lines[1] == '"2025-01-15","gmarket","","He said ""hi""","","","","",""'

    def test_empty(self):
        lines = self._lines(records_to_csv([]))
        assert lines[0] == HEADER
        assert all(line == "" for line in lines[1:])
