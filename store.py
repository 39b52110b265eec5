"""SQLite key-value store for saved product records."""

import csv
import io
import json
import logging
import random
import sqlite3
import string
import time
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pandas as pd

from config import DB_PATH, DEFAULT_MARGIN_RATE, RECORD_KEY_PREFIX
from enrichment.models import AIEnrichment
from models import RawProductRecord
from normalize import compute_sale_price

logger = logging.getLogger(__name__)

KST = timezone(timedelta(hours=9))

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

# CSV header label → record field
CSV_COLUMNS = {
    "소싱날짜": "captured_on",
    "소싱처": "site",
    "상품코드": "product_code",
    "물품명": "title",
    "브랜드": "brand",
    "무게": "weight_kg",
    "구입가": "purchase_price",
    "판매가": "sale_price",
    "배송비": "shipping_fee",
}

_KEY_ALPHABET = string.digits + string.ascii_lowercase


def now_kst() -> str:
    """Return current time in KST as ISO format string."""
    return datetime.now(KST).isoformat(timespec="milliseconds")


def new_record_key() -> str:
    """product_<epoch-millis>_<9 random base36 chars>"""
    suffix = "".join(random.choices(_KEY_ALPHABET, k=9))
    return f"{RECORD_KEY_PREFIX}{int(time.time() * 1000)}_{suffix}"


def get_connection(db_path: str = DB_PATH) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def export_filename(today: Optional[date] = None) -> str:
    return f"Shopee_Sourcing_{(today or date.today()).isoformat()}.csv"


def records_to_csv(records: list[dict]) -> bytes:
    """UTF-8 (with BOM) CSV of the fixed export columns, every value quoted."""
    rows = [
        {label: _csv_value(record.get(field_name)) for label, field_name in CSV_COLUMNS.items()}
        for record in records
    ]
    df = pd.DataFrame(rows, columns=list(CSV_COLUMNS))
    buf = io.StringIO()
    buf.write(",".join(CSV_COLUMNS) + "\n")
    df.to_csv(buf, header=False, index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    return ("\ufeff" + buf.getvalue()).encode("utf-8")


def _csv_value(value) -> str:
    if value is None:
        return ""
    return str(value)


class RecordStore:
    """Flat key-value persistence; product records live under the 'product_' prefix."""

    def __init__(self, db_path: str = DB_PATH):
        self.db_path = db_path
        self.conn = get_connection(db_path)
        self.conn.executescript(SCHEMA)

    def close(self):
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # --- Raw key-value access ---

    def _get(self, key: str) -> Optional[dict | str]:
        row = self.conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return json.loads(row["value"]) if row else None

    def _set(self, key: str, value):
        with self.conn:
            self.conn.execute(
                "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)",
                (key, json.dumps(value, ensure_ascii=False)),
            )

    # --- Product records ---

    def save(
        self,
        record: RawProductRecord | dict,
        enrichment: Optional[AIEnrichment] = None,
        edits: Optional[dict] = None,
        margin_rate: int = DEFAULT_MARGIN_RATE,
    ) -> str:
        """Merge record, enrichment and user edits and persist them under a new key."""
        data = record.to_dict() if isinstance(record, RawProductRecord) else dict(record)
        if enrichment is not None:
            data["ai_analysis"] = enrichment.to_dict()
        for field_name, value in (edits or {}).items():
            if value not in (None, ""):
                data[field_name] = value
        if not data.get("sale_price"):
            data["sale_price"] = compute_sale_price(data.get("purchase_price", ""), margin_rate)

        key = new_record_key()
        data["save_id"] = key
        data["saved_at"] = now_kst()
        self._set(key, data)
        logger.info(f"Saved record {key}: {data.get('title', '')}")
        return key

    def get(self, key: str) -> Optional[dict]:
        value = self._get(key)
        return value if isinstance(value, dict) else None

    def list_records(self) -> list[dict]:
        """All saved product records, newest first."""
        rows = self.conn.execute(
            "SELECT key, value FROM kv WHERE key GLOB ? ORDER BY key",
            (RECORD_KEY_PREFIX + "*",),
        ).fetchall()
        records = []
        for row in rows:
            record = json.loads(row["value"])
            record["id"] = row["key"]
            records.append(record)
        records.sort(key=lambda r: r.get("saved_at", ""), reverse=True)
        return records

    def delete(self, key: str) -> bool:
        with self.conn:
            cursor = self.conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        if cursor.rowcount:
            logger.info(f"Deleted record {key}")
        return cursor.rowcount > 0

    def clear_all(self) -> int:
        """Delete every product record, keeping settings."""
        with self.conn:
            cursor = self.conn.execute(
                "DELETE FROM kv WHERE key GLOB ?", (RECORD_KEY_PREFIX + "*",)
            )
        logger.info(f"Cleared {cursor.rowcount} records")
        return cursor.rowcount

    def export_csv(self, records: Optional[list[dict]] = None) -> bytes:
        return records_to_csv(self.list_records() if records is None else records)

    # --- Settings ---

    def get_setting(self, name: str) -> Optional[str]:
        value = self._get(name)
        return value if isinstance(value, str) else None

    def set_setting(self, name: str, value: str):
        if name.startswith(RECORD_KEY_PREFIX):
            raise ValueError(f"Setting names cannot start with '{RECORD_KEY_PREFIX}'")
        self._set(name, value)
