#!/usr/bin/env python3
"""Main entry point: extract a product page, enrich it, and manage saved records."""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

from config import DB_PATH, DEFAULT_MARGIN_RATE, GEMINI_API_KEY_SETTING
from dispatcher import UnsupportedSiteError, extract_from_file, extract_from_url
from enrichment.gemini import analyze_product, describe_failure, test_credential
from models import ExtractionFailure
from store import RecordStore, export_filename

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def _print_json(data):
    print(json.dumps(data, ensure_ascii=False, indent=2))


def run_extract(args, store: RecordStore) -> int:
    """Dispatch → extract → (enrich) → (save) for one page."""
    try:
        if args.html:
            record = extract_from_file(args.url, args.html)
        else:
            record = extract_from_url(args.url)
    except UnsupportedSiteError as e:
        logger.error(str(e))
        return 1

    if isinstance(record, ExtractionFailure):
        logger.error(f"[{record.site}] 추출 실패: {record.message}")
        return 1

    output = {"record": record.to_dict()}
    enrichment = None
    if args.enrich:
        result = analyze_product(record, store=store)
        if not result.success:
            message = describe_failure(result.status, result.error) if result.status else result.error
            logger.error(f"AI 분석 오류: {message}")
            return 1
        enrichment = result.data
        output["ai_analysis"] = enrichment.to_dict()

    if args.save:
        output["save_id"] = store.save(record, enrichment, margin_rate=args.margin)

    _print_json(output)
    return 0


def run_set_key(api_key: str, store: RecordStore) -> int:
    """Test a Gemini key, then keep it for later runs."""
    api_key = api_key.strip()
    if not api_key:
        logger.error("API 키를 입력해주세요.")
        return 1

    check = test_credential(api_key)
    store.set_setting(GEMINI_API_KEY_SETTING, api_key)
    if check.ok:
        logger.info("Gemini API 키가 저장되고 검증되었습니다.")
        return 0
    logger.error(f"키 테스트 실패: {describe_failure(check.status, check.error_message)}")
    return 1


def main():
    parser = argparse.ArgumentParser(description="Korean storefront product sourcing scraper")
    parser.add_argument("url", nargs="?", help="Product page URL")
    parser.add_argument("--html", type=str, help="Saved HTML of the product page (skip fetching)")
    parser.add_argument("--enrich", action="store_true", help="Run Gemini analysis on the record")
    parser.add_argument("--save", action="store_true", help="Save the record to the local store")
    parser.add_argument(
        "--margin", type=int, default=DEFAULT_MARGIN_RATE, help="Margin rate (%%) for the sale price"
    )
    parser.add_argument("--db", type=str, default=DB_PATH, help="Record store path")
    parser.add_argument("--list", action="store_true", help="List saved records")
    parser.add_argument("--delete", type=str, metavar="KEY", help="Delete a saved record")
    parser.add_argument("--clear", action="store_true", help="Delete all saved records")
    parser.add_argument("--export", type=str, nargs="?", const="", metavar="PATH", help="Export saved records as CSV")
    parser.add_argument("--set-key", type=str, metavar="KEY", help="Test and save a Gemini API key")
    args = parser.parse_args()

    with RecordStore(args.db) as store:
        if args.set_key is not None:
            return run_set_key(args.set_key, store)

        if args.list:
            for record in store.list_records():
                print(
                    f"{record['id']}  {record.get('captured_on', '')}  [{record.get('site', '')}] "
                    f"{record.get('title', '')}  {record.get('purchase_price', '')}"
                )
            return 0

        if args.delete:
            if not store.delete(args.delete):
                logger.error(f"No record with key {args.delete}")
                return 1
            return 0

        if args.clear:
            store.clear_all()
            return 0

        if args.export is not None:
            records = store.list_records()
            if not records:
                logger.error("데이터가 없습니다.")
                return 1
            path = Path(args.export or export_filename())
            path.write_bytes(store.export_csv(records))
            logger.info(f"Exported {len(records)} records to {path}")
            return 0

        if not args.url:
            parser.error("a product URL is required")
        return run_extract(args, store)


if __name__ == "__main__":
    sys.exit(main())
