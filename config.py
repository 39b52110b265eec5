"""Site and service configuration for the sourcing scraper."""

import os

REQUEST_TIMEOUT = 15  # seconds
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)
ACCEPT_LANGUAGE = "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7"
DB_PATH = os.environ.get("KFINDER_DB_PATH", "records.db")

# Record defaults
DEFAULT_BRAND = "No Brand"
DEFAULT_WEIGHT_KG = "0.50"
ZERO_PRICE = "0원"
SALE_UNIT = "EA"
DEFAULT_MARGIN_RATE = 30  # percent
RECORD_KEY_PREFIX = "product_"

# Bounded scan for product codes in description lists
CODE_SCAN_LIMIT = 50

# AI enrichment settings
GEMINI_API_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1/models/"
    "gemini-2.5-flash:generateContent"
)
GEMINI_API_KEY_ENV = "GEMINI_API_KEY"
GEMINI_API_KEY_SETTING = "gemini_api_key"
ENRICHMENT_TIMEOUT = None  # no client-side timeout
KRW_PER_USD = 1300
RAW_TEXT_FALLBACK_CHARS = 300

GENERATION_CONFIG = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 2048,
    "responseMimeType": "application/json",
}
CREDENTIAL_TEST_CONFIG = {
    "temperature": 0.7,
    "maxOutputTokens": 100,
    "responseMimeType": "application/json",
}
CREDENTIAL_TEST_PROMPT = "Hello, this is a test."

SITES = {
    "coupang": {
        "name": "coupang",
        "display_name": "쿠팡",
        "hosts": ["coupang.com"],
        "image_hosts": ["coupangcdn.com"],
        "default_shipping_fee": "3000",
        "thumbnail_limit": None,
        "detail_image_limit": None,
    },
    "naver_smart": {
        "name": "naver_smart",
        "display_name": "네이버 스마트스토어",
        "hosts": ["smartstore.naver.com"],
        "image_hosts": ["pstatic.net"],
        "default_shipping_fee": "0",
        "thumbnail_limit": 8,
        "detail_image_limit": 15,
    },
    "naver_brand": {
        "name": "naver_brand",
        "display_name": "네이버 브랜드스토어",
        "hosts": ["brand.naver.com"],
        "image_hosts": ["pstatic.net"],
        "default_shipping_fee": "0",
        "thumbnail_limit": 8,
        "detail_image_limit": 15,
    },
    "gmarket": {
        "name": "gmarket",
        "display_name": "G마켓",
        "hosts": ["gmarket.co.kr"],
        "image_hosts": ["gmarket.co.kr", "gmkt.kr"],
        "default_shipping_fee": "0",
        "thumbnail_limit": 10,
        "detail_image_limit": 20,
    },
    "domeggook": {
        "name": "domeggook",
        "display_name": "도매꾹",
        "hosts": ["domeggook.com"],
        "image_hosts": ["domeggook.com"],
        "default_shipping_fee": "3000",
        "thumbnail_limit": 10,
        "detail_image_limit": 20,
    },
    "ownerclan": {
        "name": "ownerclan",
        "display_name": "오너클랜",
        "hosts": ["ownerclan.com"],
        "image_hosts": ["ownerclan.com"],
        "default_shipping_fee": "3000",
        "thumbnail_limit": 10,
        "detail_image_limit": 20,
    },
    "specialb2b": {
        "name": "specialb2b",
        "display_name": "스페셜B2B",
        "hosts": ["specialb2b.com"],
        "image_hosts": ["specialb2b.com"],
        "default_shipping_fee": "3000",
        "thumbnail_limit": 10,
        "detail_image_limit": 20,
    },
}
