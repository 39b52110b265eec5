"""Field normalizers shared by every site extractor.

Pure functions that turn raw scraped strings into canonical record fields:
weight inference, image URL canonicalization/deduplication and price formatting.
"""

import math
import re
from typing import Iterable, Optional
from urllib.parse import urljoin

from config import DEFAULT_MARGIN_RATE, DEFAULT_WEIGHT_KG, ZERO_PRICE

# --- Weight patterns (priority order: kg, g, ml, l) ---
_NUMBER = r"(\d[\d,]*(?:\.\d+)?|\.\d+)"
_THOUSANDS_COMMA = re.compile(r",(?=\d{3}(?!\d))")
_WEIGHT_PATTERNS: list[tuple[re.Pattern, float]] = [
    (re.compile(_NUMBER + r"\s*(?:kg|kilograms?|킬로그램|킬로)(?![a-z])"), 1.0),
    (re.compile(_NUMBER + r"\s*(?:g|grams?|그램)(?![a-z])"), 1000.0),
    (re.compile(_NUMBER + r"\s*(?:ml|밀리리터|미리리터)(?![a-z])"), 1000.0),
    (re.compile(_NUMBER + r"\s*(?:l|liters?|litres?|리터)(?![a-z])"), 1.0),
]

# --- Image upgrade rules per site: (pattern, replacement) ---
_COUPANG_RULES = [
    (re.compile(r"/thumbnail/"), "/492x492ex/"),
    (re.compile(r"/(?:48x48|70x70|96x96)ex/"), "/492x492ex/"),
]
_NAVER_RULES = [
    (re.compile(r"type=f(?:40|80|200)\b"), "type=f640"),
]
_IMAGE_UPGRADE_RULES: dict[str, list[tuple[re.Pattern, str]]] = {
    "coupang": _COUPANG_RULES,
    "naver_smart": _NAVER_RULES,
    "naver_brand": _NAVER_RULES,
    "gmarket": [(re.compile(r"/still/\d+"), "/still/600")],
}


def infer_weight_kg(title: str, description: str = "") -> str:
    """Infer a product weight in kilograms from free text.

    Patterns are tried in priority order (kg, g, ml, l); the first one that
    matches anywhere in the text wins. Grams and milliliters are divided by
    1000, liters are taken as kilograms. A comma before exactly three digits
    separates thousands; any other comma is a decimal point.

      '생수 2L 6병'      → '2.00'
      '닭가슴살 500g'    → '0.50'
      '샴푸 750ml'       → '0.75'
      '무지 티셔츠'       → '0.50'
    """
    text = f"{title or ''} {description or ''}".lower()
    for pattern, divisor in _WEIGHT_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        try:
            number = _THOUSANDS_COMMA.sub("", match.group(1)).replace(",", ".")
            value = float(number)
        except ValueError:
            continue
        return f"{value / divisor:.2f}"
    return DEFAULT_WEIGHT_KG


def upgrade_image_url(url: str, site: str) -> str:
    """Rewrite known thumbnail markers to the largest size the storefront serves."""
    if not url:
        return ""
    for pattern, replacement in _IMAGE_UPGRADE_RULES.get(site, []):
        url = pattern.sub(replacement, url)
    return url


def canonicalize_image_url(url: Optional[str], site: str, base_url: Optional[str] = None) -> str:
    """Return a storable, upgraded image URL, or '' when the candidate must be dropped.

    data: URLs are rejected, protocol-relative URLs get an explicit https scheme,
    and relative paths are resolved against base_url when given.
    """
    if not url:
        return ""
    url = url.strip()
    if not url or url.lower().startswith("data:"):
        return ""
    if url.startswith("//"):
        url = f"https:{url}"
    elif not url.startswith("http") and base_url:
        url = urljoin(base_url, url)
    return upgrade_image_url(url, site)


def _dedupe_key(url: str) -> str:
    return url.split("?", 1)[0]


def dedupe_image_urls(
    urls: Iterable[str], main_image: Optional[str] = None, limit: Optional[int] = None
) -> list[str]:
    """Deduplicate image URLs by their query-less form, keeping first-seen order.

    A separately identified main image is moved to position 0. Empty and
    data: entries are skipped. limit caps the result length.
    """
    seen: set[str] = set()
    result: list[str] = []
    for url in urls:
        if not url or url.lower().startswith("data:"):
            continue
        key = _dedupe_key(url)
        if key in seen:
            continue
        seen.add(key)
        result.append(url)

    if main_image and not main_image.lower().startswith("data:"):
        main_key = _dedupe_key(main_image)
        result = [u for u in result if _dedupe_key(u) != main_key]
        result.insert(0, main_image)

    if limit is not None:
        result = result[:limit]
    return result


def parse_price(text: Optional[str]) -> int:
    """Parse Korean price text like '19,800원' → 19800. Returns 0 when unparsable."""
    if not text:
        return 0
    cleaned = re.sub(r"[^\d]", "", text)
    return int(cleaned) if cleaned else 0


def format_krw(amount: int) -> str:
    """Format a won amount with thousands separators: 19800 → '19,800원'."""
    if not amount or amount <= 0:
        return ZERO_PRICE
    return f"{amount:,}원"


def digits_only(text: Optional[str]) -> str:
    return re.sub(r"[^\d]", "", text or "")


def compute_sale_price(purchase_price: str, margin_rate: int = DEFAULT_MARGIN_RATE) -> str:
    """Apply the margin to a purchase price and round up to the next 100 won.

    Returns '' when the purchase price is not positive.
    """
    amount = parse_price(purchase_price)
    if amount <= 0:
        return ""
    raw = amount * (1 + margin_rate / 100)
    return format_krw(int(math.ceil(round(raw, 6) / 100) * 100))
