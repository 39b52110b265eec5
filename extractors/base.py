"""Base extractor for Korean storefront product pages."""

import logging
import re
from typing import Callable, NamedTuple, Optional, TypeVar
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup, Tag

from config import CODE_SCAN_LIMIT, DEFAULT_BRAND, SITES, ZERO_PRICE
from models import ExtractionFailure, OptionGroup, OptionItem, RawProductRecord
from normalize import (
    canonicalize_image_url,
    dedupe_image_urls,
    digits_only,
    format_krw,
    infer_weight_kg,
    parse_price,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SOLD_OUT_CLASSES = {"disabled", "soldout", "sold-out", "sold_out"}
_SOLD_OUT_TEXT_RE = re.compile(r"품절|sold\s*out", re.IGNORECASE)

# Label patterns for certification tables, first match wins.
CERT_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"KC.*전기용품|전기용품.*KC", re.IGNORECASE), "electrical_cert"),
    (re.compile(r"KC.*어린이|어린이.*KC", re.IGNORECASE), "children_cert"),
    (re.compile(r"KC.*생활용품|생활용품.*KC", re.IGNORECASE), "household_cert"),
    (re.compile(r"방송통신|전파인증|KCC", re.IGNORECASE), "broadcast_cert"),
    (re.compile(r"제조자|제조사|수입자"), "manufacturer"),
    (re.compile(r"제조국|원산지"), "origin_detail"),
]


class OptionPass(NamedTuple):
    """One markup shape for option items inside an option block.

    label_selector=None uses the item's own text as its label.
    """

    item_selector: str
    label_selector: Optional[str] = None
    price_selector: Optional[str] = None


class BaseExtractor:
    """Shared extraction logic for product detail pages.

    Subclasses set the site id and selector lists; the pipeline in parse()
    is the same for every storefront. Each selector list is tried in order
    and the first element with non-empty text wins.
    """

    site: str = ""

    title_selectors: list[str] = []
    brand_selectors: list[str] = []
    price_selectors: list[str] = []
    shipping_selectors: list[str] = []

    main_image_selectors: list[str] = []
    thumbnail_selectors: list[str] = []
    detail_image_selectors: list[str] = []
    filter_detail_hosts = True

    code_query_params: list[str] = []
    code_path_pattern: Optional[re.Pattern] = None
    code_scan_selector: Optional[str] = None
    code_scan_pattern: Optional[re.Pattern] = None

    option_block_selector: Optional[str] = None
    option_group_label_selector: Optional[str] = None
    option_passes: list[OptionPass] = []

    cert_row_selector: Optional[str] = None

    def __init__(self):
        conf = SITES[self.site]
        self.display_name = conf["display_name"]
        self.image_hosts: list[str] = conf["image_hosts"]
        self.default_shipping_fee: str = conf["default_shipping_fee"]
        self.thumbnail_limit: Optional[int] = conf["thumbnail_limit"]
        self.detail_image_limit: Optional[int] = conf["detail_image_limit"]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} site={self.site}>"

    def extract(self, soup: BeautifulSoup, page_url: str) -> RawProductRecord | ExtractionFailure:
        """Extract a product record from a parsed page. Never raises."""
        try:
            record = self.parse(soup, page_url)
        except Exception as e:
            logger.warning(f"[{self.site}] Extraction failed for {page_url}: {e}")
            return ExtractionFailure(message=str(e) or type(e).__name__, site=self.site, url=page_url)

        if not (record.title or record.product_code or record.images):
            logger.warning(f"[{self.site}] No product data found on {page_url}")
            return ExtractionFailure(
                message="상품 정보를 추출할 수 없습니다.", site=self.site, url=page_url
            )
        return record

    def parse(self, soup: BeautifulSoup, page_url: str) -> RawProductRecord:
        record = RawProductRecord(url=page_url, site=self.site)

        record.product_code = self._field(
            "product_code", lambda: self.extract_product_code(soup, page_url), ""
        )
        record.title = self._field(
            "title", lambda: self.select_first_text(soup, self.title_selectors), ""
        )
        record.weight_kg = infer_weight_kg(record.title)
        record.brand = self._field(
            "brand", lambda: self.select_first_text(soup, self.brand_selectors), ""
        ) or DEFAULT_BRAND
        record.purchase_price = self._field(
            "purchase_price", lambda: self.extract_price(soup), ZERO_PRICE
        )
        record.shipping_fee = self._field(
            "shipping_fee", lambda: self.extract_shipping_fee(soup), self.default_shipping_fee
        )

        record.images = self._field(
            "images", lambda: self.extract_thumbnails(soup, page_url), []
        )
        record.main_image = record.images[0] if record.images else ""
        record.detail_images = self._field(
            "detail_images", lambda: self.extract_detail_images(soup, page_url), []
        )
        record.options = self._field("options", lambda: self.extract_options(soup), [])

        certs = self._field("certifications", lambda: self.extract_certifications(soup), {})
        for name, value in certs.items():
            setattr(record, name, value)

        logger.info(
            f"[{self.site}] Extracted '{record.title}' ({record.purchase_price}) "
            f"images={len(record.images)} options={len(record.options)}"
        )
        return record

    # --- Field extraction ---

    def extract_product_code(self, soup: BeautifulSoup, page_url: str) -> str:
        """Product code from the URL query/path, else a labeled number in the description."""
        parsed = urlparse(page_url)
        qs = parse_qs(parsed.query)
        for param in self.code_query_params:
            values = qs.get(param)
            if values and values[0].strip():
                return values[0].strip()

        if self.code_path_pattern:
            match = self.code_path_pattern.search(parsed.path)
            if match:
                return match.group(1)

        if self.code_scan_selector and self.code_scan_pattern:
            for el in soup.select(self.code_scan_selector)[:CODE_SCAN_LIMIT]:
                match = self.code_scan_pattern.search(el.get_text(" ", strip=True))
                if match:
                    return match.group(1)
        return ""

    def extract_price(self, soup: BeautifulSoup) -> str:
        text = self.select_first_text(soup, self.price_selectors)
        return format_krw(parse_price(text))

    def extract_shipping_fee(self, soup: BeautifulSoup) -> str:
        text = self.select_first_text(soup, self.shipping_selectors)
        return digits_only(text) or self.default_shipping_fee

    def extract_thumbnails(self, soup: BeautifulSoup, page_url: str) -> list[str]:
        candidates = []
        for img in self._select_all(soup, self.thumbnail_selectors):
            url = canonicalize_image_url(self._image_src(img), self.site, page_url)
            if url and self._allowed_host(url):
                candidates.append(url)

        main_image = ""
        for img in self._select_all(soup, self.main_image_selectors):
            main_image = canonicalize_image_url(self._image_src(img), self.site, page_url)
            if main_image:
                break

        return dedupe_image_urls(candidates, main_image=main_image, limit=self.thumbnail_limit)

    def extract_detail_images(self, soup: BeautifulSoup, page_url: str) -> list[str]:
        urls = []
        for img in self._select_all(soup, self.detail_image_selectors):
            url = canonicalize_image_url(self._image_src(img, lazy_first=True), self.site, page_url)
            if not url:
                continue
            if self.filter_detail_hosts and not self._allowed_host(url):
                continue
            urls.append(url)
        return dedupe_image_urls(urls, limit=self.detail_image_limit)

    def extract_options(self, soup: BeautifulSoup) -> list[OptionGroup]:
        """Collect option groups; every pass adds to the same group's items."""
        if not self.option_block_selector:
            return []

        groups = []
        for idx, block in enumerate(soup.select(self.option_block_selector)):
            name = ""
            if self.option_group_label_selector:
                label_el = block.select_one(self.option_group_label_selector)
                name = label_el.get_text(strip=True) if label_el else ""

            items = []
            for option_pass in self.option_passes:
                for el in block.select(option_pass.item_selector):
                    item = self._parse_option_item(el, option_pass)
                    if item:
                        items.append(item)

            if items:
                groups.append(OptionGroup(name=name or f"옵션{idx + 1}", items=items))
        return groups

    def extract_certifications(self, soup: BeautifulSoup) -> dict[str, str]:
        """Scan a label/value table for certification and origin rows."""
        if not self.cert_row_selector:
            return {}

        found: dict[str, str] = {}
        for row in soup.select(self.cert_row_selector):
            cells = row.select("th, td")
            for i in range(0, len(cells) - 1, 2):
                label = cells[i].get_text(strip=True)
                value = cells[i + 1].get_text(strip=True)
                if not label or not value:
                    continue
                for pattern, field_name in CERT_PATTERNS:
                    if pattern.search(label):
                        found[field_name] = value
                        break
        return found

    # --- Shared helpers ---

    @staticmethod
    def select_first_text(soup: BeautifulSoup, selectors: list[str]) -> str:
        """Text of the first element matching any selector, in selector order."""
        for selector in selectors:
            for el in soup.select(selector):
                text = el.get_text(" ", strip=True)
                if text:
                    return text
        return ""

    @staticmethod
    def is_sold_out(el: Tag) -> bool:
        classes = set(el.get("class", []))
        if classes & _SOLD_OUT_CLASSES or el.has_attr("disabled"):
            return True
        return bool(_SOLD_OUT_TEXT_RE.search(el.get_text(" ", strip=True)))

    def _parse_option_item(self, el: Tag, option_pass: OptionPass) -> Optional[OptionItem]:
        if option_pass.label_selector:
            label_el = el.select_one(option_pass.label_selector)
            label = label_el.get_text(" ", strip=True) if label_el else ""
        else:
            label = el.get_text(" ", strip=True)
        if not label:
            return None

        price_text = ""
        if option_pass.price_selector:
            price_el = el.select_one(option_pass.price_selector)
            price_text = price_el.get_text(strip=True) if price_el else ""

        return OptionItem(label=label, price_text=price_text, sold_out=self.is_sold_out(el))

    @staticmethod
    def _select_all(soup: BeautifulSoup, selectors: list[str]) -> list[Tag]:
        if not selectors:
            return []
        return soup.select(", ".join(selectors))

    @staticmethod
    def _image_src(img: Tag, lazy_first: bool = False) -> str:
        attrs = ("data-src", "src") if lazy_first else ("src", "data-src")
        for attr in attrs:
            value = img.get(attr)
            if value and value.strip():
                return value.strip()
        return ""

    def _allowed_host(self, url: str) -> bool:
        host = (urlparse(url).hostname or "").lower()
        return any(host == h or host.endswith("." + h) for h in self.image_hosts)

    def _field(self, name: str, func: Callable[[], T], default: T) -> T:
        """Run one field extractor, falling back to its default on any fault."""
        try:
            return func()
        except Exception as e:
            logger.warning(f"[{self.site}] Failed to extract {name}: {e}")
            return default
