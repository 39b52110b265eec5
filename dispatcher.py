"""Pick the site extractor for a page URL and run it against the page."""

import logging
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urlparse

from config import SITES
from extractors import EXTRACTORS, BaseExtractor
from models import ExtractionFailure, RawProductRecord
from page_fetcher import fetch_page, load_page, parse_html

logger = logging.getLogger(__name__)


class UnsupportedSiteError(ValueError):
    """The page URL does not belong to any supported storefront."""

    def __init__(self, url: str):
        self.url = url
        supported = ", ".join(conf["display_name"] for conf in SITES.values())
        super().__init__(f"지원하지 않는 쇼핑몰입니다: {url} (지원: {supported})")


def _host_matches(*suffixes: str) -> Callable[[str], bool]:
    def predicate(host: str) -> bool:
        return any(host == s or host.endswith("." + s) for s in suffixes)
    return predicate


# Ordered (predicate, site id) rules, first match wins.
SITE_RULES: list[tuple[Callable[[str], bool], str]] = [
    (_host_matches(*SITES[site]["hosts"]), site)
    for site in (
        "coupang",
        "naver_smart",
        "naver_brand",
        "gmarket",
        "domeggook",
        "ownerclan",
        "specialb2b",
    )
]


def with_scheme(page_url: str) -> str:
    """Give a pasted URL without a scheme (www.coupang.com/...) an explicit https one."""
    page_url = page_url.strip()
    if page_url.startswith("//"):
        return f"https:{page_url}"
    if page_url and "://" not in page_url:
        return f"https://{page_url}"
    return page_url


def detect_site(page_url: str) -> Optional[str]:
    """Return the site id for a URL, or None when no rule matches."""
    host = (urlparse(with_scheme(page_url)).hostname or "").lower()
    if not host:
        return None
    for predicate, site in SITE_RULES:
        if predicate(host):
            return site
    return None


def dispatch(page_url: str) -> BaseExtractor:
    """Return the extractor for a page URL. Raises UnsupportedSiteError."""
    site = detect_site(page_url)
    if site is None:
        raise UnsupportedSiteError(page_url)
    return EXTRACTORS[site]()


def extract_from_html(page_url: str, html: str | bytes) -> RawProductRecord | ExtractionFailure:
    """Run the matching extractor over an already-downloaded page."""
    extractor = dispatch(page_url)
    page_url = with_scheme(page_url)
    logger.info(f"[{extractor.site}] Extracting from saved page: {page_url}")
    return extractor.extract(parse_html(html), page_url)


def extract_from_file(page_url: str, path: str | Path) -> RawProductRecord | ExtractionFailure:
    """Run the matching extractor over a page saved from the browser."""
    extractor = dispatch(page_url)
    page_url = with_scheme(page_url)
    logger.info(f"[{extractor.site}] Extracting from {path}: {page_url}")
    return extractor.extract(load_page(path), page_url)


def extract_from_url(page_url: str) -> RawProductRecord | ExtractionFailure:
    """Fetch a page and run the matching extractor over it."""
    extractor = dispatch(page_url)
    page_url = with_scheme(page_url)
    logger.info(f"[{extractor.site}] Fetching {page_url}")
    soup = fetch_page(page_url)
    if soup is None:
        return ExtractionFailure(
            message="페이지를 불러올 수 없습니다.", site=extractor.site, url=page_url
        )
    return extractor.extract(soup, page_url)
