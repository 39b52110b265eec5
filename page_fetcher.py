"""Fetch or load product pages and hand back parsed documents."""

import logging
from pathlib import Path
from typing import Optional

import requests
from bs4 import BeautifulSoup

from config import ACCEPT_LANGUAGE, REQUEST_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)

_session: Optional[requests.Session] = None


def _get_session() -> requests.Session:
    global _session
    if _session is None:
        _session = requests.Session()
        _session.headers.update({
            "User-Agent": USER_AGENT,
            "Accept-Language": ACCEPT_LANGUAGE,
        })
    return _session


def parse_html(html: str | bytes) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def fetch_page(url: str) -> Optional[BeautifulSoup]:
    """Fetch a product page and return parsed BeautifulSoup, or None on error."""
    session = _get_session()
    try:
        resp = session.get(url, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        resp.encoding = resp.apparent_encoding or "utf-8"
    except requests.RequestException as e:
        logger.error(f"Failed to fetch {url}: {e}")
        return None
    return parse_html(resp.text)


def load_page(path: str | Path) -> BeautifulSoup:
    """Parse a product page saved from the browser."""
    return parse_html(Path(path).read_bytes())
