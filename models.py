"""Data models for scraped product records."""

from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Optional

from config import DEFAULT_BRAND, DEFAULT_WEIGHT_KG, SALE_UNIT, ZERO_PRICE


@dataclass
class OptionItem:
    label: str
    price_text: str = ""
    sold_out: bool = False


@dataclass
class OptionGroup:
    name: str
    items: list[OptionItem] = field(default_factory=list)


@dataclass
class RawProductRecord:
    url: str
    site: str  # 'coupang' | 'naver_smart' | 'naver_brand' | 'gmarket' | 'domeggook' | 'ownerclan' | 'specialb2b'
    captured_on: str = field(default_factory=lambda: date.today().isoformat())
    product_code: str = ""
    title: str = ""
    brand: str = DEFAULT_BRAND
    weight_kg: str = DEFAULT_WEIGHT_KG
    purchase_price: str = ZERO_PRICE
    shipping_fee: str = "0"
    main_image: str = ""
    images: list[str] = field(default_factory=list)
    detail_images: list[str] = field(default_factory=list)
    options: list[OptionGroup] = field(default_factory=list)
    sale_unit: str = SALE_UNIT
    # Certification fields, only set when the page exposes them
    electrical_cert: Optional[str] = None
    children_cert: Optional[str] = None
    household_cert: Optional[str] = None
    broadcast_cert: Optional[str] = None
    manufacturer: Optional[str] = None
    origin_detail: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None}


@dataclass
class ExtractionFailure:
    message: str
    site: str = ""
    url: str = ""

    def to_dict(self) -> dict:
        return {"error": self.message, "site": self.site, "url": self.url}
