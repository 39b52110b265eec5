"""Site-specific extractors for Korean storefront product pages."""

from extractors.base import BaseExtractor
from extractors.coupang import CoupangExtractor
from extractors.domeggook import DomeggookExtractor
from extractors.gmarket import GmarketExtractor
from extractors.naver import NaverBrandExtractor, NaverSmartExtractor
from extractors.ownerclan import OwnerclanExtractor
from extractors.specialb2b import SpecialB2BExtractor

EXTRACTORS: dict[str, type[BaseExtractor]] = {
    "coupang": CoupangExtractor,
    "naver_smart": NaverSmartExtractor,
    "naver_brand": NaverBrandExtractor,
    "gmarket": GmarketExtractor,
    "domeggook": DomeggookExtractor,
    "ownerclan": OwnerclanExtractor,
    "specialb2b": SpecialB2BExtractor,
}
