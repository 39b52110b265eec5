"""Extractors for Naver Smartstore and Brandstore product pages."""

import re

from extractors.base import BaseExtractor, OptionPass


class NaverSmartExtractor(BaseExtractor):
    """
    smartstore.naver.com/{store}/products/{id}
    Class names are hashed per template build, so each field keeps the
    hashed selector plus a semantic fallback.
    Title: h3.DCVBehA8ZB, .product_title h3
    Price: .Xu9MEKUuIo.s6EKUu28OE .e1DMQNBPJ_, .price em
    Images: img.bd_2DO68 (main), img.bd_1Niq0 (thumbnails), SmartEditor modules (detail)
    Options: ul lists inside .product_option_area, item text is the label
    """

    site = "naver_smart"

    title_selectors = ["h3.DCVBehA8ZB", ".product_title h3"]
    brand_selectors = [".product_article ._2L3vDuo0YM a", '[class*="brand"]']
    price_selectors = [".Xu9MEKUuIo.s6EKUu28OE .e1DMQNBPJ_", ".price em"]
    shipping_selectors = ["span.Se0UVy4E71", ".delivery_fee"]

    main_image_selectors = ["img.bd_2DO68", ".image_thumb img"]
    thumbnail_selectors = ["img.bd_1Niq0", ".thumbnail img"]
    detail_image_selectors = [
        "img.se-image-resource",
        ".se-module-image img",
        ".detail_content img",
    ]

    code_path_pattern = re.compile(r"/products/(\d+)")
    code_scan_selector = "table tr"
    code_scan_pattern = re.compile(r"상품번호\s*:?\s*(\d+)")

    option_block_selector = ".product_option_area ul, .optionArea ul"
    option_passes = [OptionPass("li")]


class NaverBrandExtractor(NaverSmartExtractor):
    """brand.naver.com/{brand}/products/{id}, same markup as Smartstore."""

    site = "naver_brand"
