"""Extractor for coupang.com product pages."""

import re

from extractors.base import BaseExtractor, OptionPass


class CoupangExtractor(BaseExtractor):
    """
    coupang.com/vp/products/{id}?itemId={item_id}
    Title: h1.product-title span.twc-font-bold (new template), h2.prod-buy-header__title (old)
    Price: .simplify-atf-price bold 28px, .sales-price-amount, .final-price-amount
    Options: .option-picker-select dropdown items + .option-table-v2 rows
    Certifications: #itemBrief table, td label/value pairs
    """

    site = "coupang"

    title_selectors = [
        "h1.product-title span.twc-font-bold",
        "h2.prod-buy-header__title",
        'h2[data-test="productTitle"]',
    ]
    brand_selectors = [".prod-brand-name a", '[class*="brand"]']
    price_selectors = [
        '.simplify-atf-price .twc-font-bold[class*="28px"]',
        ".sales-price-amount",
        ".final-price-amount",
    ]

    main_image_selectors = ["img.prod-thumbnail__image", 'img[data-test="productMainImage"]']
    thumbnail_selectors = [
        ".product-image img",
        r".twc-w-\[70px\] img",
        ".prod-thumbnail img",
        ".thumbnail-list img",
    ]
    detail_image_selectors = [
        "#prodDetail img",
        ".prod-description img",
        ".detail-content img",
        ".product-detail-content-new img",
    ]
    filter_detail_hosts = False

    code_query_params = ["itemId"]
    code_scan_selector = ".product-description li, .prod-description li"
    code_scan_pattern = re.compile(r"쿠팡상품번호\s*:\s*(\d+)")

    option_block_selector = ".option-picker-select, .option-table-v2"
    option_group_label_selector = ".twc-flex-1"
    option_passes = [
        OptionPass(".select-item", ".twc-font-bold", ".price-text"),
        OptionPass(
            ".option-table-list__option",
            ".option-table-list__option-name",
            ".option-table-list__option-price",
        ),
    ]

    cert_row_selector = "#itemBrief table tr"
