"""Extractor for item.gmarket.co.kr product pages."""

import re

from extractors.base import BaseExtractor, OptionPass


class GmarketExtractor(BaseExtractor):
    """
    item.gmarket.co.kr/Item?goodscode={code}
    Title: h1.itemtit
    Price: strong.price_real
    Images: gdimg.gmarket.co.kr/{code}/still/{size}
    Options: .select-item_option dropdowns, li.item with span.text__option-name
    Certifications: 상품정보제공고시 table (th label, td value)
    """

    site = "gmarket"

    title_selectors = ["h1.itemtit", ".box__item-title h1"]
    brand_selectors = [".text__brand", "a.link__brand", ".text__seller a"]
    price_selectors = ["strong.price_real", ".box__price-seller strong", ".price_innerwrap strong"]
    shipping_selectors = [".box__delivery-fee .text__value", "li.list-item__delivery .text__value"]

    main_image_selectors = [".box__viewer-container img", "#container .thumb-gallery .on img"]
    thumbnail_selectors = [".thumb-gallery li img", ".box__viewer-thumbnail img"]
    detail_image_selectors = ["#vip-tab_detail img", ".box__detail-view img"]

    code_query_params = ["goodscode", "goodsCode"]
    code_scan_selector = ".box__item-info li, #vip-tab_detail table tr"
    code_scan_pattern = re.compile(r"상품번호\s*:?\s*(\d+)")

    option_block_selector = ".select-item_option"
    option_group_label_selector = ".text__option-title"
    option_passes = [
        OptionPass("li.item", ".text__option-name", ".text__option-price"),
        OptionPass("tr.option-row", "td.option-name", "td.option-price"),
    ]

    cert_row_selector = ".box__product-notice table tr, #vip-tab_detail .table_productinfo tr"
