"""Extractor for domeggook.com wholesale product pages."""

import re

from extractors.base import BaseExtractor, OptionPass


class DomeggookExtractor(BaseExtractor):
    """
    domeggook.com/{item_no}
    Title: h1#lInfoItemTitle
    Price: .lItemPrice (wholesale unit price)
    Options: #lOptionBox select options + .lOptionTbl rows
    Certifications: #lInfoViewItemInfo table (th label, td value)
    """

    site = "domeggook"

    title_selectors = ["h1#lInfoItemTitle", "#lInfoHeader h1", ".lItemTitle"]
    brand_selectors = [".lInfoBrand", "#lInfoBody .brand"]
    price_selectors = ["#lAmtSectionTbl .lItemPrice", ".lItemPrice", ".lPrice strong"]
    shipping_selectors = [".lDeliPrice", "#lDeliInfo .lPrice"]

    main_image_selectors = ["#lThumbImg img", ".lMainImg img"]
    thumbnail_selectors = ["#lThumbList img", ".lThumbList img"]
    detail_image_selectors = ["#lInfoViewItemContents img", ".lDetailContents img"]

    code_path_pattern = re.compile(r"^/(?:main/item/itemView\.php/)?(\d+)")
    code_scan_selector = "#lInfoItemNo, .lInfoItemNo"
    code_scan_pattern = re.compile(r"상품번호\s*:?\s*(\d+)")

    option_block_selector = "#lOptionBox .lOptionGroup"
    option_group_label_selector = ".lOptionName"
    option_passes = [
        OptionPass('select option:not([value=""])'),
        OptionPass("tr.lOptionRow", "td.lOptionLabel", "td.lOptionPrice"),
    ]

    cert_row_selector = "#lInfoViewItemInfo table tr"
