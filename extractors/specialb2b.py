"""Extractor for specialb2b.com wholesale product pages."""

import re

from extractors.base import BaseExtractor, OptionPass


class SpecialB2BExtractor(BaseExtractor):
    """
    specialb2b.com/goods/goods_view.php?goodsNo={no}
    Title: .item_detail_tit h3
    Price: .item_price dd strong
    Options: .item_add_option_box select options
    """

    site = "specialb2b"

    title_selectors = [".item_detail_tit h3", ".goods_name h2"]
    brand_selectors = [".item_brand", ".brand_name"]
    price_selectors = [".item_price dd strong", ".item_price strong", ".goods_price strong"]
    shipping_selectors = [".item_delivery dd strong", ".delivery_price"]

    main_image_selectors = [".item_photo_big img", ".goods_image img"]
    thumbnail_selectors = [".item_photo_slide img", ".thumbnail img"]
    detail_image_selectors = [".detail_explain_box img", ".goods_description img"]

    code_query_params = ["goodsNo", "goodsno"]
    code_scan_selector = ".item_detail_list dl"
    code_scan_pattern = re.compile(r"상품코드\s*:?\s*(\d+)")

    option_block_selector = ".item_add_option_box"
    option_group_label_selector = "dt"
    option_passes = [OptionPass('select option:not([value=""])')]
