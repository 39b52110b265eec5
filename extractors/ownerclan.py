"""Extractor for ownerclan.com wholesale product pages."""

import re

from extractors.base import BaseExtractor, OptionPass


class OwnerclanExtractor(BaseExtractor):
    """
    ownerclan.com/V2/product/view.php?selfcode={code}
    Title: .prd_name h2
    Price: .prd_price .sale_price (supplier price)
    Options: .prd_option select options
    """

    site = "ownerclan"

    title_selectors = [".prd_name h2", ".goods_name", "h2.prd_name"]
    brand_selectors = [".prd_brand", ".brand_name"]
    price_selectors = [".prd_price .sale_price", ".prd_price strong", ".price strong"]
    shipping_selectors = [".prd_delivery .delivery_price", ".delivery_price"]

    main_image_selectors = [".prd_img .main_img img", ".prd_img img"]
    thumbnail_selectors = [".prd_thumb img", ".thumb_list img"]
    detail_image_selectors = [".prd_detail img", ".detail_cont img"]

    code_query_params = ["selfcode", "selfCode"]
    code_scan_selector = ".prd_info li"
    code_scan_pattern = re.compile(r"상품코드\s*:?\s*([A-Za-z]?\d+)")

    option_block_selector = ".prd_option .option_item"
    option_group_label_selector = ".option_title"
    option_passes = [OptionPass('select option:not([value=""])')]
