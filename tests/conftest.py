"""Shared fixtures: saved product pages and a throwaway record store."""

import pytest

from models import OptionGroup, OptionItem, RawProductRecord
from store import RecordStore

COUPANG_URL = "https://www.coupang.com/vp/products/7654321?itemId=111222&vendorItemId=333"

COUPANG_HTML = """
<html><body>
<h1 class="product-title"><span class="twc-font-bold">국산 참기름 750ml</span></h1>
<div class="prod-brand-name"><a>고소한집</a></div>
<div class="price-box"><span class="sales-price-amount">19,800원</span></div>

<img class="prod-thumbnail__image" src="//thumbnail6.coupangcdn.com/thumbnails/remote/thumbnail/image/main.jpg?v=1">
<div class="prod-thumbnail">
  <img src="//thumbnail6.coupangcdn.com/thumbnails/remote/48x48ex/image/a.jpg">
  <img src="//thumbnail6.coupangcdn.com/thumbnails/remote/48x48ex/image/main.jpg">
  <img src="https://ads.example.com/banner.jpg">
  <img src="data:image/gif;base64,R0lGODlhAQABAAAAACw=">
</div>

<div class="option-picker-select">
  <div class="twc-flex-1">색상</div>
  <div class="select-item"><span class="twc-font-bold">블랙</span><span class="price-text">19,800원</span></div>
  <div class="select-item soldout"><span class="twc-font-bold">화이트</span><span class="price-text">19,800원</span></div>
  <div class="option-table-list__option">
    <span class="option-table-list__option-name">2병 세트</span>
    <span class="option-table-list__option-price">37,000원</span>
  </div>
</div>
<div class="option-table-v2">
  <div class="option-table-list__option">
    <span class="option-table-list__option-name">선물 포장</span>
    <span class="option-table-list__option-price">1,000원</span>
  </div>
</div>

<div id="prodDetail">
  <img src="data:image/gif;base64,R0lGODlhAQABAAAAACw=" data-src="//image.vendor.co.kr/detail1.jpg">
  <img src="https://image.vendor.co.kr/detail1.jpg?w=800">
  <img src="https://image.vendor.co.kr/detail2.jpg">
</div>

<div class="prod-description"><ul><li>쿠팡상품번호 : 7654321</li></ul></div>

<div id="itemBrief"><table>
  <tr><th>KC 전기용품 인증</th><td>XU100000-12345</td><th>제조자</th><td>(주)참기름공방</td></tr>
  <tr><th>제조국</th><td>대한민국</td></tr>
</table></div>
</body></html>
"""

NAVER_URL = "https://smartstore.naver.com/farmer/products/5566778899"

_NAVER_THUMBS = "\n".join(
    f'<img class="bd_1Niq0" src="https://shop-phinf.pstatic.net/thumb{i}.jpg?type=f40">'
    for i in range(10)
)

NAVER_HTML = f"""
<html><body>
<h3 class="DCVBehA8ZB">유기농 현미 5kg</h3>
<div class="product_article"><span class="_2L3vDuo0YM"><a>농부네</a></span></div>
<div class="Xu9MEKUuIo s6EKUu28OE"><span class="e1DMQNBPJ_">32,900</span>원</div>
<span class="Se0UVy4E71">배송비 3,000원</span>

<img class="bd_2DO68" src="https://shop-phinf.pstatic.net/main.jpg?type=f80">
{_NAVER_THUMBS}

<div class="se-main-container">
  <img class="se-image-resource" src="https://shop-phinf.pstatic.net/detail1.jpg?type=w860">
  <img class="se-image-resource" src="https://cdn.tracker.example.com/pixel.jpg">
</div>

<div class="product_option_area">
  <ul><li>2kg</li><li>5kg (품절)</li></ul>
</div>
</body></html>
"""

GMARKET_URL = "http://item.gmarket.co.kr/Item?goodscode=2345678901"

GMARKET_HTML = """
<html><body>
<h1 class="itemtit">스텐 진공 텀블러 1L</h1>
<span class="text__brand">써모웨어</span>
<strong class="price_real">12,500원</strong>
<div class="box__delivery-fee"><span class="text__value">무료배송</span></div>
<div class="thumb-gallery"><ul>
  <li><img src="//gdimg.gmarket.co.kr/2345678901/still/100?ver=1"></li>
  <li><img src="//gdimg.gmarket.co.kr/2345678901/still/100?ver=2"></li>
  <li><img src="//gdimg.gmarket.co.kr/2345678901/view/1.jpg"></li>
</ul></div>
<div class="box__product-notice"><table>
  <tr><th>KC 어린이제품 인증</th><td>해당없음</td></tr>
  <tr><th>원산지</th><td>중국</td></tr>
</table></div>
</body></html>
"""

DOMEGGOOK_URL = "https://domeggook.com/12345678"

DOMEGGOOK_HTML = """
<html><body>
<h1 id="lInfoItemTitle">실리콘 주방 집게 10개입</h1>
<div id="lAmtSectionTbl"><span class="lItemPrice">4,200원</span></div>
<div id="lThumbImg"><img src="/upload/item/12345678/main.jpg"></div>
<div id="lOptionBox">
  <div class="lOptionGroup">
    <span class="lOptionName">색상</span>
    <select>
      <option value="">선택하세요</option>
      <option value="1">레드</option>
      <option value="2" disabled>블루</option>
    </select>
  </div>
  <div class="lOptionGroup">
    <span class="lOptionName">사이즈</span>
    <select><option value="">선택하세요</option></select>
  </div>
</div>
<div id="lInfoViewItemInfo"><table>
  <tr><th>KC 생활용품 인증</th><td>CB000-0000</td></tr>
  <tr><th>수입자</th><td>(주)도매상사</td></tr>
</table></div>
</body></html>
"""

OWNERCLAN_URL = "https://ownerclan.com/V2/product/view.php?selfcode=W123456"

OWNERCLAN_HTML = """
<html><body>
<div class="prd_name"><h2>대나무 도마 세트</h2></div>
<div class="prd_price"><span class="sale_price">8,900원</span></div>
<div class="prd_delivery"><span class="delivery_price">2,500원</span></div>
<div class="prd_img"><img src="https://img.ownerclan.com/W123456/main.jpg"></div>
</body></html>
"""

SPECIALB2B_URL = "https://specialb2b.com/goods/goods_view.php?goodsNo=1000012345"

SPECIALB2B_HTML = """
<html><body>
<div class="item_detail_tit"><h3>휴대용 손선풍기</h3></div>
<dl class="item_price"><dd><strong>6,500원</strong></dd></dl>
<div class="item_photo_big"><img src="https://cdn.specialb2b.com/goods/1000012345/big.jpg"></div>
</body></html>
"""

EMPTY_HTML = "<html><body><p>요청하신 페이지를 찾을 수 없습니다.</p></body></html>"


@pytest.fixture
def sample_record():
    return RawProductRecord(
        url=COUPANG_URL,
        site="coupang",
        captured_on="2025-01-15",
        product_code="111222",
        title="국산 참기름 750ml",
        brand="고소한집",
        weight_kg="0.75",
        purchase_price="19,800원",
        shipping_fee="3000",
        main_image="https://thumbnail6.coupangcdn.com/thumbnails/remote/492x492ex/image/main.jpg",
        images=["https://thumbnail6.coupangcdn.com/thumbnails/remote/492x492ex/image/main.jpg"],
        options=[
            OptionGroup(
                name="색상",
                items=[
                    OptionItem(label="블랙", price_text="19,800원"),
                    OptionItem(label="화이트", price_text="19,800원", sold_out=True),
                ],
            )
        ],
        manufacturer="(주)참기름공방",
        origin_detail="대한민국",
    )


@pytest.fixture
def store(tmp_path):
    with RecordStore(str(tmp_path / "records.db")) as s:
        yield s
