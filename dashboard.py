"""K-finder sourcing dashboard: Streamlit entrypoint.

Run:
    streamlit run dashboard.py
"""

import pandas as pd
import streamlit as st
from dotenv import load_dotenv

load_dotenv()

from config import DB_PATH, DEFAULT_MARGIN_RATE, GEMINI_API_KEY_SETTING, SITES
from dispatcher import UnsupportedSiteError, extract_from_html, extract_from_url
from enrichment.gemini import analyze_product, describe_failure, test_credential
from models import ExtractionFailure
from normalize import compute_sale_price
from store import RecordStore, export_filename

st.set_page_config(page_title="K-finder 소싱 대시보드", page_icon="🛒", layout="wide")

EDITABLE_FIELDS = {
    "title": "물품명",
    "brand": "브랜드",
    "weight_kg": "무게",
    "purchase_price": "구입가",
    "sale_price": "판매가",
    "shipping_fee": "배송비",
    "manufacturer": "제조사",
    "origin_detail": "원산지세부",
}


state = st.session_state
state.setdefault("record", None)
state.setdefault("enrichment", None)


# --- Extract ---
def render_extract(store: RecordStore):
    url = st.text_input("상품 URL", placeholder="https://www.coupang.com/vp/products/...")
    uploaded = st.file_uploader("저장한 페이지 HTML (선택)", type=["html", "htm"])
    margin = st.number_input("마진율 (%)", min_value=0, max_value=500, value=DEFAULT_MARGIN_RATE)

    if st.button("페이지 스캔", type="primary", disabled=not url):
        try:
            with st.spinner("상품 정보를 추출하는 중..."):
                result = extract_from_html(url, uploaded.getvalue()) if uploaded else extract_from_url(url)
        except UnsupportedSiteError as e:
            st.error(str(e))
        else:
            if isinstance(result, ExtractionFailure):
                st.error(f"오류: {result.message}")
            else:
                state.record = result
                state.enrichment = None
                st.success("상품 정보 추출 완료!")

    record = state.record
    if record is not None:
        st.caption(f"{SITES[record.site]['display_name']} · {record.product_code} · {record.captured_on}")
        edits = {}
        cols = st.columns(2)
        for i, (field_name, label) in enumerate(EDITABLE_FIELDS.items()):
            default = getattr(record, field_name, None) or ""
            if field_name == "sale_price":
                default = compute_sale_price(record.purchase_price, margin)
            edits[field_name] = cols[i % 2].text_input(label, value=default, key=f"edit_{field_name}")

        if record.options:
            st.subheader("옵션")
            for group in record.options:
                badges = []
                for item in group.items:
                    badge = item.label
                    if item.price_text and item.price_text != item.label:
                        badge += f" ({item.price_text})"
                    badges.append(f"~~{badge}~~" if item.sold_out else badge)
                st.markdown(f"**{group.name}**: " + " · ".join(badges))

        if record.images:
            st.subheader(f"대표이미지 ({len(record.images)}개)")
            st.image(record.images, width=120)
        if record.detail_images:
            st.subheader(f"상세이미지 ({len(record.detail_images)}개)")
            st.image(record.detail_images[:10], width=120)

        if st.button("AI 분석"):
            with st.spinner("AI가 상품을 분석하는 중..."):
                analysis = analyze_product(record, store=store)
            if analysis.success:
                state.enrichment = analysis.data
                st.success("AI 분석 완료!")
            else:
                message = describe_failure(analysis.status, analysis.error) if analysis.status else analysis.error
                st.error(f"AI 분석 오류: {message}")

        enrichment = state.enrichment
        if enrichment is not None:
            st.subheader(enrichment.product_name_en)
            st.write(enrichment.description_en)
            st.write("Categories: " + ", ".join(enrichment.categories))
            st.write("Keywords: " + ", ".join(enrichment.keywords))
            pricing = enrichment.pricing_strategy
            st.info(f"${pricing.min_usd} - ${pricing.max_usd} · {pricing.recommendation}")
            weight = enrichment.weight
            if weight.is_adjusted:
                st.warning(f"무게 보정: {weight.original_kg} kg → {weight.estimated_kg} kg ({weight.reason})")
            risks = enrichment.risk_flags.detected()
            if risks:
                st.error("배송 리스크: " + ", ".join(risks) + f" ({enrichment.risk_flags.overall_risk_comment})")
            st.json(enrichment.to_dict(), expanded=False)

        if st.button("상품 저장"):
            key = store.save(record, enrichment, edits=edits, margin_rate=margin)
            st.success(f"상품이 저장되었습니다! ({key})")


# --- Saved list ---
def render_saved(store: RecordStore):
    records = store.list_records()
    st.metric("저장된 상품", len(records))
    if records:
        df = pd.DataFrame(records)
        columns = [c for c in ["id", "captured_on", "site", "title", "brand", "weight_kg", "purchase_price", "sale_price"] if c in df]
        st.dataframe(df[columns], use_container_width=True, hide_index=True)

        c1, c2, c3 = st.columns(3)
        to_delete = c1.selectbox("삭제할 상품", [r["id"] for r in records])
        if c1.button("삭제"):
            store.delete(to_delete)
            st.rerun()
        c2.download_button(
            "CSV 내보내기",
            data=store.export_csv(records),
            file_name=export_filename(),
            mime="text/csv",
        )
        if c3.button("전체 삭제"):
            store.clear_all()
            st.rerun()
    else:
        st.caption("저장된 상품 없음")


# --- Settings ---
def render_settings(store: RecordStore):
    saved_key = store.get_setting(GEMINI_API_KEY_SETTING) or ""
    st.caption("✅ 저장됨" if saved_key else "⚠️ 미설정")
    api_key = st.text_input("Gemini API 키", value=saved_key, type="password")
    if st.button("저장 & 테스트"):
        if not api_key.strip():
            st.error("API 키를 입력해주세요.")
        else:
            store.set_setting(GEMINI_API_KEY_SETTING, api_key.strip())
            with st.spinner("검증 중..."):
                check = test_credential(api_key.strip())
            if check.ok:
                st.success("Gemini API 키가 저장되고 검증되었습니다.")
            else:
                st.error(describe_failure(check.status, check.error_message))


tab_extract, tab_list, tab_settings = st.tabs(["상품 추출", "저장 목록", "설정"])

with RecordStore(DB_PATH) as store:
    with tab_extract:
        render_extract(store)
    with tab_list:
        render_saved(store)
    with tab_settings:
        render_settings(store)
