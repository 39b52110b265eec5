"""Gemini enrichment client: prompt, transport and response repair."""

import json
import logging
import os
import re
from copy import deepcopy
from dataclasses import asdict, dataclass
from itertools import takewhile
from typing import Any, Optional

import requests
from pydantic import ValidationError

from config import (
    CREDENTIAL_TEST_CONFIG,
    CREDENTIAL_TEST_PROMPT,
    DEFAULT_BRAND,
    DEFAULT_WEIGHT_KG,
    ENRICHMENT_TIMEOUT,
    GEMINI_API_ENDPOINT,
    GEMINI_API_KEY_ENV,
    GEMINI_API_KEY_SETTING,
    GENERATION_CONFIG,
    KRW_PER_USD,
    RAW_TEXT_FALLBACK_CHARS,
)
from enrichment.errors import (
    ContentBlockedError,
    EnrichmentError,
    MissingCredentialError,
    ResponseParseError,
    TransportError,
    UpstreamHttpError,
)
from enrichment.models import AIEnrichment
from models import RawProductRecord

logger = logging.getLogger(__name__)

_PROMPT_TEMPLATE = """You are a Shopee global e-commerce specialist. Analyze the following Korean product information and provide optimized data for Shopee international listing.

**Product Information:**
- Name (Korean): {name}
- Brand: {brand}
- Weight: {weight} kg
- Price: {price}
- Manufacturer: {manufacturer}
- Origin: {origin}
- Options: {options}

**Task:**
1. Translate the product name into English (SEO-optimized, under 120 characters)
2. Generate a compelling English product description (under 300 words, highlight key features and benefits)
3. Suggest 3 most suitable Shopee categories (in English)
4. Extract 5-8 relevant keywords for search optimization
5. Identify 3 key selling points (in English)
6. Suggest pricing strategy (competitive price range in USD, considering $1 = {krw_per_usd:,} KRW)
7. Recommend hashtags for Shopee social selling
8. Analyze the weight information:
   - If the original KG value seems missing or obviously wrong, estimate a realistic weight in KG based on the product type and description.
   - Explain briefly why you chose that weight.
9. Analyze the raw option data and convert it into a Shopee-style variation structure:
   - Detect whether the product has 0, 1, or 2 option tiers (e.g., Color / Size).
   - For each tier, suggest the tier name (in English) and a list of option values.
   - Summarize any price differences and sold-out options.
10. Perform a basic risk screening:
    - Flag if the product is likely to contain liquid/gel, built-in battery, strong magnet, sharp blade, or other shipping-restricted materials.
    - Return short warning messages for any detected risks.

**Output Format (JSON only, no markdown):**
{{
  "productNameEN": "English product name",
  "descriptionEN": "Detailed English description",
  "categories": ["Category 1", "Category 2", "Category 3"],
  "keywords": ["keyword1", "keyword2", "..."],
  "sellingPoints": ["Point 1", "Point 2", "Point 3"],
  "pricingStrategy": {{
    "minUSD": 0,
    "maxUSD": 0,
    "recommendation": "pricing strategy explanation"
  }},
  "hashtags": ["#tag1", "#tag2", "..."],
  "marketingTips": "Brief marketing advice for this product",
  "weight": {{
    "originalKG": 0,
    "estimatedKG": 0,
    "isAdjusted": false,
    "reason": ""
  }},
  "optionStructure": {{
    "hasOptions": false,
    "tierCount": 0,
    "tier1Name": null,
    "tier1Values": [],
    "tier2Name": null,
    "tier2Values": [],
    "notes": ""
  }},
  "riskFlags": {{
    "hasBattery": false,
    "isLiquidOrGel": false,
    "isMagnet": false,
    "hasSharpObject": false,
    "otherRisks": [],
    "overallRiskComment": ""
  }}
}}

Respond with valid JSON only. Do not include any markdown formatting or code blocks."""

REQUIRED_FIELDS = ("productNameEN", "descriptionEN", "categories", "keywords")

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)
_BLOCKED_FINISH_REASONS = {"SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST", "SPII"}


@dataclass
class EnrichmentResult:
    success: bool
    data: Optional[AIEnrichment] = None
    error: str = ""
    status: Optional[int] = None


@dataclass
class CredentialCheck:
    ok: bool
    status: Optional[int] = None
    error_message: str = ""


# --- Prompt ---

def build_prompt(record: RawProductRecord) -> str:
    """Serialize the fields the model needs into the analysis instruction."""
    options = [asdict(group) for group in record.options]
    return _PROMPT_TEMPLATE.format(
        name=record.title or "",
        brand=record.brand or DEFAULT_BRAND,
        weight=record.weight_kg or DEFAULT_WEIGHT_KG,
        price=record.purchase_price or "",
        manufacturer=record.manufacturer or "",
        origin=record.origin_detail or "",
        options=json.dumps(options, ensure_ascii=False, indent=2),
        krw_per_usd=KRW_PER_USD,
    )


def build_request_body(prompt: str, generation_config: Optional[dict] = None) -> dict:
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": dict(generation_config or GENERATION_CONFIG),
    }


# --- Transport ---

def resolve_api_key(api_key: Optional[str] = None, store=None) -> str:
    """Explicit key, then the environment, then the key saved in the record store."""
    if api_key:
        return api_key.strip()
    env_key = os.environ.get(GEMINI_API_KEY_ENV, "").strip()
    if env_key:
        return env_key
    if store is not None:
        return (store.get_setting(GEMINI_API_KEY_SETTING) or "").strip()
    return ""


def _post(api_key: str, body: dict) -> requests.Response:
    try:
        return requests.post(
            GEMINI_API_ENDPOINT,
            params={"key": api_key},
            json=body,
            headers={"Content-Type": "application/json"},
            timeout=ENRICHMENT_TIMEOUT,
        )
    except requests.RequestException as e:
        raise TransportError(f"Gemini API 요청 실패 (네트워크 오류): {e}") from e


def _error_message(resp: requests.Response) -> str:
    """Upstream error message from the JSON body, else the raw body text."""
    text = resp.text
    try:
        message = resp.json().get("error", {}).get("message")
    except (ValueError, AttributeError):
        return text
    return message or text


# --- Response handling ---

def _collect_parts(content: Any, parts: list[str]):
    if not content:
        return
    if isinstance(content, list):
        for item in content:
            _collect_parts(item, parts)
        return
    if not isinstance(content, dict):
        return
    for part in content.get("parts") or []:
        text = part.get("text") if isinstance(part, dict) else None
        if isinstance(text, str) and text.strip():
            parts.append(text.strip())


def extract_text(result: Any) -> str:
    """Pull generated text out of a Gemini response.

    Handles a flat `text` field and `candidates[].content.parts[].text`
    (content may also be a list). Raises ContentBlockedError when the
    response was blocked and has no text. Any other unknown shape is
    returned serialized so the parse stage can fall back.
    """
    if isinstance(result, str):
        return result.strip()
    if not isinstance(result, dict):
        return json.dumps(result, ensure_ascii=False)

    text = result.get("text")
    if isinstance(text, str) and text.strip():
        logger.debug("[gemini] Text extracted from result.text")
        return text.strip()

    parts: list[str] = []
    candidates = result.get("candidates") or []
    for candidate in candidates:
        if isinstance(candidate, dict):
            _collect_parts(candidate.get("content"), parts)
    if parts:
        logger.debug(f"[gemini] Text extracted from {len(parts)} candidate part(s)")
        return "\n".join(parts)

    feedback = result.get("promptFeedback") or {}
    if isinstance(feedback, dict) and feedback.get("blockReason"):
        raise ContentBlockedError(str(feedback["blockReason"]))
    for candidate in candidates:
        reason = candidate.get("finishReason") if isinstance(candidate, dict) else None
        if reason in _BLOCKED_FINISH_REASONS:
            raise ContentBlockedError(reason)

    logger.warning("[gemini] No text found in response, passing the raw response to the parser")
    return json.dumps(result, ensure_ascii=False)


def _strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    match = _CODE_FENCE_RE.match(cleaned)
    return match.group(1).strip() if match else cleaned


def _load_json(text: str) -> dict:
    try:
        data = json.loads(_strip_code_fence(text))
    except (json.JSONDecodeError, RecursionError) as e:
        raise ResponseParseError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ResponseParseError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _merge(defaults: dict, raw: dict) -> dict:
    """Overlay raw onto defaults key by key; nested objects merge recursively."""
    merged = dict(defaults)
    for key, default in defaults.items():
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(default, dict):
            if isinstance(value, dict):
                merged[key] = _merge(default, value)
            else:
                logger.warning(f"[gemini] Ignoring non-object value for '{key}'")
            continue
        merged[key] = value
    return merged


def _reset_path(merged: dict, defaults: dict, loc: tuple):
    """Restore the default at the deepest named key of a validation error path."""
    keys = list(takewhile(lambda part: isinstance(part, str), loc))
    target, source = merged, defaults
    for depth, key in enumerate(keys):
        last = depth == len(keys) - 1
        if last or not isinstance(target.get(key), dict):
            if key in source:
                target[key] = deepcopy(source[key])
            return
        target, source = target[key], source[key]


def _validate(merged: dict, defaults: dict) -> AIEnrichment:
    try:
        return AIEnrichment.model_validate(merged)
    except ValidationError as e:
        bad = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        logger.warning(f"[gemini] Resetting invalid fields to defaults: {', '.join(bad)}")
        for err in e.errors():
            _reset_path(merged, defaults, err["loc"])
    try:
        return AIEnrichment.model_validate(merged)
    except ValidationError as e:
        logger.warning(f"[gemini] Response still invalid after reset, using defaults: {e}")
        return AIEnrichment()


def parse_response(text: str) -> AIEnrichment:
    """Parse model output into a fully populated AIEnrichment. Never raises.

    Missing fields are filled from defaults. Output that is not JSON gives
    the default structure with the first characters of the raw text as the
    description.
    """
    try:
        raw = _load_json(text)
    except ResponseParseError as e:
        logger.warning(f"[gemini] Response parse failed, using fallback: {e}")
        logger.debug(f"[gemini] Raw response: {text}")
        return AIEnrichment(description_en=text[:RAW_TEXT_FALLBACK_CHARS])

    for field_name in REQUIRED_FIELDS:
        if not raw.get(field_name):
            logger.warning(f"[gemini] Response JSON is missing required field: {field_name}")

    defaults = AIEnrichment().to_dict()
    return _validate(_merge(defaults, raw), defaults)


# --- Public operations ---

def enrich(record: RawProductRecord, api_key: Optional[str] = None, store=None) -> AIEnrichment:
    """Call Gemini for one record and return the repaired enrichment.

    Raises MissingCredentialError, TransportError, UpstreamHttpError or
    ContentBlockedError. No retries.
    """
    key = resolve_api_key(api_key, store)
    if not key:
        raise MissingCredentialError()

    logger.info(f"[gemini] Analyzing '{record.title}' via {GEMINI_API_ENDPOINT}")
    resp = _post(key, build_request_body(build_prompt(record)))
    logger.info(f"[gemini] HTTP {resp.status_code}")

    if not resp.ok:
        message = _error_message(resp)
        logger.error(f"[gemini] HTTP {resp.status_code}: {message}")
        raise UpstreamHttpError(resp.status_code, message)

    try:
        result: Any = resp.json()
    except ValueError:
        result = resp.text
    logger.debug(f"[gemini] Raw response: {result}")

    text = extract_text(result)
    logger.debug(f"[gemini] Extracted text ({len(text)} chars): {text[:200]}")
    return parse_response(text)


def analyze_product(
    record: RawProductRecord, api_key: Optional[str] = None, store=None
) -> EnrichmentResult:
    """enrich() with failures converted into a tagged result."""
    try:
        data = enrich(record, api_key=api_key, store=store)
    except EnrichmentError as e:
        logger.error(f"[gemini] Analysis failed: {e}")
        return EnrichmentResult(success=False, error=str(e), status=e.status)
    logger.info("[gemini] Analysis complete")
    return EnrichmentResult(success=True, data=data)


def test_credential(api_key: str) -> CredentialCheck:
    """Probe the endpoint with a tiny request to validate a key. Never raises."""
    logger.info(f"[gemini] Testing key {api_key[:8]}...")
    body = build_request_body(CREDENTIAL_TEST_PROMPT, CREDENTIAL_TEST_CONFIG)
    try:
        resp = requests.post(
            GEMINI_API_ENDPOINT,
            params={"key": api_key},
            json=body,
            headers={"Content-Type": "application/json"},
            timeout=ENRICHMENT_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error(f"[gemini] Key test failed (network): {e}")
        return CredentialCheck(ok=False, status=None, error_message=str(e) or "Unknown error")

    if resp.ok:
        logger.info(f"[gemini] Key test succeeded (HTTP {resp.status_code})")
        return CredentialCheck(ok=True, status=resp.status_code)

    message = _error_message(resp)
    logger.error(f"[gemini] Key test failed - HTTP {resp.status_code}: {message}")
    return CredentialCheck(ok=False, status=resp.status_code, error_message=message)


def describe_failure(status: Optional[int], message: str = "") -> str:
    """User-facing message for a failed call, chosen by HTTP status."""
    if status in (401, 403):
        return f"API 키 또는 프로젝트 권한 문제일 수 있습니다. (HTTP {status}: {message})"
    if status == 404:
        return f"엔드포인트 또는 모델 이름이 올바른지 확인해주세요. (HTTP 404: {message})"
    if status == 429:
        return f"쿼터 또는 rate limit을 초과했을 수 있습니다. (HTTP 429: {message})"
    if status is not None and 500 <= status < 600:
        return f"Gemini 서버 측 오류입니다. 잠시 후 다시 시도해주세요. (HTTP {status})"
    if status is None:
        return f"네트워크 또는 연결 문제일 수 있습니다: {message}"
    return f"HTTP {status} 오류: {message}"
