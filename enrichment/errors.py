"""Errors raised at the AI enrichment boundary."""

from typing import Optional


class EnrichmentError(Exception):
    """Base class for enrichment failures. Never retried automatically."""

    status: Optional[int] = None


class MissingCredentialError(EnrichmentError):
    def __init__(self):
        super().__init__(
            "Gemini API 키가 설정되지 않았습니다. 설정에서 API 키를 입력해주세요."
        )


class TransportError(EnrichmentError):
    """The request never produced an HTTP response."""


class UpstreamHttpError(EnrichmentError):
    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"Gemini API 오류 (HTTP {status}): {message}")


class ContentBlockedError(EnrichmentError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Gemini 응답이 안전성 정책에 의해 차단되었습니다: {reason}")


class ResponseParseError(EnrichmentError):
    """Model output was not valid JSON. Handled inside parse_response."""
