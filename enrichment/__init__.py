"""AI enrichment of scraped records for foreign marketplace listings."""

from enrichment.gemini import analyze_product, enrich, parse_response, test_credential
from enrichment.models import AIEnrichment

__all__ = ["AIEnrichment", "analyze_product", "enrich", "parse_response", "test_credential"]
