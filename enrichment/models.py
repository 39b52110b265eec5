"""Pydantic models for the AI enrichment overlay."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PricingStrategy(_Schema):
    min_usd: float = Field(0, alias="minUSD")
    max_usd: float = Field(0, alias="maxUSD")
    recommendation: str = "N/A"


class WeightAssessment(_Schema):
    original_kg: float = Field(0, alias="originalKG")
    estimated_kg: float = Field(0, alias="estimatedKG")
    is_adjusted: bool = Field(False, alias="isAdjusted")
    reason: str = "No analysis available"


class OptionStructure(_Schema):
    has_options: bool = Field(False, alias="hasOptions")
    tier_count: int = Field(0, alias="tierCount", ge=0, le=2)
    tier1_name: Optional[str] = Field(None, alias="tier1Name")
    tier1_values: list[str] = Field(default_factory=list, alias="tier1Values")
    tier2_name: Optional[str] = Field(None, alias="tier2Name")
    tier2_values: list[str] = Field(default_factory=list, alias="tier2Values")
    notes: str = "No option analysis available"


class RiskFlags(_Schema):
    has_battery: bool = Field(False, alias="hasBattery")
    is_liquid_or_gel: bool = Field(False, alias="isLiquidOrGel")
    is_magnet: bool = Field(False, alias="isMagnet")
    has_sharp_object: bool = Field(False, alias="hasSharpObject")
    other_risks: list[str] = Field(default_factory=list, alias="otherRisks")
    overall_risk_comment: str = Field("No risk screening available", alias="overallRiskComment")

    def detected(self) -> list[str]:
        """Human-readable list of every flagged risk."""
        risks = []
        if self.has_battery:
            risks.append("Battery")
        if self.is_liquid_or_gel:
            risks.append("Liquid/Gel")
        if self.is_magnet:
            risks.append("Magnet")
        if self.has_sharp_object:
            risks.append("Sharp Object")
        return risks + list(self.other_risks)


class AIEnrichment(_Schema):
    """Translation, marketing and shipping-risk overlay for one product.

    Every field has a default so a partially valid model response still
    yields a complete structure.
    """

    product_name_en: str = Field("Translation Error", alias="productNameEN")
    description_en: str = Field("", alias="descriptionEN")
    categories: list[str] = Field(default_factory=lambda: ["Others"])
    keywords: list[str] = Field(default_factory=list)
    selling_points: list[str] = Field(default_factory=list, alias="sellingPoints")
    pricing_strategy: PricingStrategy = Field(default_factory=PricingStrategy, alias="pricingStrategy")
    hashtags: list[str] = Field(default_factory=list)
    marketing_tips: str = Field("Please check the raw response in the log.", alias="marketingTips")
    weight: WeightAssessment = Field(default_factory=WeightAssessment)
    option_structure: OptionStructure = Field(default_factory=OptionStructure, alias="optionStructure")
    risk_flags: RiskFlags = Field(default_factory=RiskFlags, alias="riskFlags")

    def to_dict(self) -> dict:
        """camelCase dict, the same shape the model is asked to return."""
        return self.model_dump(by_alias=True)
