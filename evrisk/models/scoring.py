from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from evrisk.core.enums import (
    BATTERY_WEIGHT,
    OWNERSHIP_WEIGHT,
    PLATFORM_WEIGHT,
    ClimateImpact,
    Rating,
    RangeFit,
    RiskTolerance,
)


class ScoringInput(BaseModel):
    """One buyer's vehicle + situation. Assumed already range-checked."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    model: str
    year: int
    current_mileage: int = Field(alias="currentMileage")
    zip_code: str = Field(alias="zipCode")
    daily_miles: int = Field(alias="dailyMiles")
    home_charging: bool = Field(alias="homeCharging")
    risk_tolerance: RiskTolerance = Field(
        default=RiskTolerance.MODERATE, alias="riskTolerance"
    )


class SubScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int  # 0 - 100
    weight: float
    details: str


class BatteryRiskScore(SubScore):
    weight: float = BATTERY_WEIGHT
    degradation_percent: float  # 0 - 40, one decimal
    estimated_replacement_cost: int  # USD
    chemistry: str
    degradation_level: Optional[str] = None  # "green", "yellow", "red"


class PlatformRiskScore(SubScore):
    weight: float = PLATFORM_WEIGHT
    critical_recalls: int
    total_recalls: int
    reliability_score: float  # 0 - 10
    issue_categories: Optional[int] = None


class OwnershipFitScore(SubScore):
    weight: float = OWNERSHIP_WEIGHT
    climate_impact: ClimateImpact
    charger_density: str
    annual_miles_fit: RangeFit
    real_world_range_mi: int


class BuyConfidence(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_score: int  # 0 - 100, after risk-tolerance adjustment
    weighted_score: int  # 0 - 100, before adjustment
    rating: Rating
    emoji: str
    label: str  # "Low Risk", "Moderate Risk", "High Risk"
    recommendation: str
    battery_risk: BatteryRiskScore
    platform_risk: PlatformRiskScore
    ownership_fit: OwnershipFitScore


class ReportSummary(BaseModel):
    """Summary view of a scored report (PDF audience)."""

    vehicle_year: int
    vehicle_model: str
    score: int
    rating: Rating
    level: str  # "green", "yellow", "red"
    summary_verdict: str
    battery_risk_explanation: list[str]
    platform_recall_risk: list[str]
    ownership_fit: list[str]
    dealer_questions: list[str]
    walk_away_triggers: list[str]
    warranty_notes: list[str] = []
