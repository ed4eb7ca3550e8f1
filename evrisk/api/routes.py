"""FastAPI route definitions for the EV-Risk scoring API."""

from datetime import datetime, timezone
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field, field_validator

from evrisk.api.deps import get_as_of_year, get_engine, limiter, scoring_rate_limit
from evrisk.core.enums import RiskTolerance
from evrisk.core.logging import log_error
from evrisk.models.scoring import BuyConfidence, ReportSummary, ScoringInput
from evrisk.services.confidence import generate_risk_breakdown
from evrisk.services.engine import ScoringEngine
from evrisk.services.report import build_report_summary

router = APIRouter()

# Oldest model year the reference data covers
MIN_MODEL_YEAR = 2010


# ---------------------------------------------------------------------------
# Request / Response Models
# ---------------------------------------------------------------------------


class ScoreRequest(BaseModel):
    """Raw buyer input. All range checks happen here, not in the engine."""

    model_config = ConfigDict(populate_by_name=True)

    model: str = Field(..., min_length=1, max_length=120)
    year: int = Field(..., ge=MIN_MODEL_YEAR, strict=True)
    current_mileage: int = Field(
        ..., alias="currentMileage", ge=0, le=300_000, strict=True
    )
    zip_code: str = Field(..., alias="zipCode", pattern=r"^\d{5}$")
    daily_miles: int = Field(..., alias="dailyMiles", ge=0, le=500, strict=True)
    home_charging: bool = Field(..., alias="homeCharging", strict=True)
    risk_tolerance: RiskTolerance = Field(..., alias="riskTolerance")

    @field_validator("model", "zip_code", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    def to_scoring_input(self) -> ScoringInput:
        return ScoringInput(
            model=self.model,
            year=self.year,
            current_mileage=self.current_mileage,
            zip_code=self.zip_code,
            daily_miles=self.daily_miles,
            home_charging=self.home_charging,
            risk_tolerance=self.risk_tolerance,
        )


class ScoreResponse(BaseModel):
    success: bool = True
    input: ScoringInput
    confidence: BuyConfidence
    breakdown: list[str]
    timestamp: str


def _check_model_year(year: int, as_of_year: int) -> None:
    if year > as_of_year:
        raise HTTPException(
            status_code=422,
            detail=f"year must be {MIN_MODEL_YEAR}-{as_of_year}",
        )


def _score(
    engine: ScoringEngine, scoring_input: ScoringInput, as_of_year: int
) -> BuyConfidence:
    try:
        return engine.score(scoring_input, as_of_year)
    except Exception as e:
        log_error("Scoring failed", e, model=scoring_input.model, year=scoring_input.year)
        raise HTTPException(
            status_code=500, detail="Internal server error calculating score"
        )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("/score", response_model=ScoreResponse)
@limiter.limit(scoring_rate_limit)
async def score_vehicle(
    request: Request,
    score_request: ScoreRequest,
    engine: Annotated[ScoringEngine, Depends(get_engine)],
    as_of_year: Annotated[int, Depends(get_as_of_year)],
):
    """Score one vehicle and return the Buy Confidence plus report breakdown."""
    _check_model_year(score_request.year, as_of_year)
    scoring_input = score_request.to_scoring_input()
    confidence = _score(engine, scoring_input, as_of_year)
    return ScoreResponse(
        input=scoring_input,
        confidence=confidence,
        breakdown=generate_risk_breakdown(confidence),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.post("/report/summary", response_model=ReportSummary)
@limiter.limit(scoring_rate_limit)
async def report_summary(
    request: Request,
    score_request: ScoreRequest,
    engine: Annotated[ScoringEngine, Depends(get_engine)],
    as_of_year: Annotated[int, Depends(get_as_of_year)],
):
    """Score one vehicle and return the summary view used by the PDF export."""
    _check_model_year(score_request.year, as_of_year)
    scoring_input = score_request.to_scoring_input()
    confidence = _score(engine, scoring_input, as_of_year)
    return build_report_summary(
        scoring_input, confidence, warranty=engine.reference.warranty
    )
