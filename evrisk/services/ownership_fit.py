"""Ownership Fit Calculator.

Starts at 100 and subtracts penalties for climate, charging access, how much
of the real-world range the daily commute uses, and high annual mileage.
"""

from evrisk.core.enums import ClimateImpact, ClimateZone, DensityScore, RangeFit
from evrisk.models.scoring import OwnershipFitScore, ScoringInput
from evrisk.services.resolver import EntityResolver
from evrisk.utils.converters import clamp_score

# =============================================================================
# Penalty tables
# =============================================================================

CLIMATE_PENALTY: dict[ClimateImpact, int] = {
    ClimateImpact.CHALLENGING: 25,
    ClimateImpact.MODERATE: 15,
    ClimateImpact.FAVORABLE: 0,
}

# Public charging is the only option without home charging
NO_HOME_CHARGING_PENALTY: dict[DensityScore, int] = {
    DensityScore.POOR: 50,
    DensityScore.MODERATE: 35,
    DensityScore.GOOD: 25,
    DensityScore.EXCELLENT: 20,
    DensityScore.UNKNOWN: 30,
}

HOME_CHARGING_PENALTY: dict[DensityScore, int] = {
    DensityScore.POOR: 10,
    DensityScore.MODERATE: 5,
    DensityScore.UNKNOWN: 3,
    DensityScore.GOOD: 0,
    DensityScore.EXCELLENT: 0,
}

# Used when the ZIP prefix has no charger-density row
DEFAULT_DENSITY = DensityScore.MODERATE
DEFAULT_REAL_WORLD_RANGE = 250  # miles

# Share of real-world range used by the daily commute
POOR_RANGE_RATIO = 0.7
MODERATE_RANGE_RATIO = 0.5
RANGE_FIT_PENALTY: dict[RangeFit, int] = {
    RangeFit.POOR: 30,
    RangeFit.MODERATE: 15,
    RangeFit.GOOD: 0,
}

HIGH_ANNUAL_MILES = 20_000
ELEVATED_ANNUAL_MILES = 15_000


# =============================================================================
# Factors
# =============================================================================


def classify_climate(zone: ClimateZone | None) -> ClimateImpact:
    if zone is None:
        return ClimateImpact.FAVORABLE
    if zone.is_extreme:
        return ClimateImpact.CHALLENGING
    if zone.is_harsh:
        return ClimateImpact.MODERATE
    return ClimateImpact.FAVORABLE


def charging_penalty(density: DensityScore, home_charging: bool) -> int:
    table = HOME_CHARGING_PENALTY if home_charging else NO_HOME_CHARGING_PENALTY
    return table[density]


def classify_range_fit(daily_miles: int, real_world_range: int) -> RangeFit:
    """Bucket the commute by the share of range it consumes.

    Examples:
        >>> classify_range_fit(30, 250)
        <RangeFit.GOOD: 'Good'>
        >>> classify_range_fit(150, 250)
        <RangeFit.MODERATE: 'Moderate'>
    """
    ratio = daily_miles / real_world_range
    if ratio > POOR_RANGE_RATIO:
        return RangeFit.POOR
    if ratio > MODERATE_RANGE_RATIO:
        return RangeFit.MODERATE
    return RangeFit.GOOD


def annual_mileage_penalty(daily_miles: int) -> int:
    annual_miles = daily_miles * 365
    if annual_miles > HIGH_ANNUAL_MILES:
        return 10
    if annual_miles > ELEVATED_ANNUAL_MILES:
        return 5
    return 0


# =============================================================================
# Calculator
# =============================================================================


def calculate_ownership_fit(
    scoring_input: ScoringInput, resolver: EntityResolver
) -> OwnershipFitScore:
    """Ownership-fit sub-score (30% of the overall score)."""
    climate = resolver.resolve_climate_zone(scoring_input.zip_code)
    chargers = resolver.resolve_charger_density(scoring_input.zip_code)
    range_record = resolver.resolve_range(scoring_input.model, scoring_input.year)

    climate_impact = classify_climate(climate.zone if climate else None)
    density = chargers.density_score if chargers else DEFAULT_DENSITY
    real_world_range = (
        range_record.real_world_range_mi
        if range_record and range_record.real_world_range_mi
        else DEFAULT_REAL_WORLD_RANGE
    )
    range_fit = classify_range_fit(scoring_input.daily_miles, real_world_range)

    score = 100
    score -= CLIMATE_PENALTY[climate_impact]
    score -= charging_penalty(density, scoring_input.home_charging)
    score -= RANGE_FIT_PENALTY[range_fit]
    score -= annual_mileage_penalty(scoring_input.daily_miles)

    home = "" if scoring_input.home_charging else " (no home charging)"
    details = (
        f"{climate_impact.value} climate, {density.value} charging infrastructure{home}, "
        f"{range_fit.value.lower()} daily range fit "
        f"({scoring_input.daily_miles} mi/day vs {real_world_range} mi range)"
    )

    return OwnershipFitScore(
        score=clamp_score(score),
        climate_impact=climate_impact,
        charger_density=density.value,
        annual_miles_fit=range_fit,
        real_world_range_mi=real_world_range,
        details=details,
    )
