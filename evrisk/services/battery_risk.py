"""Battery Risk Calculator.

Estimates capacity loss from age, excess mileage and climate, then maps it
onto a 0-100 score:

    degradation = (base_rate × age + excess_miles / 50k × 5) × climate_modifier

clamped to [0, 40]%. The score mapping is piecewise linear and deliberately
steep in the 12-20% band:

    0-12%   → 100-80
    12-20%  → 80-50
    20%+    → 50 - 2.5 per point, floored at 0
"""

import logging
from collections.abc import Mapping

from evrisk.core.enums import ClimateZone
from evrisk.models.reference import (
    BatteryChemistryProfile,
    DegradationThresholds,
    ReplacementCostTier,
)
from evrisk.models.scoring import BatteryRiskScore, ScoringInput
from evrisk.services.resolver import EntityResolver
from evrisk.utils.converters import clamp, clamp_score, round_tenth_half_up
from evrisk.utils.vehicle_parsing import normalize_model

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

MAX_DEGRADATION_PERCENT = 40.0

EXPECTED_MILES_PER_YEAR = 12_000
EXCESS_MILEAGE_STEP = 50_000  # miles
EXCESS_MILEAGE_PENALTY = 5.0  # % degradation per step

# Pre-2023 Leafs have an air-cooled pack with no thermal management
AIR_COOLED_MODEL = "leaf"
AIR_COOLED_LAST_YEAR = 2022
AIR_COOLED_RATE = 3.0  # %/year

EXTREME_CLIMATE_MODIFIER = 1.7
AIR_COOLED_EXTREME_HEAT_MODIFIER = 2.0
HARSH_CLIMATE_MODIFIER = 1.35

DEFAULT_BATTERY_KWH = 75

# Returned when the chemistry id has no profile
FALLBACK_SCORE = 50
FALLBACK_DEGRADATION = 20.0
FALLBACK_REPLACEMENT_COST = 12_000


# =============================================================================
# Degradation model
# =============================================================================


def annual_degradation_rate(
    model: str, year: int, profile: BatteryChemistryProfile
) -> float:
    """Base %/year capacity loss, with the air-cooled Leaf override."""
    if AIR_COOLED_MODEL in normalize_model(model) and year <= AIR_COOLED_LAST_YEAR:
        return AIR_COOLED_RATE
    return profile.degradation_rate_per_year


def mileage_penalty(current_mileage: int, vehicle_age: int) -> float:
    """Extra degradation (%) for miles beyond 12k/year.

    Examples:
        >>> mileage_penalty(36_000, 3)
        0.0
        >>> mileage_penalty(86_000, 3)
        5.0
    """
    expected = vehicle_age * EXPECTED_MILES_PER_YEAR
    excess = max(0, current_mileage - expected)
    return (excess / EXCESS_MILEAGE_STEP) * EXCESS_MILEAGE_PENALTY


def climate_modifier(zone: ClimateZone | None, model: str) -> float:
    """Multiplier applied to base degradation for the buyer's climate."""
    if zone is None:
        return 1.0
    if zone.is_extreme:
        if zone is ClimateZone.EXTREME_HOT and AIR_COOLED_MODEL in normalize_model(model):
            return AIR_COOLED_EXTREME_HEAT_MODIFIER
        return EXTREME_CLIMATE_MODIFIER
    if zone.is_harsh:
        return HARSH_CLIMATE_MODIFIER
    return 1.0


def degradation_to_score(degradation_percent: float) -> float:
    """Map degradation (%) onto the unrounded 0-100 battery score."""
    if degradation_percent <= 12:
        return 100 - (degradation_percent / 12) * 20
    if degradation_percent <= 20:
        return 80 - ((degradation_percent - 12) / 8) * 30
    return max(0.0, 50 - (degradation_percent - 20) * 2.5)


def degradation_level(
    degradation_percent: float, thresholds: DegradationThresholds | None
) -> str | None:
    """Label degradation as green/yellow/red using the file's thresholds."""
    if thresholds is None:
        return None
    green_max = thresholds.green.max_degradation_percent
    yellow_max = thresholds.yellow.max_degradation_percent
    if green_max is not None and degradation_percent <= green_max:
        return "green"
    if yellow_max is not None and degradation_percent <= yellow_max:
        return "yellow"
    return "red"


def replacement_cost(
    battery_kwh: int | None, tiers: Mapping[str, ReplacementCostTier]
) -> int:
    """Typical pack replacement cost (USD) for the pack's size bucket."""
    kwh = battery_kwh or DEFAULT_BATTERY_KWH
    if kwh < 60:
        tier = "compact"
    elif kwh < 80:
        tier = "midsize"
    elif kwh < 100:
        tier = "large"
    else:
        tier = "premium"
    return tiers[tier].typical_cost


# =============================================================================
# Calculator
# =============================================================================


def calculate_battery_risk(
    scoring_input: ScoringInput, resolver: EntityResolver, as_of_year: int
) -> BatteryRiskScore:
    """Battery sub-score (40% of the overall score)."""
    reference = resolver.reference
    range_record = resolver.resolve_range(scoring_input.model, scoring_input.year)
    chemistry = resolver.resolve_chemistry(
        scoring_input.model, scoring_input.year, range_record
    )

    profile = reference.chemistry_profiles.get(chemistry)
    if profile is None:
        logger.debug("Unknown chemistry %r for model=%r", chemistry, scoring_input.model)
        return BatteryRiskScore(
            score=FALLBACK_SCORE,
            degradation_percent=FALLBACK_DEGRADATION,
            estimated_replacement_cost=FALLBACK_REPLACEMENT_COST,
            chemistry="Unknown",
            degradation_level=degradation_level(
                FALLBACK_DEGRADATION, reference.thresholds
            ),
            details="Battery chemistry unknown - using conservative estimates",
        )

    vehicle_age = as_of_year - scoring_input.year
    base_rate = annual_degradation_rate(scoring_input.model, scoring_input.year, profile)
    base_degradation = base_rate * vehicle_age + mileage_penalty(
        scoring_input.current_mileage, vehicle_age
    )

    climate = resolver.resolve_climate_zone(scoring_input.zip_code)
    zone = climate.zone if climate else None
    modifier = climate_modifier(zone, scoring_input.model)

    degradation = clamp(base_degradation * modifier, 0.0, MAX_DEGRADATION_PERCENT)
    reported = round_tenth_half_up(degradation)

    details = (
        f"{chemistry} chemistry, {vehicle_age} years old, "
        f"{reported:.1f}% estimated degradation"
    )
    if modifier > 1 and zone is not None:
        details += f" ({zone.value} climate accelerates wear)"

    return BatteryRiskScore(
        score=clamp_score(degradation_to_score(degradation)),
        degradation_percent=reported,
        estimated_replacement_cost=replacement_cost(
            range_record.battery_kwh if range_record else None,
            reference.replacement_costs,
        ),
        chemistry=chemistry,
        degradation_level=degradation_level(degradation, reference.thresholds),
        details=details,
    )
