"""Enums for risk-scoring constants."""

from enum import Enum


class RiskTolerance(str, Enum):
    """Buyer's appetite for risk, used to nudge borderline scores."""

    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


class Rating(str, Enum):
    """Three-tier Buy Confidence rating."""

    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"


class ClimateZone(str, Enum):
    """Climate zone labels as they appear in climate_zones.csv."""

    EXTREME_HOT = "Extreme Hot"
    HOT = "Hot"
    HOT_HUMID = "Hot Humid"
    MODERATE = "Moderate"
    MILD = "Mild"
    COLD = "Cold"
    EXTREME_COLD = "Extreme Cold"

    @property
    def is_extreme(self) -> bool:
        return self in (ClimateZone.EXTREME_HOT, ClimateZone.EXTREME_COLD)

    @property
    def is_harsh(self) -> bool:
        """Hot, humid or cold, but not extreme."""
        return self in (ClimateZone.HOT, ClimateZone.HOT_HUMID, ClimateZone.COLD)


class Severity(str, Enum):
    """Severity level shared by recalls and owner-issue clusters."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Frequency(str, Enum):
    """How often owners report an issue category."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class DensityScore(str, Enum):
    """Public charging infrastructure density bucket."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    MODERATE = "Moderate"
    POOR = "Poor"
    UNKNOWN = "Unknown"


class ClimateImpact(str, Enum):
    """Ownership-fit classification of a climate zone."""

    FAVORABLE = "Favorable"
    MODERATE = "Moderate"
    CHALLENGING = "Challenging"


class RangeFit(str, Enum):
    """How comfortably the daily commute fits the real-world range."""

    GOOD = "Good"
    MODERATE = "Moderate"
    POOR = "Poor"


# Sub-score weights (must sum to 1.0)
BATTERY_WEIGHT = 0.4
PLATFORM_WEIGHT = 0.3
OWNERSHIP_WEIGHT = 0.3

# Rating bands applied to the adjusted score
GREEN_THRESHOLD = 75
YELLOW_THRESHOLD = 50

# Risk tolerance only shifts scores in [60, 75)
TOLERANCE_BAND_LOW = 60
TOLERANCE_BAND_HIGH = 75
TOLERANCE_ADJUSTMENT = 10
