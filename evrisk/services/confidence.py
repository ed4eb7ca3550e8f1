"""Confidence Aggregator - weighted overall score, rating and breakdown."""

from evrisk.core.enums import (
    GREEN_THRESHOLD,
    TOLERANCE_ADJUSTMENT,
    TOLERANCE_BAND_HIGH,
    TOLERANCE_BAND_LOW,
    YELLOW_THRESHOLD,
    Rating,
    RiskTolerance,
)
from evrisk.models.scoring import (
    BatteryRiskScore,
    BuyConfidence,
    OwnershipFitScore,
    PlatformRiskScore,
)
from evrisk.utils.converters import clamp_score

# (emoji, label, recommendation) per rating
RATING_TEXT: dict[Rating, tuple[str, str, str]] = {
    Rating.GREEN: (
        "🟢",
        "Low Risk",
        "Low Risk - Good purchase candidate. "
        "Proceed with standard pre-purchase inspection.",
    ),
    Rating.YELLOW: (
        "🟡",
        "Moderate Risk",
        "Moderate Risk - Consider carefully. "
        "Get detailed battery health report and extended warranty if available.",
    ),
    Rating.RED: (
        "🔴",
        "High Risk",
        "High Risk - Proceed with caution. "
        "Budget for potential battery replacement or major repairs within 2-3 years.",
    ),
}


def weighted_score(
    battery: BatteryRiskScore,
    platform: PlatformRiskScore,
    ownership: OwnershipFitScore,
) -> int:
    return clamp_score(
        battery.score * battery.weight
        + platform.score * platform.weight
        + ownership.score * ownership.weight
    )


def apply_risk_tolerance(score: int, tolerance: RiskTolerance) -> int:
    """Shift borderline scores by the buyer's risk tolerance.

    Only scores in [60, 75) move: conservative buyers lose 10 points,
    aggressive buyers gain 10. A shift may cross a rating boundary.
    """
    if not TOLERANCE_BAND_LOW <= score < TOLERANCE_BAND_HIGH:
        return score
    if tolerance is RiskTolerance.CONSERVATIVE:
        return clamp_score(score - TOLERANCE_ADJUSTMENT)
    if tolerance is RiskTolerance.AGGRESSIVE:
        return clamp_score(score + TOLERANCE_ADJUSTMENT)
    return score


def rate(score: int) -> Rating:
    if score >= GREEN_THRESHOLD:
        return Rating.GREEN
    if score >= YELLOW_THRESHOLD:
        return Rating.YELLOW
    return Rating.RED


def aggregate(
    battery: BatteryRiskScore,
    platform: PlatformRiskScore,
    ownership: OwnershipFitScore,
    tolerance: RiskTolerance,
) -> BuyConfidence:
    """Combine the three sub-scores into a rated BuyConfidence."""
    raw = weighted_score(battery, platform, ownership)
    adjusted = apply_risk_tolerance(raw, tolerance)
    rating = rate(adjusted)
    emoji, label, recommendation = RATING_TEXT[rating]

    return BuyConfidence(
        overall_score=adjusted,
        weighted_score=raw,
        rating=rating,
        emoji=emoji,
        label=label,
        recommendation=recommendation,
        battery_risk=battery,
        platform_risk=platform,
        ownership_fit=ownership,
    )


def generate_risk_breakdown(confidence: BuyConfidence) -> list[str]:
    """Ordered report lines, one block per sub-score, rendered verbatim."""
    battery = confidence.battery_risk
    platform = confidence.platform_risk
    ownership = confidence.ownership_fit

    breakdown = [
        f"**Battery Risk ({battery.score}/100)** - Weight: {battery.weight:.0%}",
        f"• {battery.details}",
        f"• Estimated replacement cost: ${battery.estimated_replacement_cost:,}",
        "",
        f"**Platform Risk ({platform.score}/100)** - Weight: {platform.weight:.0%}",
        f"• {platform.details}",
    ]
    if platform.critical_recalls > 0:
        breakdown.append(
            f"• ⚠️ {platform.critical_recalls} critical recall(s) "
            "- verify completion with seller"
        )
    breakdown += [
        "",
        f"**Ownership Fit ({ownership.score}/100)** - Weight: {ownership.weight:.0%}",
        f"• {ownership.details}",
        "",
    ]
    return breakdown
