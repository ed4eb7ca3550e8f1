"""Summary serialization of a scored vehicle for the PDF export.

Dealer questions and walk-away triggers are fixed boilerplate; they do not
depend on the score.
"""

from evrisk.models.reference import WarrantyReference
from evrisk.models.scoring import BuyConfidence, ReportSummary, ScoringInput

DEALER_QUESTIONS: tuple[str, ...] = (
    "Has the battery been replaced or serviced under warranty?",
    "Can you provide the current State of Health (SoH) percentage?",
    "Are all manufacturer recalls completed? Which ones remain?",
    "What is the remaining manufacturer warranty coverage?",
    "Has this vehicle been in any accidents or had flood damage?",
    "Can I get a pre-purchase inspection by a certified EV technician?",
    "What is the complete service history for this vehicle?",
)

WALK_AWAY_TRIGGERS: tuple[str, ...] = (
    "Battery State of Health (SoH) below 80%",
    "Any uncompleted safety recalls",
    "No documented service history available",
    "Seller refuses independent pre-purchase inspection",
    "Price significantly above market value",
    "Evidence of previous accident or flood damage",
    "Unusual battery degradation for vehicle age/mileage",
)


def build_report_summary(
    scoring_input: ScoringInput,
    confidence: BuyConfidence,
    warranty: WarrantyReference | None = None,
) -> ReportSummary:
    """Summary view of a scored vehicle.

    ``warranty`` adds the battery warranty reference notes when the
    reference data carries them.
    """
    battery = confidence.battery_risk
    platform = confidence.platform_risk
    ownership = confidence.ownership_fit

    return ReportSummary(
        vehicle_year=scoring_input.year,
        vehicle_model=scoring_input.model,
        score=confidence.overall_score,
        rating=confidence.rating,
        level=confidence.rating.value.lower(),
        summary_verdict=confidence.recommendation,
        battery_risk_explanation=[
            battery.details,
            f"Estimated degradation: {battery.degradation_percent}%",
            f"Replacement cost estimate: ${battery.estimated_replacement_cost:,}",
            f"Battery health score: {battery.score}/100",
        ],
        platform_recall_risk=[
            platform.details,
            f"Total recalls: {platform.total_recalls}",
            f"Critical recalls: {platform.critical_recalls}",
            f"Platform reliability score: {platform.score}/100",
        ],
        ownership_fit=[
            ownership.details,
            f"Climate impact: {ownership.climate_impact.value}",
            f"Charger density: {ownership.charger_density}",
            f"Range adequacy: {ownership.annual_miles_fit.value}",
        ],
        dealer_questions=list(DEALER_QUESTIONS),
        walk_away_triggers=list(WALK_AWAY_TRIGGERS),
        warranty_notes=_warranty_notes(warranty),
    )


def _warranty_notes(warranty: WarrantyReference | None) -> list[str]:
    if warranty is None:
        return []
    notes = []
    if warranty.standard_coverage:
        notes.append(f"Standard battery warranty: {warranty.standard_coverage}")
    if warranty.degradation_threshold:
        notes.append(f"Warranty claim threshold: {warranty.degradation_threshold}")
    if warranty.note:
        notes.append(warranty.note)
    return notes
