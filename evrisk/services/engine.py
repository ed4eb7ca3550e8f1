"""Scoring engine - the single entry point the HTTP layer calls.

    score(input, as_of_year) → BuyConfidence

Pure and synchronous. The same reference snapshot, input and ``as_of_year``
always produce an equal result; the engine never reads the clock.
"""

from evrisk.models.scoring import BuyConfidence, ScoringInput
from evrisk.services.battery_risk import calculate_battery_risk
from evrisk.services.confidence import aggregate
from evrisk.services.ownership_fit import calculate_ownership_fit
from evrisk.services.platform_risk import calculate_platform_risk
from evrisk.services.reference_data import ReferenceData, get_reference_data
from evrisk.services.resolver import EntityResolver


class ScoringEngine:
    """Scores vehicles against one immutable reference snapshot."""

    def __init__(self, reference: ReferenceData) -> None:
        self.reference = reference
        self.resolver = EntityResolver(reference)

    def score(self, scoring_input: ScoringInput, as_of_year: int) -> BuyConfidence:
        """Buy Confidence for one vehicle.

        Args:
            scoring_input: Range-checked buyer input (not re-validated here)
            as_of_year: Calendar year vehicle age is measured against

        Returns:
            BuyConfidence with the three sub-scores attached. Missing
            reference data falls back to neutral or conservative defaults
            instead of raising.
        """
        battery = calculate_battery_risk(scoring_input, self.resolver, as_of_year)
        platform = calculate_platform_risk(scoring_input, self.resolver)
        ownership = calculate_ownership_fit(scoring_input, self.resolver)
        return aggregate(battery, platform, ownership, scoring_input.risk_tolerance)


def score(
    scoring_input: ScoringInput,
    as_of_year: int,
    reference: ReferenceData | None = None,
) -> BuyConfidence:
    """Score with ``reference``, or the process-wide snapshot if omitted."""
    if reference is None:
        reference = get_reference_data()
    return ScoringEngine(reference).score(scoring_input, as_of_year)
