"""Entity Resolver - maps free-text vehicles and ZIP codes onto reference rows.

Matching rules:
  range       substring match on the canonical key; exact year first, then
              the most recent year
  recalls     model strings cross-match (either contains the other) and the
              year falls inside [year_start, year_end]
  owner data  exact key, then case-insensitive key, then the tightest key
              containing the query
  ZIP tables  first three digits of the ZIP code

Every miss returns ``None`` (or an empty list); callers apply their own
neutral defaults.
"""

import logging

from evrisk.models.reference import (
    ChargerDensityRecord,
    ClimateZoneRecord,
    OwnerIssueCluster,
    RangeDeltaRecord,
    RecallRecord,
)
from evrisk.services.reference_data import ReferenceData
from evrisk.utils.vehicle_parsing import (
    match_rank,
    models_cross_match,
    normalize_model,
    zip_prefix,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Chemistry inference rules
# =============================================================================

DEFAULT_CHEMISTRY = "NMC"

# Model years from which the standard-range Model 3 ships with LFP cells
TESLA_LFP_FROM_YEAR = 2021
# Model years from which Model S/X moved from NCA to high-nickel NMC
TESLA_NMC_FROM_YEAR = 2021


def infer_chemistry(model: str, year: int) -> str:
    """Guess battery chemistry from the model name.

    Last-resort fallback used only when range data carries no chemistry.
    Rules are checked in order; anything unmatched is assumed to be NMC.

    Examples:
        >>> infer_chemistry("Tesla Model 3 Standard Range", 2022)
        'LFP'
        >>> infer_chemistry("Tesla Model Y", 2022)
        'NMC811'
        >>> infer_chemistry("Chevrolet Bolt", 2020)
        'NMC'
    """
    name = normalize_model(model)

    if "tesla" in name:
        if "model 3" in name and "standard" in name:
            return "LFP" if year >= TESLA_LFP_FROM_YEAR else "NCA"
        if "model 3" in name or "model y" in name:
            return "NMC811"
        if "model s" in name or "model x" in name:
            return "NMC811" if year >= TESLA_NMC_FROM_YEAR else "NCA"

    # BYD and Rivian standard packs are LFP
    if "byd" in name or ("rivian" in name and "standard" in name):
        return "LFP"

    # Lucid and Rivian Max packs are high-nickel
    if "lucid" in name or ("rivian" in name and "max" in name):
        return "NMC811"

    return DEFAULT_CHEMISTRY


# =============================================================================
# Resolver
# =============================================================================


class EntityResolver:
    """Read-only lookups against one reference snapshot."""

    def __init__(self, reference: ReferenceData) -> None:
        self.reference = reference

    def resolve_range(self, model: str, year: int) -> RangeDeltaRecord | None:
        """Best range-delta row for (model, year).

        Prefers a row for the requested year; otherwise the most recent
        generation. Rows tied on year go to the tightest model match.
        """
        query = normalize_model(model)
        if not query:
            return None

        matches = [
            row
            for row in self.reference.range_deltas
            if query in normalize_model(row.model)
        ]
        if not matches:
            logger.debug("No range data for model=%r", model)
            return None

        exact = [row for row in matches if row.year == year]
        if exact:
            return min(exact, key=lambda row: match_rank(query, row.model))

        latest = max(row.year for row in matches)
        return min(
            (row for row in matches if row.year == latest),
            key=lambda row: match_rank(query, row.model),
        )

    def resolve_recalls(self, model: str, year: int) -> list[RecallRecord]:
        """All recalls whose model cross-matches and whose years cover ``year``."""
        return [
            recall
            for recall in self.reference.recalls
            if models_cross_match(model, recall.model) and recall.covers_year(year)
        ]

    def resolve_owner_issues(self, model: str) -> OwnerIssueCluster | None:
        """Owner-issue cluster for a model.

        When several keys contain the query, the shortest key wins, then
        lexicographic order. Table order never decides.
        """
        clusters = self.reference.owner_issues
        if model in clusters:
            return clusters[model]

        query = normalize_model(model)
        if not query:
            return None

        candidates = [key for key in clusters if query in normalize_model(key)]
        if not candidates:
            logger.debug("No owner issue data for model=%r", model)
            return None

        exact = [key for key in candidates if normalize_model(key) == query]
        if exact:
            return clusters[min(exact)]
        return clusters[min(candidates, key=lambda key: match_rank(query, key))]

    def resolve_climate_zone(self, zip_code: str) -> ClimateZoneRecord | None:
        record = self.reference.climate_zones.get(zip_prefix(zip_code))
        if record is None:
            logger.debug("No climate zone for zip=%s", zip_code)
        return record

    def resolve_charger_density(self, zip_code: str) -> ChargerDensityRecord | None:
        record = self.reference.charger_density.get(zip_prefix(zip_code))
        if record is None:
            logger.debug("No charger density for zip=%s", zip_code)
        return record

    def resolve_chemistry(
        self, model: str, year: int, range_record: RangeDeltaRecord | None = None
    ) -> str:
        """Explicit chemistry from range data, else the inference rules."""
        if range_record is not None and range_record.chemistry:
            return range_record.chemistry
        return infer_chemistry(model, year)
