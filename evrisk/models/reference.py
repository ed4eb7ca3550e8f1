from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from evrisk.core.enums import ClimateZone, DensityScore, Frequency, Severity


class ReferenceRow(BaseModel):
    """Base for immutable reference-table rows."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# battery_degradation.json
# ---------------------------------------------------------------------------


class BatteryChemistryProfile(ReferenceRow):
    id: str = ""  # filled from the chemistry_map key
    name: str
    manufacturers: tuple[str, ...] = ()
    degradation_rate_per_year: float  # % capacity lost per year
    description: str = ""


class ReplacementCostTier(ReferenceRow):
    name: str = ""  # compact / midsize / large / premium
    kwh_range: str
    typical_cost: int  # USD
    examples: tuple[str, ...] = ()


class DegradationBand(ReferenceRow):
    min_degradation_percent: Optional[float] = None
    max_degradation_percent: Optional[float] = None
    description: str = ""


class DegradationThresholds(ReferenceRow):
    green: DegradationBand
    yellow: DegradationBand
    red: DegradationBand


class WarrantyReference(ReferenceRow):
    standard_coverage: str = ""
    degradation_threshold: str = ""
    note: str = ""


# ---------------------------------------------------------------------------
# range_delta.csv
# ---------------------------------------------------------------------------


class RangeDeltaRecord(ReferenceRow):
    model: str
    year: int
    epa_range_mi: int
    real_world_range_mi: int
    delta_percent: float
    chemistry: str = ""
    battery_kwh: int = 0


# ---------------------------------------------------------------------------
# recalls.csv
# ---------------------------------------------------------------------------


class RecallRecord(ReferenceRow):
    manufacturer: str
    model: str
    year_start: int
    year_end: int
    recall_id: str
    issue_type: str
    severity: Severity
    description: str = ""
    units_affected: int = 0

    def covers_year(self, year: int) -> bool:
        return self.year_start <= year <= self.year_end


# ---------------------------------------------------------------------------
# owner_issue_clusters.json
# ---------------------------------------------------------------------------


class OwnerIssue(ReferenceRow):
    category: str
    frequency: Frequency
    issues: tuple[str, ...] = ()
    severity: Severity
    typical_age: str = ""


class OwnerIssueCluster(ReferenceRow):
    model: str = ""  # filled from the JSON key
    common_issues: tuple[OwnerIssue, ...] = ()
    reliability_score: float = Field(ge=0, le=10)


# ---------------------------------------------------------------------------
# climate_zones.csv / charger_density.csv
# ---------------------------------------------------------------------------


class ClimateZoneRecord(ReferenceRow):
    zip_prefix: str
    state: str = ""
    city: str = ""
    zone: ClimateZone
    avg_temp_f: int
    extreme_heat_days: int = 0
    extreme_cold_days: int = 0
    description: str = ""


class ChargerDensityRecord(ReferenceRow):
    zip_prefix: str
    state: str = ""
    region: str = ""
    dcfc_per_100k_pop: int
    l2_per_100k_pop: int
    density_score: DensityScore
    description: str = ""
