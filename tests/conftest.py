"""Shared fixtures: a small synthetic reference snapshot built in memory.

Numbers are chosen so expected scores can be worked out by hand; see the
scenario tests in test_engine.py.
"""

import pytest

from evrisk.core.enums import RiskTolerance
from evrisk.models.reference import (
    BatteryChemistryProfile,
    ChargerDensityRecord,
    ClimateZoneRecord,
    DegradationBand,
    DegradationThresholds,
    OwnerIssue,
    OwnerIssueCluster,
    RangeDeltaRecord,
    RecallRecord,
    ReplacementCostTier,
)
from evrisk.models.scoring import ScoringInput
from evrisk.services.engine import ScoringEngine
from evrisk.services.reference_data import ReferenceData
from evrisk.services.resolver import EntityResolver

AS_OF_YEAR = 2025


def chemistry_profiles() -> list[BatteryChemistryProfile]:
    # No plain "NMC" profile: the inference default falls back to the
    # conservative battery estimate.
    return [
        BatteryChemistryProfile(id="LFP", name="LFP", degradation_rate_per_year=1.2),
        BatteryChemistryProfile(id="NMC811", name="NMC811", degradation_rate_per_year=2.0),
        BatteryChemistryProfile(id="NMC622", name="NMC622", degradation_rate_per_year=2.3),
        BatteryChemistryProfile(id="NMC532", name="NMC532", degradation_rate_per_year=2.5),
        BatteryChemistryProfile(id="NCA", name="NCA", degradation_rate_per_year=2.2),
    ]


def replacement_costs() -> list[ReplacementCostTier]:
    return [
        ReplacementCostTier(name="compact", kwh_range="<60 kWh", typical_cost=9000),
        ReplacementCostTier(name="midsize", kwh_range="60-79 kWh", typical_cost=13000),
        ReplacementCostTier(name="large", kwh_range="80-99 kWh", typical_cost=16500),
        ReplacementCostTier(name="premium", kwh_range="100+ kWh", typical_cost=22000),
    ]


def thresholds() -> DegradationThresholds:
    return DegradationThresholds(
        green=DegradationBand(max_degradation_percent=10),
        yellow=DegradationBand(min_degradation_percent=10, max_degradation_percent=20),
        red=DegradationBand(min_degradation_percent=20),
    )


def range_deltas() -> list[RangeDeltaRecord]:
    def row(model, year, epa, real, chemistry, kwh):
        return RangeDeltaRecord(
            model=model,
            year=year,
            epa_range_mi=epa,
            real_world_range_mi=real,
            delta_percent=round((real - epa) / epa * 100, 1) if epa else 0.0,
            chemistry=chemistry,
            battery_kwh=kwh,
        )

    return [
        row("Tesla Model 3 Long Range", 2019, 310, 268, "NCA", 75),
        row("Tesla Model 3 Standard Range", 2022, 272, 230, "LFP", 60),
        row("Tesla Model 3 Long Range", 2022, 358, 300, "NMC811", 82),
        row("Nissan Leaf", 2018, 151, 128, "NMC532", 40),
        row("Nissan Leaf", 2022, 149, 125, "NMC532", 40),
        row("Chevrolet Bolt EV", 2020, 259, 229, "NMC622", 66),
        # No chemistry, no capacity, no range: every default kicks in
        row("Lucid Air", 2022, 0, 0, "", 0),
        row("Solid State Prototype", 2023, 400, 360, "SSB", 100),
    ]


def recalls() -> list[RecallRecord]:
    def recall(manufacturer, model, start, end, recall_id, severity):
        return RecallRecord(
            manufacturer=manufacturer,
            model=model,
            year_start=start,
            year_end=end,
            recall_id=recall_id,
            issue_type="Test",
            severity=severity,
        )

    return [
        recall("Tesla", "Model 3", 2017, 2023, "23V-001", "Medium"),
        recall("Tesla", "Model 3", 2017, 2020, "20V-002", "Low"),
        recall("Nissan", "Leaf", 2018, 2019, "19V-003", "Medium"),
        recall("Chevrolet", "Bolt EV", 2017, 2022, "21V-004", "Critical"),
        recall("Chevrolet", "Bolt EV", 2019, 2020, "20V-005", "High"),
    ]


def owner_issues() -> list[OwnerIssueCluster]:
    def issue(category, severity, frequency):
        return OwnerIssue(category=category, severity=severity, frequency=frequency)

    return [
        OwnerIssueCluster(
            model="Tesla Model 3",
            reliability_score=8.0,
            common_issues=(
                issue("Build Quality", "Low", "Medium"),  # 5
                issue("Suspension", "Medium", "Low"),  # 2
            ),
        ),
        OwnerIssueCluster(
            model="Nissan Leaf Plus",
            reliability_score=7.0,
            common_issues=(),
        ),
        OwnerIssueCluster(
            model="Nissan Leaf",
            reliability_score=6.8,
            common_issues=(
                issue("Battery Degradation", "High", "High"),  # 10
                issue("Charging", "Medium", "Medium"),  # 5
            ),
        ),
        OwnerIssueCluster(
            model="Chevrolet Bolt EV",
            reliability_score=7.0,
            common_issues=(issue("Battery Fire Risk", "Critical", "Low"),),  # 10
        ),
    ]


def climate_zones() -> list[ClimateZoneRecord]:
    def zone(prefix, name):
        return ClimateZoneRecord(zip_prefix=prefix, zone=name, avg_temp_f=60)

    return [
        zone("100", "Moderate"),
        zone("850", "Extreme Hot"),
        zone("554", "Extreme Cold"),
        zone("770", "Hot Humid"),
        zone("606", "Cold"),
        zone("941", "Mild"),
    ]


def charger_density() -> list[ChargerDensityRecord]:
    def density(prefix, score):
        return ChargerDensityRecord(
            zip_prefix=prefix,
            dcfc_per_100k_pop=5,
            l2_per_100k_pop=30,
            density_score=score,
        )

    return [
        density("100", "Moderate"),
        density("850", "Moderate"),
        density("554", "Poor"),
        density("606", "Good"),
        density("941", "Excellent"),
    ]


def build_reference(**overrides) -> ReferenceData:
    tables = {
        "chemistry_profiles": chemistry_profiles(),
        "replacement_costs": replacement_costs(),
        "range_deltas": range_deltas(),
        "recalls": recalls(),
        "owner_issues": owner_issues(),
        "climate_zones": climate_zones(),
        "charger_density": charger_density(),
        "thresholds": thresholds(),
    }
    tables.update(overrides)
    return ReferenceData.build(**tables)


def make_input(**overrides) -> ScoringInput:
    fields = {
        "model": "Tesla Model 3",
        "year": AS_OF_YEAR - 3,
        "current_mileage": 36_000,
        "zip_code": "10001",
        "daily_miles": 30,
        "home_charging": True,
        "risk_tolerance": RiskTolerance.MODERATE,
    }
    fields.update(overrides)
    return ScoringInput(**fields)


@pytest.fixture
def reference() -> ReferenceData:
    return build_reference()


@pytest.fixture
def resolver(reference) -> EntityResolver:
    return EntityResolver(reference)


@pytest.fixture
def engine(reference) -> ScoringEngine:
    return ScoringEngine(reference)
